from fabricflow.extensions import db
from .base import BaseModel


class Buyer(BaseModel):
    """买家 (客户)"""
    __tablename__ = 'buyers'
    code = db.Column(db.String(32), unique=True)
    name = db.Column(db.String(128), nullable=False)


class FabricIncoming(BaseModel):
    """来料批次，面料的款式与买家来源于此"""
    __tablename__ = 'fabric_incomings'
    code = db.Column(db.String(64), unique=True)
    style = db.Column(db.String(128))
    buyer_id = db.Column(db.Integer, db.ForeignKey('buyers.id'))

    buyer = db.relationship('Buyer')


class Fabric(BaseModel):
    """
    面料卷 (核心表)
    code 即二维码内容；yard/weight/width 按字符串存储
    """
    __tablename__ = 'fabrics'

    QC_PASS = 'pass'
    QC_FAIL = 'fail'
    QC_RESULTS = (QC_PASS, QC_FAIL)

    code = db.Column(db.String(64), unique=True, nullable=False, index=True)
    fabric_incoming_id = db.Column(db.Integer, db.ForeignKey('fabric_incomings.id'))
    color = db.Column(db.String(64))
    lot = db.Column(db.String(64))
    roll = db.Column(db.String(64))
    weight = db.Column(db.String(32))
    width = db.Column(db.String(32))
    yard = db.Column(db.String(32), nullable=False, default='0')

    # 当前存放位置
    block_id = db.Column(db.Integer, db.ForeignKey('m_blocks.id'))
    rack_id = db.Column(db.Integer, db.ForeignKey('m_racks.id'), index=True)

    # 松布位置与预计完成日期
    relaxation_block_id = db.Column(db.Integer, db.ForeignKey('m_relaxation_blocks.id'))
    relaxation_rack_id = db.Column(db.Integer, db.ForeignKey('m_relaxation_racks.id'))
    finish_date = db.Column(db.Date)

    qc_result = db.Column(db.String(8))
    status = db.Column(db.String(32))

    incoming = db.relationship('FabricIncoming')
    block = db.relationship('Block')
    rack = db.relationship('Rack')

    @property
    def buyer(self):
        if self.incoming and self.incoming.buyer:
            return self.incoming.buyer.name
        return '-'

    @property
    def style(self):
        if self.incoming and self.incoming.style:
            return self.incoming.style
        return '-'

    def to_dict(self):
        data = super().to_dict()
        data['buyer'] = self.buyer
        data['style'] = self.style
        if self.block is not None:
            data['block'] = {'id': self.block.id, 'name': self.block.name}
        return data

    def __repr__(self):
        return f'<Fabric {self.code}>'


class FabricStorage(BaseModel):
    """入库上架记录 (目标阶段为 inventory 时写入)"""
    __tablename__ = 'fabric_storages'

    fabric_id = db.Column(db.Integer, db.ForeignKey('fabrics.id'), nullable=False, index=True)
    block_id = db.Column(db.Integer, db.ForeignKey('m_blocks.id'), nullable=False)
    rack_id = db.Column(db.Integer, db.ForeignKey('m_racks.id'), nullable=False)
    inventory_movement_id = db.Column(db.Integer, db.ForeignKey('inventory_movements.id'))
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'))


class FabricRelaxation(BaseModel):
    """松布记录 (目标阶段为 relaxation 时写入)"""
    __tablename__ = 'fabric_relaxations'

    fabric_id = db.Column(db.Integer, db.ForeignKey('fabrics.id'), nullable=False, index=True)
    relaxation_block_id = db.Column(db.Integer, db.ForeignKey('m_relaxation_blocks.id'), nullable=False)
    relaxation_rack_id = db.Column(db.Integer, db.ForeignKey('m_relaxation_racks.id'), nullable=False)
    finish_date = db.Column(db.Date)
    inventory_movement_id = db.Column(db.Integer, db.ForeignKey('inventory_movements.id'))
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'))


class FabricControl(BaseModel):
    """质检记录 (目标阶段为 qc_fabric 时写入)"""
    __tablename__ = 'fabric_controls'

    fabric_id = db.Column(db.Integer, db.ForeignKey('fabrics.id'), nullable=False, index=True)
    result = db.Column(db.String(8), nullable=False)
    inventory_movement_id = db.Column(db.Integer, db.ForeignKey('inventory_movements.id'))
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'))


class FabricRackRelocation(BaseModel):
    """
    整架搬迁记录
    每卷面料最多一条未归档 (is_archived IS NULL) 记录
    """
    __tablename__ = 'fabric_rack_relocations'

    fabric_id = db.Column(db.Integer, db.ForeignKey('fabrics.id'), nullable=False, index=True)
    current_rack_id = db.Column(db.Integer, db.ForeignKey('m_racks.id'), nullable=False)
    new_rack_id = db.Column(db.Integer, db.ForeignKey('m_racks.id'), nullable=False)
    is_archived = db.Column(db.Integer, nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'))

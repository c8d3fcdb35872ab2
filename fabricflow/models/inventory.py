from fabricflow.extensions import db
from .base import BaseModel


class Stage:
    """面料流转阶段 (封闭集合)"""
    INVENTORY = 'inventory'
    RELAXATION = 'relaxation'
    CUTTING_WIP = 'cutting_wip'
    STOCK_FABRIC = 'stock_fabric'
    CNCM = 'cncm'
    WASHING = 'washing'
    RETURN_SUPPLIER = 'return_supplier'
    DESTROY = 'destroy'
    QC_FABRIC = 'qc_fabric'

    # 总览顺序与 ID 固定，前端依赖
    OVERVIEW = (
        (1, INVENTORY),
        (2, CUTTING_WIP),
        (3, STOCK_FABRIC),
        (4, CNCM),
        (5, WASHING),
        (6, RETURN_SUPPLIER),
        (7, DESTROY),
        (8, RELAXATION),
        (9, QC_FABRIC),
    )

    ALL = frozenset(name for _, name in OVERVIEW)

    @classmethod
    def is_valid(cls, name):
        return name in cls.ALL


class Inventory(BaseModel):
    """
    面料当前阶段指针
    每卷面料最多一条有效记录，首次流转时创建，之后只更新 stage
    """
    __tablename__ = 'inventories'

    fabric_id = db.Column(db.Integer, db.ForeignKey('fabrics.id'), nullable=False, index=True)
    stage = db.Column(db.String(32), nullable=False)
    ref_number = db.Column(db.String(64))
    remarks = db.Column(db.String(255))


class MovementType(BaseModel):
    """流转类型，名称与阶段一一对应"""
    __tablename__ = 'movement_types'
    name = db.Column(db.String(32), unique=True, nullable=False)


class InventoryMovement(BaseModel):
    """
    流转记录 (状态机核心表)
    status: starting -> finished，finished 行不可再改
    每卷面料任意时刻最多一条 starting 记录
    """
    __tablename__ = 'inventory_movements'

    STATUS_STARTING = 'starting'
    STATUS_FINISHED = 'finished'

    datetime = db.Column(db.DateTime, nullable=False)
    inventory_id = db.Column(db.Integer, db.ForeignKey('inventories.id'), nullable=False)
    movement_type_id = db.Column(db.Integer, db.ForeignKey('movement_types.id'), nullable=False)
    fabric_id = db.Column(db.Integer, db.ForeignKey('fabrics.id'), nullable=False, index=True)
    remarks = db.Column(db.String(255))
    status = db.Column(db.String(16), nullable=False, default=STATUS_STARTING, index=True)
    action_by = db.Column(db.Integer, db.ForeignKey('users.id'))

    time = db.relationship('InventoryMovementTime', uselist=False, backref='movement')
    entries = db.relationship('InventoryEntry', backref='movement', lazy='dynamic',
                              order_by='InventoryEntry.id')
    movement_type = db.relationship('MovementType')


class InventoryMovementTime(BaseModel):
    """流转起止时间，日期与时间分列存放供报表使用"""
    __tablename__ = 'inventory_movement_times'

    inventory_movement_id = db.Column(db.Integer, db.ForeignKey('inventory_movements.id'),
                                      nullable=False, unique=True)
    start_date = db.Column(db.Date, nullable=False)
    start_time = db.Column(db.Time, nullable=False)
    finish_date = db.Column(db.Date)
    finish_time = db.Column(db.Time)


class InventoryEntry(BaseModel):
    """流转明细：out = 跨阶段, actual = 同阶段重扫"""
    __tablename__ = 'inventory_entries'

    TYPE_OUT = 'out'
    TYPE_ACTUAL = 'actual'

    inventory_movement_id = db.Column(db.Integer, db.ForeignKey('inventory_movements.id'),
                                      nullable=False, index=True)
    type = db.Column(db.String(16), nullable=False)
    from_stage = db.Column(db.String(32), nullable=False, default='')
    to_stage = db.Column(db.String(32), nullable=False)

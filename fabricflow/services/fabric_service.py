"""面料查询服务"""
from sqlalchemy import and_
from sqlalchemy.orm import joinedload
from fabricflow.extensions import db
from fabricflow.models.fabric import Fabric, FabricIncoming
from fabricflow.models.inventory import Inventory


class FabricService:

    @staticmethod
    def find_with_inventory(code, lock=False):
        """
        按二维码查找面料及其当前阶段
        :param lock: True 时对面料行加 FOR UPDATE 锁，防止并发流转
        :return: (fabric, inventory) 或 (None, None)；没有阶段记录时 inventory 为 None
        """
        query = db.session.query(Fabric, Inventory).outerjoin(
            Inventory,
            and_(Inventory.fabric_id == Fabric.id, Inventory.live_filter())
        ).filter(Fabric.code == code, Fabric.live_filter())
        if lock:
            query = query.with_for_update(of=Fabric)
        row = query.order_by(Inventory.id.asc()).first()
        if row is None:
            return None, None
        return row[0], row[1]

    @staticmethod
    def list_by_rack(rack_id):
        """货架上的全部有效面料 (按 id 排序)"""
        return Fabric.live().options(
            joinedload(Fabric.block),
            joinedload(Fabric.incoming).joinedload(FabricIncoming.buyer),
        ).filter(Fabric.rack_id == rack_id).order_by(Fabric.id.asc()).all()

    @staticmethod
    def ids_on_rack(rack_id, lock=False):
        """货架上的有效面料 ID，可加行锁"""
        query = db.session.query(Fabric.id).filter(
            Fabric.rack_id == rack_id, Fabric.live_filter()
        ).order_by(Fabric.id.asc())
        if lock:
            query = query.with_for_update()
        return [fabric_id for (fabric_id,) in query.all()]

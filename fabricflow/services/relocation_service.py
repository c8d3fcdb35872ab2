"""整架搬迁服务 - 只改位置，不产生流转记录"""
from datetime import datetime
from flask import current_app
from fabricflow.extensions import db
from fabricflow.exceptions import Conflict
from fabricflow.models.fabric import Fabric, FabricRackRelocation
from fabricflow.services.fabric_service import FabricService
from fabricflow.services.placement_service import PlacementService
from fabricflow.utils.transaction import atomic


class RelocationService:

    @staticmethod
    def relocate(current_rack_id, new_rack_id, actor_id):
        """
        把 current_rack_id 上的全部面料搬到 new_rack_id
        旧的未归档搬迁记录归档，每卷面料写一条新记录
        :return: 被搬迁的面料 ID 列表
        """
        session = db.session
        with atomic():
            fabric_ids = FabricService.ids_on_rack(current_rack_id, lock=True)
            if not fabric_ids:
                raise Conflict('no fabric found in the selected current rack')

            if PlacementService.get_rack(new_rack_id) is None:
                raise Conflict('rack not found')

            now = datetime.now()
            for fabric_id in fabric_ids:
                Fabric.query.filter(Fabric.id == fabric_id).update({
                    Fabric.rack_id: new_rack_id,
                    Fabric.updated_at: now,
                }, synchronize_session='fetch')

                FabricRackRelocation.live().filter(
                    FabricRackRelocation.fabric_id == fabric_id,
                    FabricRackRelocation.is_archived.is_(None)
                ).update({
                    FabricRackRelocation.is_archived: 1,
                    FabricRackRelocation.updated_at: now,
                }, synchronize_session='fetch')

                session.add(FabricRackRelocation(
                    fabric_id=fabric_id,
                    current_rack_id=current_rack_id,
                    new_rack_id=new_rack_id,
                    created_by=actor_id,
                    created_at=now,
                    updated_at=now,
                ))
            session.flush()

        current_app.logger.info(
            f'整架搬迁完成: {current_rack_id} -> {new_rack_id} fabrics={len(fabric_ids)} actor={actor_id}'
        )
        return fabric_ids

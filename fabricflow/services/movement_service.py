"""
流转状态机服务
每卷面料: none -> starting -> finished ...，任意时刻最多一条 starting 记录
"""
from datetime import datetime
from flask import current_app
from fabricflow.extensions import db
from fabricflow.exceptions import Conflict
from fabricflow.models.inventory import (
    Inventory, MovementType, InventoryMovement, InventoryMovementTime, InventoryEntry
)


class MovementService:

    @staticmethod
    def build_remarks(on_stage, to_stage):
        """同阶段重扫记 'Return '，跨阶段记 'From '，原样入库供报表使用"""
        if on_stage == to_stage:
            return 'Return ' + on_stage
        return 'From ' + on_stage

    @staticmethod
    def entry_type(on_stage, to_stage):
        if on_stage == to_stage:
            return InventoryEntry.TYPE_ACTUAL
        return InventoryEntry.TYPE_OUT

    @staticmethod
    def resolve_movement_type_id(stage):
        """
        按阶段名查找 movement_types
        找不到时使用 MOVEMENT_TYPE_FALLBACK_ID，未配置则报错回滚
        """
        movement_type = MovementType.live().filter(MovementType.name == stage).first()
        if movement_type is not None:
            return movement_type.id

        fallback = current_app.config.get('MOVEMENT_TYPE_FALLBACK_ID')
        if fallback is None:
            raise Conflict(f'movement type {stage} is not registered')
        current_app.logger.warning(f'movement type {stage} 未登记，使用兜底 ID {fallback}')
        return fallback

    @staticmethod
    def lock_or_create_inventory(fabric_id, to_stage, now):
        """取面料的阶段记录并加行锁，没有则新建"""
        inventory = Inventory.live().filter(
            Inventory.fabric_id == fabric_id
        ).order_by(Inventory.id.asc()).with_for_update().first()

        if inventory is None:
            inventory = Inventory(fabric_id=fabric_id, stage=to_stage,
                                  created_at=now, updated_at=now)
            db.session.add(inventory)
            db.session.flush()
        return inventory

    @staticmethod
    def advance(fabric_id, to_stage, remarks, on_stage, actor_id, now=None):
        """
        推进一步状态机
        :param on_stage: 流转前阶段，首次流转为 ''
        :return: 新建 starting 记录的 ID
        """
        session = db.session
        now = now or datetime.now()
        today = now.date()
        clock = now.time().replace(microsecond=0)

        # 1. 阶段记录 (加锁)
        inventory = MovementService.lock_or_create_inventory(fabric_id, to_stage, now)

        # 2. 流转类型
        movement_type_id = MovementService.resolve_movement_type_id(to_stage)

        # 3. 当前 starting 记录
        previous = InventoryMovement.live().filter(
            InventoryMovement.fabric_id == fabric_id,
            InventoryMovement.status == InventoryMovement.STATUS_STARTING
        ).order_by(InventoryMovement.id.desc()).first()

        # 4. 先关闭旧记录，再开启新记录
        InventoryMovement.live().filter(
            InventoryMovement.fabric_id == fabric_id,
            InventoryMovement.status == InventoryMovement.STATUS_STARTING
        ).update({
            InventoryMovement.status: InventoryMovement.STATUS_FINISHED,
            InventoryMovement.updated_at: now,
        }, synchronize_session='fetch')

        # 5. 写入旧记录的结束时间
        if previous is not None:
            InventoryMovementTime.live().filter(
                InventoryMovementTime.inventory_movement_id == previous.id
            ).update({
                InventoryMovementTime.finish_date: today,
                InventoryMovementTime.finish_time: clock,
                InventoryMovementTime.updated_at: now,
            }, synchronize_session='fetch')

        # 6. 新 starting 记录
        movement = InventoryMovement(
            datetime=now,
            inventory_id=inventory.id,
            movement_type_id=movement_type_id,
            fabric_id=fabric_id,
            remarks=remarks,
            status=InventoryMovement.STATUS_STARTING,
            action_by=actor_id,
            created_at=now,
            updated_at=now,
        )
        session.add(movement)
        session.flush()

        # 7. 开始时间
        session.add(InventoryMovementTime(
            inventory_movement_id=movement.id,
            start_date=today,
            start_time=clock,
            created_at=now,
            updated_at=now,
        ))

        # 8. 流转明细
        session.add(InventoryEntry(
            inventory_movement_id=movement.id,
            type=MovementService.entry_type(on_stage, to_stage),
            from_stage=on_stage,
            to_stage=to_stage,
            created_at=now,
            updated_at=now,
        ))

        # 9. 更新阶段指针
        inventory.stage = to_stage
        inventory.updated_at = now
        session.flush()

        return movement.id

"""
阶段流转服务 (检查点核心)
一次请求的所有面料在同一事务中流转，任一条失败则整批回滚
"""
from datetime import date, datetime
from flask import current_app
from fabricflow.extensions import db
from fabricflow.exceptions import ValidationError, Conflict
from fabricflow.models.fabric import Fabric, FabricStorage, FabricRelaxation, FabricControl
from fabricflow.models.inventory import Stage
from fabricflow.services.fabric_service import FabricService
from fabricflow.services.movement_service import MovementService
from fabricflow.services.placement_service import PlacementService
from fabricflow.utils.numbers import parse_decimal, format_number
from fabricflow.utils.transaction import atomic

# yard 以字符串落库，格式化后不能超过列宽
YARD_MAX_LENGTH = Fabric.__table__.c.yard.type.length


class StageTransitionService:

    @staticmethod
    def _to_date(value, index):
        if value is None or value == '':
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return datetime.strptime(str(value).strip(), '%Y-%m-%d').date()
        except ValueError:
            raise ValidationError(
                'The finish date must be a date (YYYY-MM-DD).',
                payload={f'entries.{index}.finish_date': ['The finish date must be a date (YYYY-MM-DD).']}
            )

    @staticmethod
    def clean_entries(stage, entries):
        """
        校验并规整扫码明细
        :return: [{code, yard, finish_date, qc_result}, ...]
        """
        if not entries:
            raise ValidationError('The entries field is required.',
                                  payload={'entries': ['The entries field is required.']})

        cleaned = []
        for index, entry in enumerate(entries):
            code = (entry.get('code') or '').strip()
            if not code:
                raise ValidationError('The QR code is required.',
                                      payload={f'entries.{index}.code': ['The QR code is required.']})

            yard = entry.get('yard')
            if yard not in (None, ''):
                yard = parse_decimal(yard)
                if yard is None:
                    raise ValidationError('The yard must be a number.',
                                          payload={f'entries.{index}.yard': ['The yard must be a number.']})
                if abs(yard.adjusted()) >= YARD_MAX_LENGTH or len(format_number(yard)) > YARD_MAX_LENGTH:
                    raise ValidationError('The yard is out of range.',
                                          payload={f'entries.{index}.yard': ['The yard is out of range.']})
            else:
                yard = None

            qc_result = (entry.get('qc_result') or '').strip().lower() or None
            if qc_result is not None and qc_result not in Fabric.QC_RESULTS:
                raise ValidationError('The qc result must be pass or fail.',
                                      payload={f'entries.{index}.qc_result': ['The qc result must be pass or fail.']})

            finish_date = StageTransitionService._to_date(entry.get('finish_date'), index)
            if stage == Stage.RELAXATION and finish_date is None:
                raise ValidationError('The finish date is required.',
                                      payload={f'entries.{index}.finish_date': ['The finish date is required.']})

            cleaned.append({
                'code': code,
                'yard': yard,
                'finish_date': finish_date,
                'qc_result': qc_result,
            })
        return cleaned

    @staticmethod
    def validate(stage, entries, block_id=None, rack_id=None,
                 relaxation_block_id=None, relaxation_rack_id=None):
        """开启事务前的输入校验，失败抛 ValidationError"""
        if not Stage.is_valid(stage):
            raise ValidationError(f'invalid stage: {stage}',
                                  payload={'stage': ['The selected stage is invalid.']})

        if stage == Stage.INVENTORY:
            errors = {}
            if block_id is None:
                errors['block_id'] = ['The block id is required.']
            if rack_id is None:
                errors['rack_id'] = ['The rack id is required.']
            if errors:
                raise ValidationError('The block and rack are required.', payload=errors)

        if stage == Stage.RELAXATION:
            errors = {}
            if relaxation_block_id is None:
                errors['relaxation_block_id'] = ['The relaxation block id is required.']
            if relaxation_rack_id is None:
                errors['relaxation_rack_id'] = ['The relaxation rack id is required.']
            if errors:
                raise ValidationError('The relaxation block and rack are required.', payload=errors)

        return StageTransitionService.clean_entries(stage, entries)

    @staticmethod
    def _check_placement(stage, block_id, rack_id, relaxation_block_id, relaxation_rack_id):
        """目标区块/货架必须存在"""
        if stage == Stage.INVENTORY:
            if PlacementService.get_block(block_id) is None:
                raise Conflict('block not found')
            if PlacementService.get_rack(rack_id) is None:
                raise Conflict('rack not found')
        elif stage == Stage.RELAXATION:
            if PlacementService.get_relaxation_block(relaxation_block_id) is None:
                raise Conflict('relaxation block not found')
            if PlacementService.get_relaxation_rack(relaxation_rack_id) is None:
                raise Conflict('relaxation rack not found')

    @staticmethod
    def _write_placement(stage, fabric, entry, actor_id, block_id, rack_id,
                         relaxation_block_id, relaxation_rack_id):
        """按目标阶段写面料位置与对应日志，返回日志行 (无则 None)"""
        if stage == Stage.INVENTORY:
            fabric.block_id = block_id
            fabric.rack_id = rack_id
            if entry['yard'] is not None and entry['yard'] > 0:
                fabric.yard = format_number(entry['yard'])
            return FabricStorage(
                fabric_id=fabric.id,
                block_id=block_id,
                rack_id=rack_id,
                created_by=actor_id,
            )

        if stage == Stage.RELAXATION:
            fabric.relaxation_block_id = relaxation_block_id
            fabric.relaxation_rack_id = relaxation_rack_id
            fabric.finish_date = entry['finish_date']
            return FabricRelaxation(
                fabric_id=fabric.id,
                relaxation_block_id=relaxation_block_id,
                relaxation_rack_id=relaxation_rack_id,
                finish_date=entry['finish_date'],
                created_by=actor_id,
            )

        if stage == Stage.QC_FABRIC:
            result = entry['qc_result'] or Fabric.QC_PASS
            fabric.qc_result = result
            return FabricControl(
                fabric_id=fabric.id,
                result=result,
                created_by=actor_id,
            )

        return None

    @staticmethod
    def move_entry(stage, entry, actor_id, block_id=None, rack_id=None,
                   relaxation_block_id=None, relaxation_rack_id=None):
        """单卷面料流转，必须在事务内调用；返回新流转记录 ID"""
        session = db.session
        code = entry['code']

        # 1. 查面料并加锁
        fabric, inventory = FabricService.find_with_inventory(code, lock=True)
        if fabric is None:
            raise Conflict(f'QR code {code} is not found')

        # 2. 当前阶段
        on_stage = inventory.stage if inventory is not None else ''

        # 3. 位置与日志
        placement_log = StageTransitionService._write_placement(
            stage, fabric, entry, actor_id, block_id, rack_id,
            relaxation_block_id, relaxation_rack_id
        )
        if placement_log is not None:
            session.add(placement_log)
            session.flush()

        # 4-5. 推进状态机
        remarks = MovementService.build_remarks(on_stage, stage)
        movement_id = MovementService.advance(fabric.id, stage, remarks, on_stage, actor_id)

        # 6. 日志回填流转 ID
        if placement_log is not None:
            placement_log.inventory_movement_id = movement_id
            session.flush()

        return movement_id

    @staticmethod
    def move(stage, entries, actor_id, block_id=None, rack_id=None,
             relaxation_block_id=None, relaxation_rack_id=None):
        """
        批量流转到目标阶段
        :param entries: [{code, yard?, finish_date?, qc_result?}, ...]，按顺序处理
        :return: 新建流转记录 ID 列表
        """
        cleaned = StageTransitionService.validate(
            stage, entries, block_id, rack_id, relaxation_block_id, relaxation_rack_id
        )
        placement = dict(
            block_id=block_id,
            rack_id=rack_id,
            relaxation_block_id=relaxation_block_id,
            relaxation_rack_id=relaxation_rack_id,
        )

        current_app.logger.info(
            f'阶段流转开始: stage={stage} entries={len(cleaned)} actor={actor_id}'
        )
        movement_ids = []
        try:
            with atomic():
                StageTransitionService._check_placement(stage, **placement)
                for entry in cleaned:
                    movement_ids.append(
                        StageTransitionService.move_entry(stage, entry, actor_id, **placement)
                    )
        except Exception as e:
            current_app.logger.warning(f'阶段流转回滚: stage={stage} actor={actor_id} error={e}')
            raise

        current_app.logger.info(
            f'阶段流转完成: stage={stage} movements={movement_ids} actor={actor_id}'
        )
        return movement_ids

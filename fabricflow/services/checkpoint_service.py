"""检查点服务 - 扫码、流转、整架搬迁的对外入口"""
from fabricflow.exceptions import ValidationError, NotFound
from fabricflow.models.inventory import Stage
from fabricflow.services.fabric_service import FabricService
from fabricflow.services.placement_service import PlacementService
from fabricflow.services.relocation_service import RelocationService
from fabricflow.services.stage_service import StageTransitionService
from fabricflow.utils.numbers import sum_decimal


class CheckpointService:

    @staticmethod
    def get_overview():
        """全部阶段 (固定 ID)，不访问数据库"""
        return [{'id': stage_id, 'name': name} for stage_id, name in Stage.OVERVIEW]

    @staticmethod
    def scan_qr(code):
        """
        扫描面料二维码
        qc_result 只在 qc_fabric 阶段返回，finish_date 只在 relaxation 阶段返回
        """
        fabric, inventory = FabricService.find_with_inventory(code)
        if fabric is None:
            raise NotFound('QR code is not found')

        result = {
            'qr_code': fabric.code,
            'buyer': fabric.buyer,
            'style': fabric.style,
            'yard': fabric.yard,
        }

        stage = inventory.stage if inventory is not None else ''
        if stage == Stage.QC_FABRIC:
            result['qc_result'] = fabric.qc_result
        if stage == Stage.RELAXATION:
            result['finish_date'] = fabric.finish_date.isoformat() if fabric.finish_date else None
        return result

    @staticmethod
    def scan_rack(code):
        """扫描货架二维码，返回架上面料及汇总"""
        rack = PlacementService.get_rack_by_name(code)
        if rack is None:
            raise NotFound('rack not found')

        fabrics = FabricService.list_by_rack(rack.id)

        block_name = '-'
        for fabric in fabrics:
            if fabric.block is not None:
                block_name = fabric.block.name
                break

        return {
            'result': [fabric.to_dict() for fabric in fabrics],
            'summary': {
                'total_items': len(fabrics),
                'total_yard': float(sum_decimal(f.yard for f in fabrics)),
                'total_weight': float(sum_decimal(f.weight for f in fabrics)),
                'block_name': block_name,
                'rack_number': rack.name,
            },
        }

    @staticmethod
    def move_stage(stage, entries, actor_id, block_id=None, rack_id=None,
                   relaxation_block_id=None, relaxation_rack_id=None):
        """批量流转，全部成功返回 True"""
        StageTransitionService.move(
            stage, entries, actor_id,
            block_id=block_id,
            rack_id=rack_id,
            relaxation_block_id=relaxation_block_id,
            relaxation_rack_id=relaxation_rack_id,
        )
        return True

    @staticmethod
    def relocate(current_rack_id, new_rack_id, actor_id):
        """整架搬迁，源货架与目标货架不能相同"""
        if current_rack_id == new_rack_id:
            raise ValidationError(
                'The current rack and new rack must be different.',
                payload={'new_rack_id': ['The new rack must be different from the current rack.']}
            )
        RelocationService.relocate(current_rack_id, new_rack_id, actor_id)
        return True

"""货位服务 - 区块/货架查询"""
from fabricflow.models.master import Block, Rack, RelaxationBlock, RelaxationRack


class PlacementService:

    @staticmethod
    def get_block(block_id):
        return Block.live().filter(Block.id == block_id).first()

    @staticmethod
    def get_rack(rack_id):
        return Rack.live().filter(Rack.id == rack_id).first()

    @staticmethod
    def get_rack_by_name(name):
        """按二维码内容 (货架名) 精确匹配"""
        return Rack.live().filter(Rack.name == name).first()

    @staticmethod
    def get_relaxation_block(block_id):
        return RelaxationBlock.live().filter(RelaxationBlock.id == block_id).first()

    @staticmethod
    def get_relaxation_rack(rack_id):
        return RelaxationRack.live().filter(RelaxationRack.id == rack_id).first()

    @staticmethod
    def list_all(model):
        """主数据列表，只返回 id/name"""
        return [
            {'id': row.id, 'name': row.name}
            for row in model.live().order_by(model.id.asc()).all()
        ]

from fabricflow.blueprints.master import master_bp
from fabricflow.extensions import cache
from fabricflow.models.master import Block, Rack, RelaxationBlock, RelaxationRack
from fabricflow.services.placement_service import PlacementService
from fabricflow.utils.decorators import token_required
from fabricflow.utils.response import success_response

# 主数据变化少，短时间缓存
LIST_CACHE_TIMEOUT = 60

_MODELS = {
    'blocks': Block,
    'racks': Rack,
    'relaxation_blocks': RelaxationBlock,
    'relaxation_racks': RelaxationRack,
}


@cache.memoize(timeout=LIST_CACHE_TIMEOUT)
def _listing(kind):
    return PlacementService.list_all(_MODELS[kind])


@master_bp.route('/blocks')
@token_required
def blocks():
    return success_response('Successfully fetched blocks', _listing('blocks'))


@master_bp.route('/racks')
@token_required
def racks():
    return success_response('Successfully fetched racks', _listing('racks'))


@master_bp.route('/relaxation-blocks')
@token_required
def relaxation_blocks():
    return success_response('Successfully fetched relaxation blocks', _listing('relaxation_blocks'))


@master_bp.route('/relaxation-racks')
@token_required
def relaxation_racks():
    return success_response('Successfully fetched relaxation racks', _listing('relaxation_racks'))

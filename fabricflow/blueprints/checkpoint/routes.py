from flask import request
from flask_login import current_user
from fabricflow.blueprints.checkpoint import checkpoint_bp
from fabricflow.blueprints.checkpoint.forms import ScanForm, MoveForm, RelocationForm
from fabricflow.exceptions import Conflict, NotFound
from fabricflow.services.checkpoint_service import CheckpointService
from fabricflow.utils.decorators import token_required
from fabricflow.utils.response import success_response, error_response, form_errors
from fabricflow.utils.validators import json_form


def _json_body():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@checkpoint_bp.route('/overview', methods=['GET'])
@token_required
def overview():
    """阶段总览"""
    return success_response('Successfully fetched overview.', CheckpointService.get_overview())


@checkpoint_bp.route('/scan', methods=['POST'])
@token_required
def scan():
    """扫描面料二维码"""
    form = json_form(ScanForm, _json_body())
    if not form.validate():
        return error_response('The QR code is required.', {'code': ['The QR code is required.']})

    try:
        result = CheckpointService.scan_qr(form.code.data)
    except NotFound as e:
        return error_response('Failed to founded QR.', e.message, e.code)
    return success_response('Successfully founded QR.', result)


@checkpoint_bp.route('/move', methods=['POST'])
@token_required
def move():
    """
    批量流转到 ?stage= 指定阶段
    任一面料失败则整批回滚
    """
    stage = request.args.get('stage', '').strip()
    if not stage:
        return error_response('The stage is required.', {'stage': ['The stage is required.']})

    payload = _json_body()
    entries = payload.get('entries')
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        return error_response('The entries field is required.',
                              {'entries': ['The entries field is required.']})

    form = json_form(MoveForm, payload)
    if not form.validate():
        return error_response('The given data was invalid.', form_errors(form))

    try:
        CheckpointService.move_stage(
            stage,
            [entry.data for entry in form.entries],
            current_user.id,
            block_id=form.block_id.data,
            rack_id=form.rack_id.data,
            relaxation_block_id=form.relaxation_block_id.data,
            relaxation_rack_id=form.relaxation_rack_id.data,
        )
    except Conflict as e:
        return error_response('Failed to moved items.', e.message, e.code)
    return success_response('Successfully moved items.', True)


@checkpoint_bp.route('/scan-rack', methods=['POST'])
@token_required
def scan_rack():
    """扫描货架二维码"""
    form = json_form(ScanForm, _json_body())
    if not form.validate():
        return error_response('The rack code is required.', {'code': ['The rack code is required.']})

    try:
        result = CheckpointService.scan_rack(form.code.data)
    except NotFound as e:
        return error_response('Failed to founded Rack QR.', e.message, e.code)
    return success_response('Successfully founded Rack QR.', result)


@checkpoint_bp.route('/relocation', methods=['POST'])
@token_required
def relocation():
    """整架搬迁"""
    form = json_form(RelocationForm, _json_body())
    if not form.validate():
        return error_response('Invalid request body.', form_errors(form))

    try:
        CheckpointService.relocate(form.current_rack_id.data, form.new_rack_id.data, current_user.id)
    except Conflict as e:
        return error_response('Failed to relocated items.', e.message, e.code)
    return success_response('Successfully relocated items.', True)

from datetime import date
from fabricflow.extensions import db
from fabricflow.models import (
    Fabric, Inventory, MovementType, InventoryMovement, InventoryMovementTime, InventoryEntry,
    FabricStorage, FabricRelaxation, FabricControl
)
from tests.conftest import table_snapshot


def _fabric(code='F001'):
    return Fabric.query.filter_by(code=code).one()


def _movements(fabric_id):
    return InventoryMovement.query.filter_by(fabric_id=fabric_id).order_by(InventoryMovement.id).all()


def _entries(fabric_id):
    return InventoryEntry.query.join(InventoryMovement).filter(
        InventoryMovement.fabric_id == fabric_id
    ).order_by(InventoryEntry.id).all()


def test_first_move_to_inventory(app, move, operator_id):
    resp = move('inventory', block_id=1, rack_id=1, entries=[{'code': 'F001', 'yard': 12.5}])
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['success'] is True
    assert body['data'] is True
    assert body['message'] == 'Successfully moved items.'

    with app.app_context():
        fabric = _fabric()
        assert fabric.rack_id == 1
        assert fabric.block_id == 1
        assert fabric.yard == '12.5'

        inventory = Inventory.query.filter_by(fabric_id=fabric.id).one()
        assert inventory.stage == 'inventory'

        movements = _movements(fabric.id)
        assert len(movements) == 1
        movement = movements[0]
        assert movement.status == InventoryMovement.STATUS_STARTING
        assert movement.remarks == 'From '
        assert movement.action_by == operator_id
        assert movement.inventory_id == inventory.id
        assert movement.movement_type.name == 'inventory'
        assert movement.time.start_date is not None
        assert movement.time.finish_date is None

        storage = FabricStorage.query.filter_by(fabric_id=fabric.id).one()
        assert storage.inventory_movement_id == movement.id
        assert storage.created_by == operator_id

        entry = movement.entries.one()
        assert (entry.type, entry.from_stage, entry.to_stage) == ('out', '', 'inventory')


def test_zero_or_missing_yard_keeps_existing(app, move):
    assert move('inventory', block_id=1, rack_id=1, entries=[{'code': 'F001', 'yard': 0}]).status_code == 200
    assert move('inventory', block_id=1, rack_id=2, entries=[{'code': 'F001'}]).status_code == 200

    with app.app_context():
        fabric = _fabric()
        assert fabric.yard == '10'
        assert fabric.rack_id == 2


def test_relaxation_closes_previous_movement(app, move):
    move('inventory', block_id=1, rack_id=1, entries=[{'code': 'F001'}])
    resp = move('relaxation', relaxation_block_id=1, relaxation_rack_id=1,
                entries=[{'code': 'F001', 'finish_date': '2025-01-10'}])
    assert resp.status_code == 200

    with app.app_context():
        fabric = _fabric()
        assert fabric.finish_date == date(2025, 1, 10)
        assert fabric.relaxation_block_id == 1
        assert fabric.relaxation_rack_id == 1

        first, second = _movements(fabric.id)
        assert first.status == InventoryMovement.STATUS_FINISHED
        assert first.time.finish_date is not None
        assert first.time.finish_time is not None
        assert second.status == InventoryMovement.STATUS_STARTING
        assert second.movement_type.name == 'relaxation'
        assert second.remarks == 'From inventory'

        relaxation = FabricRelaxation.query.filter_by(fabric_id=fabric.id).one()
        assert relaxation.inventory_movement_id == second.id
        assert relaxation.finish_date == date(2025, 1, 10)

        entry = second.entries.one()
        assert (entry.type, entry.from_stage, entry.to_stage) == ('out', 'inventory', 'relaxation')
        assert Inventory.query.filter_by(fabric_id=fabric.id).one().stage == 'relaxation'


def test_same_stage_rescan_is_recorded_as_return(app, move):
    move('cutting_wip', entries=[{'code': 'F001'}])
    resp = move('cutting_wip', entries=[{'code': 'F001'}])
    assert resp.status_code == 200

    with app.app_context():
        fabric = _fabric()
        movements = _movements(fabric.id)
        assert len(movements) == 2
        assert movements[-1].remarks.startswith('Return ')
        assert movements[-1].remarks == 'Return cutting_wip'
        assert movements[-1].entries.one().type == InventoryEntry.TYPE_ACTUAL
        assert [m.status for m in movements] == ['finished', 'starting']


def test_qc_with_failing_result(app, move):
    resp = move('qc_fabric', entries=[{'code': 'F001', 'qc_result': 'FAIL'}])
    assert resp.status_code == 200

    with app.app_context():
        fabric = _fabric()
        assert fabric.qc_result == 'fail'
        control = FabricControl.query.filter_by(fabric_id=fabric.id).one()
        assert control.result == 'fail'
        assert control.inventory_movement_id == _movements(fabric.id)[-1].id


def test_qc_result_defaults_to_pass(app, move):
    assert move('qc_fabric', entries=[{'code': 'F001'}]).status_code == 200

    with app.app_context():
        assert _fabric().qc_result == 'pass'
        assert FabricControl.query.one().result == 'pass'


def test_other_stages_write_no_placement(app, move):
    assert move('washing', entries=[{'code': 'F001'}]).status_code == 200

    with app.app_context():
        assert FabricStorage.query.count() == 0
        assert FabricRelaxation.query.count() == 0
        assert FabricControl.query.count() == 0
        assert Inventory.query.one().stage == 'washing'


def test_unknown_code_aborts_whole_batch(app, move):
    with app.app_context():
        before = table_snapshot()

    resp = move('inventory', block_id=1, rack_id=1,
                entries=[{'code': 'F001', 'yard': 20}, {'code': 'NOPE'}])
    assert resp.status_code == 422
    body = resp.get_json()
    assert body['message'] == 'Failed to moved items.'
    assert body['errors'] == 'QR code NOPE is not found'

    with app.app_context():
        assert table_snapshot() == before


def test_batch_processes_entries_in_order(app, move, add_fabric):
    add_fabric('F002')
    resp = move('stock_fabric', entries=[{'code': 'F002'}, {'code': 'F001'}, {'code': 'F002'}])
    assert resp.status_code == 200

    with app.app_context():
        f2 = _fabric('F002')
        movements = _movements(f2.id)
        assert [m.status for m in movements] == ['finished', 'starting']
        assert movements[-1].remarks == 'Return stock_fabric'
        assert InventoryMovement.query.count() == 3


def test_missing_target_rack_is_a_conflict(app, move):
    resp = move('inventory', block_id=1, rack_id=99, entries=[{'code': 'F001'}])
    assert resp.status_code == 422
    assert resp.get_json()['errors'] == 'rack not found'

    with app.app_context():
        assert InventoryMovement.query.count() == 0
        assert _fabric().rack_id is None


def test_unregistered_movement_type_rolls_back(app, move):
    with app.app_context():
        MovementType.query.filter_by(name='cncm').one().soft_delete()
        db.session.commit()

    resp = move('cncm', entries=[{'code': 'F001'}])
    assert resp.status_code == 422
    assert resp.get_json()['errors'] == 'movement type cncm is not registered'

    with app.app_context():
        assert InventoryMovement.query.count() == 0
        assert Inventory.query.count() == 0


def test_unregistered_movement_type_uses_configured_fallback(app, move):
    app.config['MOVEMENT_TYPE_FALLBACK_ID'] = 1
    with app.app_context():
        MovementType.query.filter_by(name='cncm').one().soft_delete()
        db.session.commit()

    assert move('cncm', entries=[{'code': 'F001'}]).status_code == 200

    with app.app_context():
        movement = InventoryMovement.query.one()
        assert movement.movement_type_id == 1
        assert Inventory.query.one().stage == 'cncm'


def test_movement_times_have_no_microseconds(app, move):
    move('destroy', entries=[{'code': 'F001'}])

    with app.app_context():
        time_row = InventoryMovementTime.query.one()
        assert time_row.start_time.microsecond == 0


class TestMoveValidation:

    def test_stage_is_required(self, client, auth_headers):
        resp = client.post('/check-point/v1/move', json={'entries': [{'code': 'F001'}]},
                           headers=auth_headers)
        assert resp.status_code == 422
        assert resp.get_json()['errors'] == {'stage': ['The stage is required.']}

    def test_unknown_stage(self, move):
        resp = move('warehouse', entries=[{'code': 'F001'}])
        assert resp.status_code == 422
        assert resp.get_json()['errors'] == {'stage': ['The selected stage is invalid.']}

    def test_entries_are_required(self, move):
        assert move('washing').status_code == 422
        assert move('washing', entries=[]).status_code == 422
        assert move('washing', entries='F001').status_code == 422
        assert move('washing', entries=['F001']).status_code == 422

    def test_entry_code_is_required(self, move):
        resp = move('washing', entries=[{'code': 'F001'}, {'yard': 3}])
        assert resp.status_code == 422
        body = resp.get_json()
        assert body['message'] == 'The given data was invalid.'
        assert 'entries.1.code' in body['errors']

    def test_inventory_requires_block_and_rack(self, move):
        resp = move('inventory', rack_id=1, entries=[{'code': 'F001'}])
        assert resp.status_code == 422
        assert resp.get_json()['errors'] == {'block_id': ['The block id is required.']}

    def test_relaxation_requires_placement_and_finish_date(self, move):
        resp = move('relaxation', relaxation_block_id=1, entries=[{'code': 'F001', 'finish_date': '2025-01-10'}])
        assert resp.status_code == 422
        assert 'relaxation_rack_id' in resp.get_json()['errors']

        resp = move('relaxation', relaxation_block_id=1, relaxation_rack_id=1, entries=[{'code': 'F001'}])
        assert resp.status_code == 422
        assert resp.get_json()['errors'] == {'entries.0.finish_date': ['The finish date is required.']}

    def test_bad_values(self, move):
        resp = move('inventory', block_id=1, rack_id=1, entries=[{'code': 'F001', 'yard': 'abc'}])
        assert resp.status_code == 422
        assert 'entries.0.yard' in resp.get_json()['errors']

        resp = move('qc_fabric', entries=[{'code': 'F001', 'qc_result': 'maybe'}])
        assert resp.status_code == 422

        resp = move('relaxation', relaxation_block_id=1, relaxation_rack_id=1,
                    entries=[{'code': 'F001', 'finish_date': '10/01/2025'}])
        assert resp.status_code == 422

        resp = move('inventory', block_id='one', rack_id=1, entries=[{'code': 'F001'}])
        assert resp.status_code == 422
        assert 'block_id' in resp.get_json()['errors']

    def test_fractional_ids_are_rejected(self, app, move):
        for rack_id in (2.9, '2.9', '2a', -1.5):
            resp = move('inventory', block_id=1, rack_id=rack_id, entries=[{'code': 'F001'}])
            assert resp.status_code == 422
            assert resp.get_json()['errors'] == {'rack_id': ['Not a valid integer value.']}

        resp = move('relaxation', relaxation_block_id=1.5, relaxation_rack_id=1,
                    entries=[{'code': 'F001', 'finish_date': '2025-01-10'}])
        assert resp.status_code == 422
        assert 'relaxation_block_id' in resp.get_json()['errors']

        with app.app_context():
            assert _fabric().rack_id is None
            assert InventoryMovement.query.count() == 0

    def test_integral_float_id_is_accepted(self, app, move):
        assert move('inventory', block_id=1, rack_id=2.0, entries=[{'code': 'F001'}]).status_code == 200
        with app.app_context():
            assert _fabric().rack_id == 2

    def test_oversized_yard_is_rejected(self, app, move):
        for yard in (1e40, '1E+40', '0.' + '0' * 40 + '1'):
            resp = move('inventory', block_id=1, rack_id=1, entries=[{'code': 'F001', 'yard': yard}])
            assert resp.status_code == 422
            assert resp.get_json()['errors'] == {'entries.0.yard': ['The yard is out of range.']}

        with app.app_context():
            assert _fabric().yard == '10'
            assert InventoryMovement.query.count() == 0

    def test_string_ids_are_accepted(self, app, move):
        assert move('inventory', block_id='1', rack_id='2', entries=[{'code': 'F001'}]).status_code == 200
        with app.app_context():
            assert _fabric().rack_id == 2

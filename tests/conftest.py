import pytest
from fabricflow import create_app
from fabricflow.commands import seed_movement_types_into
from fabricflow.extensions import db
from fabricflow.models import (
    User, Block, Rack, RelaxationBlock, RelaxationRack, Buyer, FabricIncoming, Fabric
)
from fabricflow.services.token_service import TokenService

OPERATOR_EMAIL = 'operator@example.com'
OPERATOR_PASSWORD = 'secret123'


def seed_checkpoint_data():
    """
    检查点基础数据:
    面料 F001 (无阶段记录)，货架 R1(id=1)/R2(id=2)，区块 B1(id=1)
    """
    seed_movement_types_into(db.session)

    db.session.add(Block(id=1, name='B1'))
    db.session.add(Rack(id=1, name='R1'))
    db.session.add(Rack(id=2, name='R2'))
    db.session.add(RelaxationBlock(id=1, name='RB1'))
    db.session.add(RelaxationRack(id=1, name='RR1'))

    buyer = Buyer(code='BY001', name='Acme Apparel')
    incoming = FabricIncoming(code='IN0101', style='POLO-1001', buyer=buyer)
    db.session.add_all([buyer, incoming])

    db.session.add(Fabric(code='F001', incoming=incoming, yard='10', weight='4.5', width='60'))

    operator = User(name='Checkpoint Operator', email=OPERATOR_EMAIL)
    operator.password = OPERATOR_PASSWORD
    db.session.add(operator)
    db.session.commit()


def table_snapshot():
    """全部表的全部行，用于比对回滚前后状态"""
    db.session.expire_all()
    snapshot = {}
    for table in db.metadata.sorted_tables:
        rows = db.session.execute(table.select().order_by(*table.primary_key.columns)).all()
        snapshot[table.name] = [tuple(row) for row in rows]
    return snapshot


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        seed_checkpoint_data()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def operator_id(app):
    with app.app_context():
        return User.query.filter_by(email=OPERATOR_EMAIL).one().id


@pytest.fixture
def auth_headers(app):
    with app.app_context():
        user = User.query.filter_by(email=OPERATOR_EMAIL).one()
        token = TokenService.issue(user)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def move(client, auth_headers):
    """POST /move?stage=... 的快捷调用"""
    def _move(stage, **body):
        return client.post(f'/check-point/v1/move?stage={stage}', json=body, headers=auth_headers)
    return _move


@pytest.fixture
def add_fabric(app):
    """新增面料，返回其 ID"""
    def _add_fabric(code, **columns):
        with app.app_context():
            fabric = Fabric(code=code, **columns)
            db.session.add(fabric)
            db.session.commit()
            return fabric.id
    return _add_fabric

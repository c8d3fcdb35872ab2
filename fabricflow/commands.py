import click
import random
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError
from fabricflow.extensions import db
from fabricflow.models.auth import User
from fabricflow.models.master import Block, Rack, RelaxationBlock, RelaxationRack
from fabricflow.models.fabric import Buyer, FabricIncoming, Fabric, FabricRackRelocation
from fabricflow.models.inventory import Stage, MovementType, InventoryMovement
from fabricflow.services.token_service import TokenService
from fabricflow.utils.fake_gen import fake

DEMO_EMAIL = 'operator@fabricflow.io'
DEMO_PASSWORD = 'password'


def seed_movement_types_into(session):
    """
    按阶段名补齐流转类型 (幂等)
    返回新建的条数，调用方负责提交
    """
    existing = {name for (name,) in session.query(MovementType.name).all()}
    created = 0
    for _, name in Stage.OVERVIEW:
        if name in existing:
            continue
        session.add(MovementType(name=name))
        created += 1
    if created:
        session.flush()
    return created


@click.command('status')
@with_appcontext
def status():
    """
    [验证指令] 查看当前数据库中的数据统计。
    """
    click.echo(click.style('📊 FabricFlow 数据库状态:', fg='cyan', bold=True))

    try:
        counts = [
            ('用户 (Users)', User.live().count()),
            ('面料 (Fabrics)', Fabric.live().count()),
            ('货架 (Racks)', Rack.live().count()),
            ('流转类型 (Types)', MovementType.live().count()),
            ('流转记录 (Moves)', InventoryMovement.live().count()),
            ('搬迁记录 (Relocs)', FabricRackRelocation.live().count()),
        ]
    except SQLAlchemyError as e:
        click.echo(click.style(f'✘ 数据库读取失败: {e.__class__.__name__}', fg='red'))
        raise SystemExit(1)

    for label, count in counts:
        click.echo(f" - {label}: \t{count}")

    if counts[1][1] > 0:
        click.echo(click.style('✔ 数据库连接正常，数据已存在。', fg='green'))
    else:
        click.echo(click.style('⚠ 数据库为空，请运行 flask forge 生成演示数据。', fg='yellow'))


@click.command('seed-movement-types')
@with_appcontext
def seed_movement_types():
    """补齐九个阶段对应的流转类型"""
    created = seed_movement_types_into(db.session)
    db.session.commit()
    click.echo(click.style(f'✔ 新增 {created} 个流转类型', fg='green'))


@click.command('issue-token')
@click.option('--email', required=True, help='操作员邮箱')
@with_appcontext
def issue_token(email):
    """为指定操作员签发访问令牌 (调试用)"""
    user = User.live().filter(User.email == email).first()
    if user is None or not user.is_active:
        click.echo(click.style(f'✘ 用户不存在或已停用: {email}', fg='red'))
        raise SystemExit(1)
    click.echo(TokenService.issue(user))


@click.command('forge')
@click.option('--fabrics', default=60, help='生成面料卷数 (默认60)')
@with_appcontext
def forge(fabrics):
    """
    [演示数据] 重建数据库并填充主数据与面料。
    警告：这将清除数据库中的现有数据！
    """
    click.echo(click.style(f'⚡ 初始化 FabricFlow 演示数据 ({fabrics} 卷)...', fg='cyan', bold=True))

    # 1. 清除旧数据
    db.drop_all()
    db.create_all()

    # 2. 流转类型
    seed_movement_types_into(db.session)

    # 3. 主数据
    click.echo('正在创建区块与货架...')
    racks = init_master()

    # 4. 买家与来料
    click.echo('正在登记买家与来料批次...')
    incomings = init_incomings()

    # 5. 面料卷
    click.echo('正在生成面料卷...')
    init_fabrics(fabrics, incomings, racks)

    # 6. 操作员
    operator = User(name='Checkpoint Operator', email=DEMO_EMAIL)
    operator.password = DEMO_PASSWORD
    db.session.add(operator)

    db.session.commit()
    click.echo(click.style('✔ 演示数据构建完成！', fg='green', bold=True))
    click.echo(f"操作员账号: {DEMO_EMAIL} / 密码: {DEMO_PASSWORD}")


def init_master():
    """区块、货架、松布区块与松布货架"""
    for i in range(1, 5):
        db.session.add(Block(name=f'B{i}'))
        db.session.add(RelaxationBlock(name=f'RB{i}'))

    racks = []
    for i in range(1, 21):
        rack = Rack(name=f'R{i:03d}')
        db.session.add(rack)
        racks.append(rack)
        db.session.add(RelaxationRack(name=f'RR{i:03d}'))

    db.session.flush()
    return racks


def init_incomings():
    incomings = []
    for i in range(1, 6):
        buyer = Buyer(code=f'BY{i:03d}', name=fake.buyer_name())
        db.session.add(buyer)
        for j in range(1, 4):
            incoming = FabricIncoming(
                code=f'IN{i:02d}{j:02d}',
                style=fake.fabric_style(),
                buyer=buyer
            )
            db.session.add(incoming)
            incomings.append(incoming)
    db.session.flush()
    return incomings


def init_fabrics(count, incomings, racks):
    """
    生成面料卷，约一半放在货架上
    阶段指针在首次扫码流转时才创建
    """
    blocks = Block.query.all()
    for i in range(1, count + 1):
        fabric = Fabric(
            code=f'F{i:05d}',
            incoming=random.choice(incomings),
            color=fake.fabric_color(),
            lot=fake.fabric_lot(),
            roll=str(i),
            weight=fake.roll_measure(8, 25),
            width=fake.roll_measure(55, 72),
            yard=fake.roll_measure(40, 120),
        )
        if random.random() < 0.5:
            fabric.block = random.choice(blocks)
            fabric.rack = random.choice(racks)
        db.session.add(fabric)

        # 批量刷新
        if i % 100 == 0:
            db.session.flush()

    click.echo(f'  ✓ 已生成 {count} 卷面料')

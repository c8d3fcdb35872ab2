import os
import sys
from fabricflow import create_app, init_database
from fabricflow.extensions import db
from fabricflow.models import (
    User, Block, Rack, RelaxationBlock, RelaxationRack,
    Fabric, Inventory, MovementType, InventoryMovement, FabricRackRelocation
)

# 从环境变量获取配置模式
config_name = os.getenv('APP_ENV') or os.getenv('FLASK_CONFIG') or 'default'
if config_name in ('development', 'dev'):
    config_name = 'development'

try:
    app = create_app(config_name)
except (KeyError, RuntimeError) as e:
    sys.stderr.write(f'配置加载失败: {e}\n')
    sys.exit(1)


@app.shell_context_processor
def make_shell_context():
    """
    配置 Flask Shell 上下文。
    允许在命令行中使用 'flask shell' 时自动导入 db 和常用模型。
    """
    return dict(
        db=db,
        app=app,
        User=User,
        Block=Block,
        Rack=Rack,
        RelaxationBlock=RelaxationBlock,
        RelaxationRack=RelaxationRack,
        Fabric=Fabric,
        Inventory=Inventory,
        MovementType=MovementType,
        InventoryMovement=InventoryMovement,
        FabricRackRelocation=FabricRackRelocation,
    )


if __name__ == '__main__':
    try:
        init_database(app)
    except Exception as e:
        app.logger.critical(f'数据库不可用，启动中止: {e}')
        sys.exit(1)

    port = int(app.config['APP_PORT'])
    app.logger.info(f'FabricFlow 检查点服务启动于 0.0.0.0:{port}')
    app.run(host='0.0.0.0', port=port)

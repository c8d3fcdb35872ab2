import logging
import time
import colorlog
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException
from config import config
from fabricflow.extensions import db, login_manager, cache
from fabricflow.exceptions import CheckpointException, InternalError
from fabricflow.utils.response import error_response

from fabricflow import commands


def create_app(config_name='default'):
    """FabricFlow 应用工厂函数"""
    app = Flask(__name__)

    # 1. 加载配置
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # 2. 初始化扩展
    db.init_app(app)
    login_manager.init_app(app)
    cache.init_app(app)

    # 3. 配置日志
    configure_logging(app)

    # 4. 注册蓝图 (Blueprints)
    register_blueprints(app)

    # 5. 请求日志与跨域
    register_request_hooks(app)

    # 6. 注册全局错误处理
    register_error_handlers(app)

    # 7. 注册 CLI 命令
    register_commands(app)

    return app


def init_database(app):
    """
    启动时检查数据库连接并建表
    连接失败直接抛出，由 run.py 以非零状态退出
    """
    from sqlalchemy import text
    from fabricflow.commands import seed_movement_types_into

    with app.app_context():
        db.session.execute(text('SELECT 1'))
        db.create_all()
        created = seed_movement_types_into(db.session)
        db.session.commit()
        if created:
            app.logger.info(f'已初始化 {created} 个流转类型')
        app.logger.info('数据库连接正常')


def register_blueprints(app):
    """注册所有业务模块蓝图"""
    # 健康检查
    from fabricflow.blueprints.main import main_bp
    app.register_blueprint(main_bp)

    # 认证蓝图
    from fabricflow.blueprints.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')

    # 检查点蓝图
    from fabricflow.blueprints.checkpoint import checkpoint_bp
    app.register_blueprint(checkpoint_bp, url_prefix='/check-point/v1')

    # 主数据蓝图
    from fabricflow.blueprints.master import master_bp
    app.register_blueprint(master_bp, url_prefix='/master')


def register_request_hooks(app):
    """请求耗时日志与 CORS 响应头"""

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def after_request(response):
        origin = request.headers.get('Origin')
        allowed = [o.strip() for o in app.config.get('CORS_ALLOWED_ORIGINS', '*').split(',') if o.strip()]
        if '*' in allowed:
            response.headers['Access-Control-Allow-Origin'] = '*'
        elif origin and origin in allowed:
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers['Vary'] = 'Origin'
        response.headers['Access-Control-Allow-Headers'] = 'Authorization, Content-Type'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'

        started = g.pop('request_started', None)
        if started is not None:
            elapsed = (time.perf_counter() - started) * 1000
            app.logger.info(f'{request.method} {request.path} {response.status_code} {elapsed:.1f}ms')
        return response


def register_error_handlers(app):
    @app.errorhandler(CheckpointException)
    def handle_checkpoint_exception(e):
        if isinstance(e, InternalError):
            app.logger.error(f'内部错误: {e.message}')
        return jsonify(e.to_dict()), e.code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return error_response(e.description or e.name, code=e.code)

    @app.errorhandler(Exception)
    def internal_server_error(e):
        app.logger.exception('未处理的异常')
        return error_response('Internal server error', code=500)


def register_commands(app):
    """注册 Flask CLI 命令"""
    app.cli.add_command(commands.forge)
    app.cli.add_command(commands.status)
    app.cli.add_command(commands.seed_movement_types)
    app.cli.add_command(commands.issue_token)


def configure_logging(app):
    """配置彩色控制台日志"""
    level = logging.DEBUG if app.debug else logging.INFO
    app.logger.setLevel(level)

    # 测试中会多次创建 app，避免重复挂载 handler
    if any(getattr(h, '_fabricflow', False) for h in app.logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler._fabricflow = True

    formatter = colorlog.ColoredFormatter(
        "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s %(message)s",
        datefmt="%H:%M:%S",
        reset=True,
        log_colors={
            'DEBUG':    'cyan',
            'INFO':     'green',
            'WARNING':  'yellow',
            'ERROR':    'red',
            'CRITICAL': 'red,bg_white',
        },
        secondary_log_colors={},
        style='%'
    )
    handler.setFormatter(formatter)
    app.logger.addHandler(handler)

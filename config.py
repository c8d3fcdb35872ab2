import os
from dotenv import load_dotenv

# 加载 .env 环境变量
load_dotenv()
basedir = os.path.abspath(os.path.dirname(__file__))


def _database_url():
    """
    数据库连接串
    优先使用 DATABASE_URL，其次由 DB_* 变量拼接 MySQL 连接串
    """
    url = os.environ.get('DATABASE_URL')
    if url:
        # PostgreSQL URL 修正（部分平台使用 postgres://）
        if url.startswith('postgres://'):
            url = url.replace('postgres://', 'postgresql://', 1)
        return url

    host = os.environ.get('DB_HOST')
    if not host:
        return None
    return 'mysql+pymysql://{user}:{password}@{host}:{port}/{name}'.format(
        user=os.environ.get('DB_USER', 'root'),
        password=os.environ.get('DB_PASSWORD', ''),
        host=host,
        port=os.environ.get('DB_PORT', '3306'),
        name=os.environ.get('DB_NAME', 'dppiops'),
    )


def _optional_int(name):
    value = os.environ.get(name, '').strip()
    return int(value) if value else None


class Config:
    """基础配置类"""
    SECRET_KEY = os.environ.get('JWT_SECRET') or 'default-secret-change-in-production'

    APP_PORT = int(os.environ.get('APP_PORT', '8080'))

    # 访问令牌配置
    TOKEN_EXPIRY_HOURS = int(os.environ.get('JWT_EXPIRY_HOURS', '24'))

    # 跨域配置 (逗号分隔，* 表示全部)
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')

    # 数据库配置
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_RECORD_QUERIES = False

    # movement_types 中找不到目标阶段时使用的兜底 ID，未设置则直接报错
    MOVEMENT_TYPE_FALLBACK_ID = _optional_int('MOVEMENT_TYPE_FALLBACK_ID')

    # JSON 接口使用 Bearer 令牌，不启用表单 CSRF
    WTF_CSRF_ENABLED = False

    # 缓存配置 (默认使用 SimpleCache，生产环境可改 Redis)
    CACHE_TYPE = "SimpleCache"
    CACHE_DEFAULT_TIMEOUT = 300

    @staticmethod
    def init_app(app):
        pass


class DevelopmentConfig(Config):
    """开发环境配置"""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = _database_url() or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'fabricflow.db')

    @staticmethod
    def init_app(app):
        # 确保 SQLite 目录存在
        os.makedirs(os.path.join(basedir, 'instance'), exist_ok=True)


class ProductionConfig(Config):
    """生产环境配置"""
    DEBUG = False

    SQLALCHEMY_DATABASE_URI = _database_url()

    # 连接池：最多 25 个连接，常驻 5 个，5 分钟回收
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 5,
        'max_overflow': 20,
        'pool_recycle': 300,
        'pool_timeout': 15,
        'pool_pre_ping': True,
        'isolation_level': 'READ COMMITTED',
    }

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)
        if not app.config.get('SQLALCHEMY_DATABASE_URI'):
            raise RuntimeError('DATABASE_URL or DB_HOST must be set in production')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'testing-secret'
    CACHE_TYPE = "NullCache"


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

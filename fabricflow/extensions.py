from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_caching import Cache

# 初始化扩展对象 (暂不绑定 app)
db = SQLAlchemy()
cache = Cache()
login_manager = LoginManager()


@login_manager.request_loader
def load_user_from_request(request):
    """Flask-Login 请求加载回调：从 Authorization: Bearer <token> 解析用户"""
    from fabricflow.services.token_service import TokenService

    header = request.headers.get('Authorization', '')
    parts = header.split(' ', 1)
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None
    return TokenService.load_user(parts[1].strip())

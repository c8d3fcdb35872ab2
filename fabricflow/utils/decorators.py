from functools import wraps
from flask import request
from flask_login import current_user
from fabricflow.exceptions import Unauthorized


def token_required(f):
    """
    检查 Bearer 令牌
    令牌由 login_manager.request_loader 解析为 current_user
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        header = request.headers.get('Authorization', '')
        if not header:
            raise Unauthorized('Authorization header is required')

        parts = header.split(' ', 1)
        if len(parts) != 2 or parts[0].lower() != 'bearer':
            raise Unauthorized('Invalid authorization header format')

        if not current_user.is_authenticated:
            raise Unauthorized('Invalid or expired token')
        return f(*args, **kwargs)
    return decorated_function

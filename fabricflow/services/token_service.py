"""访问令牌服务 - 签发与校验 Bearer 令牌"""
from flask import current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from fabricflow.models.auth import User

_SALT = 'fabricflow-access-token'


class TokenService:

    @staticmethod
    def _serializer():
        return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=_SALT)

    @staticmethod
    def expires_in():
        """令牌有效期 (秒)"""
        return int(current_app.config['TOKEN_EXPIRY_HOURS']) * 3600

    @staticmethod
    def issue(user):
        """为用户签发令牌"""
        return TokenService._serializer().dumps({'user_id': user.id, 'email': user.email})

    @staticmethod
    def decode(token):
        """
        解析令牌，返回 user_id
        过期或签名无效返回 None
        """
        try:
            claims = TokenService._serializer().loads(token, max_age=TokenService.expires_in())
        except SignatureExpired:
            current_app.logger.info('访问令牌已过期')
            return None
        except BadSignature:
            return None
        if not isinstance(claims, dict):
            return None
        user_id = claims.get('user_id')
        return user_id if isinstance(user_id, int) else None

    @staticmethod
    def load_user(token):
        """令牌 -> 有效用户 (已删除或停用的用户视为无效)"""
        user_id = TokenService.decode(token)
        if user_id is None:
            return None
        user = User.live().filter(User.id == user_id).first()
        if user is None or not user.is_active:
            return None
        return user

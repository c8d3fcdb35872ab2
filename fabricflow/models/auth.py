from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from fabricflow.extensions import db
from .base import BaseModel


class User(UserMixin, BaseModel):
    """操作员 (检查点扫码人员)"""
    __tablename__ = 'users'
    __hidden__ = BaseModel.__hidden__ + ('password_hash',)

    name = db.Column(db.String(128))
    email = db.Column(db.String(128), unique=True, index=True, nullable=False)
    password_hash = db.Column(db.String(256))
    profile_photo_path = db.Column(db.String(256))

    is_active_user = db.Column(db.Boolean, default=True)  # 封号开关

    @property
    def password(self):
        raise AttributeError('password is not readable')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    # Flask-Login 必须属性覆盖
    @property
    def is_active(self):
        return bool(self.is_active_user) and self.deleted_at is None

    def __repr__(self):
        return f'<User {self.email}>'

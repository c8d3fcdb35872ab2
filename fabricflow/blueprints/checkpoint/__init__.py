from flask import Blueprint

# 注意：url_prefix 在 fabricflow/__init__.py 注册时设置，这里不重复设置
checkpoint_bp = Blueprint('checkpoint', __name__)

from . import routes

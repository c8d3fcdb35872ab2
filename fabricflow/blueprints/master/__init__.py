from flask import Blueprint

master_bp = Blueprint('master', __name__)

from . import routes

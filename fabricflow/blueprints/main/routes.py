from flask import jsonify
from . import main_bp


@main_bp.route('/health')
def health():
    """存活检查 (不访问数据库)"""
    return jsonify({'status': 'healthy'})

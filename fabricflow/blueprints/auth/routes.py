from flask import request, current_app
from flask_login import current_user
from fabricflow.blueprints.auth import auth_bp
from fabricflow.blueprints.auth.forms import LoginForm
from fabricflow.models.auth import User
from fabricflow.services.token_service import TokenService
from fabricflow.utils.decorators import token_required
from fabricflow.utils.response import success_response, error_response, form_errors
from fabricflow.utils.validators import json_form


@auth_bp.route('/login', methods=['POST'])
def login():
    """邮箱密码登录，签发 Bearer 令牌"""
    payload = request.get_json(silent=True)
    form = json_form(LoginForm, payload if isinstance(payload, dict) else {})
    if not form.validate():
        return error_response('Validation Error', form_errors(form))

    user = User.live().filter(User.email == form.email.data).first()

    # 用户不存在、密码错误、账号停用统一返回同一提示
    if user is None or not user.verify_password(form.password.data) or not user.is_active:
        current_app.logger.info(f'登录失败: {form.email.data}')
        return error_response('Username or Password is wrong!', code=401)

    return success_response('Login successful.', {
        'token_type': 'Bearer',
        'access_token': TokenService.issue(user),
        'expires_in': TokenService.expires_in(),
        'user_info': {
            'user_id': user.id,
            'full_name': user.name,
            'photo_path': user.profile_photo_path,
        },
    })


@auth_bp.route('/me', methods=['GET'])
@token_required
def me():
    """当前令牌对应的用户"""
    return success_response('Successfully fetched profile.', current_user.to_dict())

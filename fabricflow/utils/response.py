"""
统一 JSON 响应格式
成功: {status, success, message, data}
失败: {status, error, message, errors}
"""
from flask import jsonify


def success_response(message, data=None, code=200):
    return jsonify({
        'status': 'success',
        'success': True,
        'message': message,
        'data': data,
    }), code


def error_response(message, errors=None, code=422):
    body = {
        'status': 'error',
        'error': True,
        'message': message,
    }
    if errors is not None:
        body['errors'] = errors
    return jsonify(body), code


def form_errors(form):
    """把 WTForms 的嵌套错误整理成 {field: [msg, ...]}"""
    errors = {}
    for name, messages in form.errors.items():
        if isinstance(messages, dict):
            for sub_name, sub_messages in messages.items():
                errors[f'{name}.{sub_name}'] = list(sub_messages)
        else:
            # FieldList(FormField) 的错误按下标展开
            for index, item in enumerate(messages):
                if isinstance(item, dict):
                    for sub_name, sub_messages in item.items():
                        errors[f'{name}.{index}.{sub_name}'] = list(sub_messages)
                else:
                    errors.setdefault(name, []).append(item)
    return errors

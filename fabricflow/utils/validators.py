"""
表单字段与过滤器
JSON 请求体通过 data= 直接灌入表单，不走 formdata，因此数值需在 process_data 中转换
"""
from wtforms import IntegerField
from wtforms.utils import unset_value


def clean_str(value):
    """转字符串并去除首尾空白，None 保持不变"""
    if value is None:
        return None
    return str(value).strip()


class IdField(IntegerField):
    """主键字段：接受整数或数字字符串"""

    def process_data(self, value):
        if value is None or value is unset_value or value == '':
            self.data = None
            return
        if isinstance(value, bool):
            self.data = None
            raise ValueError(self.gettext('Not a valid integer value.'))
        # 小数与非数字字符串不截断，直接拒绝
        if isinstance(value, float) and not value.is_integer():
            self.data = None
            raise ValueError(self.gettext('Not a valid integer value.'))
        if isinstance(value, str) and not value.strip().isdigit():
            self.data = None
            raise ValueError(self.gettext('Not a valid integer value.'))
        try:
            self.data = int(value)
        except (ValueError, TypeError, OverflowError) as exc:
            self.data = None
            raise ValueError(self.gettext('Not a valid integer value.')) from exc


def json_form(form_class, payload):
    """用 JSON 字典构造表单 (关闭 CSRF，忽略 request.form)"""
    return form_class(formdata=None, data=payload or {}, meta={'csrf': False})

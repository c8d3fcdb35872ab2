"""
字符串数值工具
面料的 yard/weight/width 以字符串存储，这里负责容错解析与格式化
"""
from decimal import Decimal, InvalidOperation


def parse_decimal(value):
    """
    尽力解析为 Decimal
    允许首尾空白；无法解析或非有限值返回 None
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def sum_decimal(values):
    """累加可解析的值，忽略无法解析的行"""
    total = Decimal('0')
    for value in values:
        number = parse_decimal(value)
        if number is not None:
            total += number
    return total


def format_number(value):
    """格式化为不带多余尾零的字符串: 12.5 -> '12.5', 12.0 -> '12'"""
    number = Decimal(str(value)).normalize()
    text = format(number, 'f')
    return '0' if text in ('-0', '') else text

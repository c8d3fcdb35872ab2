from decimal import Decimal
import pytest
from hypothesis import given, strategies as st
from fabricflow.utils.numbers import parse_decimal, sum_decimal, format_number


@pytest.mark.parametrize('raw, expected', [
    ('12.5', Decimal('12.5')),
    ('  7 ', Decimal('7')),
    (3, Decimal('3')),
    (2.25, Decimal('2.25')),
    ('-1.5', Decimal('-1.5')),
])
def test_parse_decimal(raw, expected):
    assert parse_decimal(raw) == expected


@pytest.mark.parametrize('raw', [None, '', '   ', 'abc', '1,5', 'NaN', 'Infinity', True])
def test_parse_decimal_rejects(raw):
    assert parse_decimal(raw) is None


def test_sum_ignores_unparsable_rows():
    assert sum_decimal(['1.5', None, 'x', ' 2 ', '']) == Decimal('3.5')
    assert sum_decimal([]) == Decimal('0')


@pytest.mark.parametrize('value, expected', [
    (Decimal('12.5'), '12.5'),
    (Decimal('12.50'), '12.5'),
    (Decimal('12.0'), '12'),
    (100, '100'),
    (12.5, '12.5'),
    (Decimal('0.000'), '0'),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


@given(st.decimals(min_value=Decimal('0.01'), max_value=Decimal('99999'), places=2))
def test_formatted_value_parses_back(value):
    assert parse_decimal(format_number(value)) == value

"""
Purchase order financial derivation
"""
from decimal import Decimal

import pytest

from app.buisness.procurement.financials import compute_totals, order_totals, to_decimal


def test_worked_example():
    totals = compute_totals([(10, '100')], tax_rate='18', discount_rate='5')

    assert totals.subtotal == Decimal('1000')
    assert totals.discount_amount == Decimal('50')
    assert totals.after_discount == Decimal('950')
    assert totals.tax_amount == Decimal('171')
    assert totals.total == Decimal('1121')
    assert totals.rounded_total == Decimal('1121.00')


def test_no_lines_and_no_rates():
    totals = compute_totals([], 0, 0)
    assert totals.total == Decimal('0')
    assert totals.rounded_total == Decimal('0.00')


def test_intermediate_values_are_not_rounded():
    totals = compute_totals([(3, '0.335')], tax_rate='10', discount_rate='0')
    assert totals.subtotal == Decimal('1.005')
    assert totals.tax_amount == Decimal('0.1005')
    assert totals.total == Decimal('1.1055')
    # Only the displayed total is rounded, half-up
    assert totals.rounded_total == Decimal('1.11')


@pytest.mark.parametrize('amount, decimals, expected', [
    ('0.125', 2, '0.13'),
    ('0.135', 2, '0.14'),
    ('2.5', 0, '3'),
    ('1.0005', 3, '1.001'),
])
def test_rounding_is_half_up(amount, decimals, expected):
    totals = compute_totals([(1, amount)], 0, 0, currency_decimals=decimals)
    assert totals.rounded_total == Decimal(expected)


def test_float_inputs_do_not_leak_binary_error():
    assert to_decimal(0.1) == Decimal('0.1')
    assert compute_totals([(3, 0.1)], 0, 0).subtotal == Decimal('0.3')


def test_full_discount_zeroes_tax():
    totals = compute_totals([(2, '50')], tax_rate='20', discount_rate='100')
    assert totals.after_discount == Decimal('0')
    assert totals.tax_amount == Decimal('0')
    assert totals.total == Decimal('0')


def test_to_dict_uses_strings():
    data = compute_totals([(10, '100')], '18', '5').to_dict()
    assert data['rounded_total'] == '1121.00'
    assert set(data) == {'subtotal', 'discount_amount', 'after_discount', 'tax_amount', 'total', 'rounded_total'}


def test_persisted_order_totals(make_order):
    order = make_order(lines=None, tax_rate='18', discount_rate='5')
    assert order_totals(order).total == Decimal('1121')

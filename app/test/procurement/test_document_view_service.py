"""
Document views for expression sheets, purchase orders and reception confirmations
"""
from datetime import date
from decimal import Decimal

import pytest

from app.buisness.procurement.errors import NotFound
from app.buisness.procurement.reception_ledger import ReceptionLedger
from app.buisness.procurement.status_validator import ExpressionStatus, OrderStatus
from app.services.procurement.document_view_service import DocumentViewService, format_number


@pytest.mark.parametrize('prefix, number, padding, expected', [
    ('BC', 42, 6, 'BC-000042'),
    ('EB', 1, 4, 'EB-0001'),
    ('REC', 1234567, 6, 'REC-1234567'),
    ('BC', None, 6, None),
])
def test_format_number(prefix, number, padding, expected):
    assert format_number(prefix, number, padding) == expected


def test_expression_document(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.APPROVED)
    document = DocumentViewService.expression_document(expression.id)

    assert document.display_number == 'EB-000001'
    assert document.status == ExpressionStatus.APPROVED
    assert document.division_name == 'Technical Division'
    assert document.service_name == 'Maintenance'
    assert document.created_by == 'Requester'
    assert document.decided_by == 'Approver'
    assert document.total_quantity == 10
    assert document.order_display_number is None

    line = document.lines[0]
    assert (line.material_code, line.material_name, line.unit, line.quantity) == ('MAT-0001', 'A4 paper ream', 'ream', 10)


def test_expression_document_links_its_order(seed, make_order):
    order = make_order()
    document = DocumentViewService.expression_document(order.expression_id)
    assert document.status == ExpressionStatus.IN_PROGRESS
    assert document.order_display_number == 'BC-000001'


def test_order_document(seed, make_order):
    order = make_order()
    line_id = order.lines[0].id
    ReceptionLedger.record(
        order.id, seed.admin_id,
        carrier='DHL',
        reception_date=date(2024, 5, 2),
        lines=[{'order_line_id': line_id, 'quantity_received': 6, 'quantity_accepted': 5, 'quantity_rejected': 1}],
    )

    document = DocumentViewService.order_document(order.id)

    assert document.display_number == 'BC-000001'
    assert document.expression_display_number == 'EB-000001'
    assert document.title == 'Office supplies'
    assert document.supplier_name == 'Office Depot Central'
    assert document.delivery_address == 'Central warehouse'
    assert document.totals.rounded_total == Decimal('1121.00')
    assert document.stats.status == OrderStatus.PARTIALLY_DELIVERED

    line = document.lines[0]
    assert line.line_total == Decimal('1000')
    assert (line.quantity_received, line.quantity_remaining, line.percent_received) == (6, 4, 60)

    reception = document.receptions[0]
    assert reception.display_number == 'REC-000001'
    assert reception.reception_date == date(2024, 5, 2)
    assert reception.recorded_by == 'Admin'
    assert not reception.confirmation_generated
    assert reception.lines[0].material_code == 'MAT-0001'
    assert (reception.lines[0].quantity_accepted, reception.lines[0].quantity_rejected) == (5, 1)


def test_order_document_is_json_ready(seed, make_order):
    order = make_order()
    data = DocumentViewService.order_document(order.id).to_dict()

    assert data['display_number'] == 'BC-000001'
    assert isinstance(data['emitted_at'], str)
    assert Decimal(data['totals']['total']) == Decimal('1121')
    assert Decimal(data['lines'][0]['unit_price']) == Decimal('100')
    assert data['stats']['percent_global'] == 0
    assert data['receptions'] == []


def test_unknown_documents(app):
    with pytest.raises(NotFound):
        DocumentViewService.expression_document(404)
    with pytest.raises(NotFound):
        DocumentViewService.order_document(404)

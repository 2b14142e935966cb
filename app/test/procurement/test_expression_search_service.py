"""
Expression listing and dashboard counters
"""
import pytest

from app.buisness.procurement.errors import InvalidInput
from app.buisness.procurement.status_validator import ExpressionStatus
from app.services.procurement.expression_search_service import ExpressionSearchService


def test_list_filters_and_orders_newest_first(seed, make_expression):
    paper = make_expression(title='Paper for accounting')
    toner = make_expression(title='Toner refill', status=ExpressionStatus.PENDING)
    gloves = make_expression(title='Safety gloves', status=ExpressionStatus.APPROVED)

    assert [e.id for e in ExpressionSearchService.list_expressions()] == [gloves.id, toner.id, paper.id]
    assert [e.id for e in ExpressionSearchService.list_expressions(status=ExpressionStatus.PENDING)] == [toner.id]
    assert [e.id for e in ExpressionSearchService.list_expressions(search='TONER')] == [toner.id]
    assert ExpressionSearchService.list_expressions(search='100%') == []
    assert ExpressionSearchService.list_expressions(creator_id=seed.other_requester_id) == []


def test_unknown_status_filter(app):
    with pytest.raises(InvalidInput):
        ExpressionSearchService.list_expressions(status='Archived')


def test_parse_filters():
    filters = ExpressionSearchService.parse_filters({'status': 'Pending', 'search_term': ' toner ', 'creator_id': '4'})
    assert (filters.status, filters.search, filters.creator_id) == ('Pending', 'toner', 4)

    with pytest.raises(InvalidInput):
        ExpressionSearchService.parse_filters({'creator_id': 'me'})


def test_dashboard_counts(seed, make_expression):
    make_expression()
    make_expression(status=ExpressionStatus.PENDING)
    make_expression(status=ExpressionStatus.PENDING)
    make_expression(status=ExpressionStatus.REJECTED)

    counts = ExpressionSearchService.dashboard_counts()
    assert counts[ExpressionStatus.DRAFT] == 1
    assert counts[ExpressionStatus.PENDING] == 2
    assert counts[ExpressionStatus.REJECTED] == 1
    assert counts[ExpressionStatus.IN_PROGRESS] == 0
    assert counts['total'] == 4

    assert ExpressionSearchService.dashboard_counts(creator_id=seed.other_requester_id)['total'] == 0

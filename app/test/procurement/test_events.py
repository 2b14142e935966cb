"""
Post-commit domain events
"""
import pytest

from app.buisness.procurement import events
from app.buisness.procurement.errors import OverDelivery
from app.buisness.procurement.fulfillment_stats import FulfillmentStats
from app.buisness.procurement.reception_ledger import ReceptionLedger
from app.buisness.procurement.request_lifecycle import RequestLifecycle
from app.buisness.procurement.status_validator import ExpressionStatus


class Recorder:
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)


def test_submit_and_decide_emit_events(seed, make_expression):
    submitted, decided = Recorder(), Recorder()
    expression = make_expression()

    with events.expression_submitted.connected_to(submitted), events.expression_decided.connected_to(decided):
        RequestLifecycle.submit(expression.id, seed.requester_id)
        RequestLifecycle.decide(expression.id, seed.approver_id, ExpressionStatus.REJECTED, 'Too expensive')

    assert [e.entity_id for e in submitted.events] == [expression.id]
    assert submitted.events[0].name == 'Submitted'
    assert decided.events[0].payload['outcome'] == ExpressionStatus.REJECTED
    assert decided.events[0].payload['comment'] == 'Too expensive'
    assert decided.events[0].actor_id == seed.approver_id


def test_order_created_event(seed, make_order):
    created = Recorder()
    with events.order_created.connected_to(created):
        order = make_order()

    assert created.events[0].entity_id == order.id
    assert created.events[0].payload['total'] == '1121.00'


def test_reception_event_only_after_commit(seed, make_order):
    recorded = Recorder()
    order = make_order()
    line_id = order.lines[0].id

    with events.reception_recorded.connected_to(recorded):
        with pytest.raises(OverDelivery):
            ReceptionLedger.record(order.id, seed.admin_id, lines=[{
                'order_line_id': line_id, 'quantity_received': 11, 'quantity_accepted': 11,
            }])
        assert recorded.events == []

        reception = ReceptionLedger.record(order.id, seed.admin_id, lines=[{
            'order_line_id': line_id, 'quantity_received': 3, 'quantity_accepted': 3,
        }])

    assert [e.entity_id for e in recorded.events] == [reception.id]
    assert recorded.events[0].payload['order_id'] == order.id


def test_failing_receiver_does_not_roll_back(seed, make_order):
    order = make_order()
    line_id = order.lines[0].id

    def broken(event):
        raise RuntimeError("notification service down")

    with events.reception_recorded.connected_to(broken):
        reception = ReceptionLedger.record(order.id, seed.admin_id, lines=[{
            'order_line_id': line_id, 'quantity_received': 3, 'quantity_accepted': 3,
        }])

    assert reception.id is not None
    assert FulfillmentStats.for_order(order.id).total_received == 3


def test_dispatch_returns_event():
    event = events.dispatch(events.order_cancelled, 7, 1, reason='duplicate')
    assert (event.name, event.entity_id, event.actor_id) == ('OrderCancelled', 7, 1)
    assert event.payload == {'reason': 'duplicate'}

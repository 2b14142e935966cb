"""
Need expression lifecycle tests
"""
import pytest

from app import db
from app.buisness.procurement.errors import (
    EmptyExpression,
    InsufficientRole,
    InvalidInput,
    InvalidTransition,
    NotFound,
    NotOwner,
)
from app.buisness.procurement.request_lifecycle import RequestLifecycle
from app.buisness.procurement.status_validator import (
    ExpressionEvent,
    ExpressionStatus,
    ProcurementStatusValidator,
)
from app.data.procurement import NeedExpression, NeedLine


def test_create_returns_numbered_draft(seed):
    expression = RequestLifecycle.create(
        seed.requester_id,
        '  Printer supplies ',
        seed.division_id,
        seed.service_id,
        [
            {'material_id': seed.paper_id, 'quantity': 10, 'justification': 'Monthly stock'},
            {'material_id': seed.toner_id, 'quantity': '2', 'description': 'Black toner'},
        ],
    )

    assert expression.status == ExpressionStatus.DRAFT
    assert expression.number == 1
    assert expression.title == 'Printer supplies'
    assert expression.creator_id == seed.requester_id
    assert [line.quantity for line in expression.lines] == [10, 2]
    # Description defaults to the material designation
    assert expression.lines[0].description == 'A4 paper ream'
    assert expression.lines[1].description == 'Black toner'
    assert expression.total_quantity == 12


def test_numbers_are_monotonic(seed, make_expression):
    first = make_expression()
    second = make_expression()
    assert second.number == first.number + 1


@pytest.mark.parametrize('quantity', [0, -3, 1.5, True, 'ten', None])
def test_create_rejects_bad_quantity(seed, quantity):
    with pytest.raises(InvalidInput):
        RequestLifecycle.create(
            seed.requester_id, 'Bad', seed.division_id, None,
            [{'material_id': seed.paper_id, 'quantity': quantity}],
        )
    assert NeedExpression.query.count() == 0


def test_create_rejects_unknown_references(seed):
    with pytest.raises(NotFound) as exc:
        RequestLifecycle.create(seed.requester_id, 'x', seed.division_id, None, [{'material_id': 9999, 'quantity': 1}])
    assert exc.value.details['entity'] == 'material'

    with pytest.raises(NotFound):
        RequestLifecycle.create(seed.requester_id, 'x', 9999)

    with pytest.raises(InvalidInput):
        RequestLifecycle.create(seed.requester_id, 'x', seed.division_id, seed.foreign_service_id)

    with pytest.raises(InvalidInput):
        RequestLifecycle.create(seed.requester_id, '   ', seed.division_id)

    assert NeedExpression.query.count() == 0


def test_inactive_or_unknown_actor_is_refused(seed):
    with pytest.raises(NotFound):
        RequestLifecycle.create(seed.inactive_id, 'x', seed.division_id)
    with pytest.raises(NotFound):
        RequestLifecycle.create(12345, 'x', seed.division_id)


def test_submit_moves_to_pending(seed, make_expression):
    expression = make_expression()
    RequestLifecycle.submit(expression.id, seed.requester_id)
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.PENDING


def test_submit_by_other_user_is_not_owner(seed, make_expression):
    expression = make_expression()
    with pytest.raises(NotOwner) as exc:
        RequestLifecycle.submit(expression.id, seed.other_requester_id)
    assert exc.value.details['owner_id'] == seed.requester_id
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.DRAFT


def test_submit_without_lines_fails(seed):
    expression = RequestLifecycle.create(seed.requester_id, 'Empty', seed.division_id)
    with pytest.raises(EmptyExpression):
        RequestLifecycle.submit(expression.id, seed.requester_id)
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.DRAFT


def test_submit_twice_names_current_state(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.PENDING)
    with pytest.raises(InvalidTransition) as exc:
        RequestLifecycle.submit(expression.id, seed.requester_id)
    assert exc.value.details['current_state'] == ExpressionStatus.PENDING
    assert exc.value.details['event'] == ExpressionEvent.SUBMIT


def test_authorization_is_checked_before_state(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.APPROVED)
    # Illegal from Approved, but the actor is not the owner either
    with pytest.raises(NotOwner):
        RequestLifecycle.withdraw(expression.id, seed.other_requester_id)
    with pytest.raises(InsufficientRole):
        RequestLifecycle.decide(expression.id, seed.requester_id, ExpressionStatus.REJECTED)


def test_withdraw_returns_to_draft(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.PENDING)
    RequestLifecycle.withdraw(expression.id, seed.requester_id)
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.DRAFT


def test_decide_requires_approver(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.PENDING)
    with pytest.raises(InsufficientRole) as exc:
        RequestLifecycle.decide(expression.id, seed.requester_id, ExpressionStatus.APPROVED)
    assert exc.value.details['role'] == 'Requester'
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.PENDING


def test_approve_records_decision(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.PENDING)
    RequestLifecycle.decide(expression.id, seed.approver_id, ExpressionStatus.APPROVED, comment='Budget ok')

    stored = db.session.get(NeedExpression, expression.id)
    assert stored.status == ExpressionStatus.APPROVED
    assert stored.decision_comment == 'Budget ok'
    assert stored.decided_by_id == seed.approver_id
    assert stored.decided_at is not None


def test_administrator_may_decide(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.PENDING)
    RequestLifecycle.decide(expression.id, seed.admin_id, ExpressionStatus.REJECTED)
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.REJECTED


@pytest.mark.parametrize('outcome', ['Draft', 'InProgress', 'approved', None])
def test_decide_with_unknown_outcome_fails(seed, make_expression, outcome):
    expression = make_expression(status=ExpressionStatus.PENDING)
    with pytest.raises(InvalidTransition):
        RequestLifecycle.decide(expression.id, seed.approver_id, outcome)
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.PENDING


def test_decide_twice_fails(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.APPROVED)
    with pytest.raises(InvalidTransition) as exc:
        RequestLifecycle.decide(expression.id, seed.approver_id, ExpressionStatus.REJECTED)
    assert exc.value.details['current_state'] == ExpressionStatus.APPROVED
    assert exc.value.details['target_state'] == ExpressionStatus.REJECTED


def test_rejected_expression_can_be_reopened_and_resubmitted(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.REJECTED)
    RequestLifecycle.reopen(expression.id, seed.requester_id)
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.DRAFT

    RequestLifecycle.submit(expression.id, seed.requester_id)
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.PENDING


def test_reopen_only_from_rejected(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.PENDING)
    with pytest.raises(InvalidTransition):
        RequestLifecycle.reopen(expression.id, seed.requester_id)


def test_mark_in_progress_requires_administrator(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.APPROVED)
    with pytest.raises(InsufficientRole):
        RequestLifecycle.mark_in_progress(expression.id, seed.approver_id)

    RequestLifecycle.mark_in_progress(expression.id, seed.admin_id)
    assert db.session.get(NeedExpression, expression.id).status == ExpressionStatus.IN_PROGRESS

    with pytest.raises(InvalidTransition):
        RequestLifecycle.mark_in_progress(expression.id, seed.admin_id)


def test_edit_replaces_all_lines(seed, make_expression):
    expression = make_expression()
    RequestLifecycle.edit(
        expression.id,
        seed.requester_id,
        [{'material_id': seed.toner_id, 'quantity': 3}],
        title='Toner only',
    )

    stored = db.session.get(NeedExpression, expression.id)
    assert stored.title == 'Toner only'
    assert [(line.material_id, line.quantity) for line in stored.lines] == [(seed.toner_id, 3)]
    assert NeedLine.query.count() == 1


def test_edit_rejected_outside_draft(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.PENDING)
    with pytest.raises(InvalidTransition):
        RequestLifecycle.edit(expression.id, seed.requester_id, [{'material_id': seed.toner_id, 'quantity': 3}])
    assert [line.material_id for line in db.session.get(NeedExpression, expression.id).lines] == [seed.paper_id]


def test_failed_edit_keeps_previous_lines(seed, make_expression):
    expression = make_expression()
    with pytest.raises(NotFound):
        RequestLifecycle.edit(expression.id, seed.requester_id, [{'material_id': 4242, 'quantity': 1}])
    assert [line.quantity for line in db.session.get(NeedExpression, expression.id).lines] == [10]


def test_delete_draft(seed, make_expression):
    expression_id = make_expression().id
    RequestLifecycle.delete(expression_id, seed.requester_id)
    with pytest.raises(NotFound):
        RequestLifecycle.get(expression_id)
    assert NeedLine.query.count() == 0


def test_delete_refused_after_submission(seed, make_expression):
    expression = make_expression(status=ExpressionStatus.PENDING)
    with pytest.raises(InvalidTransition):
        RequestLifecycle.delete(expression.id, seed.requester_id)
    assert RequestLifecycle.get(expression.id) is not None


LEGAL = {
    (ExpressionStatus.DRAFT, ExpressionEvent.SUBMIT),
    (ExpressionStatus.DRAFT, ExpressionEvent.EDIT),
    (ExpressionStatus.DRAFT, ExpressionEvent.DELETE),
    (ExpressionStatus.PENDING, ExpressionEvent.WITHDRAW),
    (ExpressionStatus.PENDING, ExpressionEvent.APPROVE),
    (ExpressionStatus.PENDING, ExpressionEvent.REJECT),
    (ExpressionStatus.REJECTED, ExpressionEvent.REOPEN),
    (ExpressionStatus.APPROVED, ExpressionEvent.MARK_IN_PROGRESS),
}

EVENTS = [
    ExpressionEvent.SUBMIT,
    ExpressionEvent.WITHDRAW,
    ExpressionEvent.APPROVE,
    ExpressionEvent.REJECT,
    ExpressionEvent.REOPEN,
    ExpressionEvent.MARK_IN_PROGRESS,
    ExpressionEvent.EDIT,
    ExpressionEvent.DELETE,
]


@pytest.mark.parametrize('status', ExpressionStatus.ALL)
@pytest.mark.parametrize('event', EVENTS)
def test_transition_table_is_total(status, event):
    assert ProcurementStatusValidator.can_transition_expression(status, event) == ((status, event) in LEGAL)

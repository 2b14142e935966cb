from __future__ import annotations

from app.buisness.procurement.errors import InvalidTransition


class ExpressionStatus:
    DRAFT = "Draft"
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    IN_PROGRESS = "InProgress"

    ALL = (DRAFT, PENDING, APPROVED, REJECTED, IN_PROGRESS)


class OrderStatus:
    PENDING = "Pending"
    PARTIALLY_DELIVERED = "PartiallyDelivered"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    ALL = (PENDING, PARTIALLY_DELIVERED, DELIVERED, CANCELLED)


class ExpressionEvent:
    SUBMIT = "submit"
    WITHDRAW = "withdraw"
    APPROVE = "approve"
    REJECT = "reject"
    REOPEN = "reopen"
    MARK_IN_PROGRESS = "mark_in_progress"
    EDIT = "edit"
    DELETE = "delete"


class ProcurementStatusValidator:
    """
    Transition tables for need expressions and purchase orders.

    Keyed by (state, event). A pair missing from a table is an illegal event
    for that state; there is no permissive fallback.
    """

    # (state, event) -> next state; events that keep the state map to the same state
    _EXPRESSION = {
        (ExpressionStatus.DRAFT, ExpressionEvent.SUBMIT): ExpressionStatus.PENDING,
        (ExpressionStatus.DRAFT, ExpressionEvent.EDIT): ExpressionStatus.DRAFT,
        (ExpressionStatus.DRAFT, ExpressionEvent.DELETE): ExpressionStatus.DRAFT,
        (ExpressionStatus.PENDING, ExpressionEvent.WITHDRAW): ExpressionStatus.DRAFT,
        (ExpressionStatus.PENDING, ExpressionEvent.APPROVE): ExpressionStatus.APPROVED,
        (ExpressionStatus.PENDING, ExpressionEvent.REJECT): ExpressionStatus.REJECTED,
        (ExpressionStatus.REJECTED, ExpressionEvent.REOPEN): ExpressionStatus.DRAFT,
        (ExpressionStatus.APPROVED, ExpressionEvent.MARK_IN_PROGRESS): ExpressionStatus.IN_PROGRESS,
    }

    # Target state an event would move to, used only to name it in errors
    _EXPRESSION_EVENT_TARGET = {
        ExpressionEvent.SUBMIT: ExpressionStatus.PENDING,
        ExpressionEvent.WITHDRAW: ExpressionStatus.DRAFT,
        ExpressionEvent.APPROVE: ExpressionStatus.APPROVED,
        ExpressionEvent.REJECT: ExpressionStatus.REJECTED,
        ExpressionEvent.REOPEN: ExpressionStatus.DRAFT,
        ExpressionEvent.MARK_IN_PROGRESS: ExpressionStatus.IN_PROGRESS,
    }

    # Administrative order transitions; quantity-driven moves are derived, not validated here
    _ORDER_CANCEL_FROM = {OrderStatus.PENDING, OrderStatus.PARTIALLY_DELIVERED}

    @classmethod
    def expression_target(cls, expression, event: str) -> str:
        """
        Return the state ``expression`` moves to on ``event``.

        Raises:
            InvalidTransition: If the event is not legal from the current state
        """
        target = cls._EXPRESSION.get((expression.status, event))
        if target is None:
            raise InvalidTransition(
                "need expression",
                expression.id,
                expression.status,
                event,
                cls._EXPRESSION_EVENT_TARGET.get(event),
            )
        return target

    @classmethod
    def can_transition_expression(cls, current_status: str, event: str) -> bool:
        return (current_status, event) in cls._EXPRESSION

    @classmethod
    def check_order_cancellable(cls, order, derived_status: str) -> None:
        if order.is_cancelled or derived_status not in cls._ORDER_CANCEL_FROM:
            raise InvalidTransition(
                "purchase order",
                order.id,
                OrderStatus.CANCELLED if order.is_cancelled else derived_status,
                "cancel",
                OrderStatus.CANCELLED,
            )

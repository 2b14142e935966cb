"""
Procurement error taxonomy

Every failure of a lifecycle or ledger operation is a rejected operation:
the session is rolled back and the caller receives one of these errors with
enough detail (ids, states, quantities) to retry, adjust input or escalate.

ProcurementError subclasses ValueError so call sites written against the
plain ``raise ValueError`` convention keep catching them.
"""

from __future__ import annotations


class ProcurementError(ValueError):
    code = "procurement_error"

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, "details": self.details}


class NotFound(ProcurementError):
    code = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found", entity=entity, entity_id=entity_id)


# --- State machine ---------------------------------------------------------

class InvalidTransition(ProcurementError):
    code = "invalid_transition"

    def __init__(self, entity: str, entity_id, current_state: str, event: str, target_state: str | None = None):
        if target_state and target_state != current_state:
            message = (
                f"Cannot {event} {entity} {entity_id}: "
                f"transition '{current_state}' -> '{target_state}' is not allowed"
            )
        else:
            message = f"Cannot {event} {entity} {entity_id} in state '{current_state}'"
        super().__init__(
            message,
            entity=entity,
            entity_id=entity_id,
            current_state=current_state,
            event=event,
            target_state=target_state,
        )


# --- Authorization ---------------------------------------------------------

class NotOwner(ProcurementError):
    code = "not_owner"

    def __init__(self, entity: str, entity_id, actor_id, owner_id):
        super().__init__(
            f"User {actor_id} does not own {entity} {entity_id}",
            entity=entity,
            entity_id=entity_id,
            actor_id=actor_id,
            owner_id=owner_id,
        )


class InsufficientRole(ProcurementError):
    code = "insufficient_role"

    def __init__(self, action: str, actor_id, role: str | None, required: tuple[str, ...]):
        super().__init__(
            f"User {actor_id} with role '{role}' may not {action} (requires one of {', '.join(required)})",
            action=action,
            actor_id=actor_id,
            role=role,
            required_roles=list(required),
        )


# --- Expressions -----------------------------------------------------------

class EmptyExpression(ProcurementError):
    code = "empty_expression"

    def __init__(self, expression_id):
        super().__init__(
            f"Need expression {expression_id} has no lines and cannot be submitted",
            expression_id=expression_id,
        )


class InvalidInput(ProcurementError):
    """Malformed operation input (quantities, rates, duplicate lines...)."""
    code = "invalid_input"

    def __init__(self, message: str, **details):
        super().__init__(message, **details)


# --- Orders ----------------------------------------------------------------

class ExpressionNotApproved(ProcurementError):
    code = "expression_not_approved"

    def __init__(self, expression_id, current_state: str):
        super().__init__(
            f"Need expression {expression_id} is '{current_state}', an order requires 'Approved'",
            expression_id=expression_id,
            current_state=current_state,
        )


class OrderAlreadyExists(ProcurementError):
    code = "order_already_exists"

    def __init__(self, expression_id, order_id, order_number):
        super().__init__(
            f"Need expression {expression_id} already has purchase order {order_number}",
            expression_id=expression_id,
            order_id=order_id,
            order_number=order_number,
        )


class RegenerationConflict(ProcurementError):
    code = "regeneration_conflict"

    def __init__(self, order_id, order_line_id, quantity_received: int, requested_quantity: int | None):
        if requested_quantity is None:
            message = (
                f"Order line {order_line_id} has {quantity_received} received and cannot be "
                f"removed by regenerating order {order_id}"
            )
        else:
            message = (
                f"Order line {order_line_id} cannot be reduced to {requested_quantity}: "
                f"{quantity_received} already received"
            )
        super().__init__(
            message,
            order_id=order_id,
            order_line_id=order_line_id,
            quantity_received=quantity_received,
            requested_quantity=requested_quantity,
        )


class OrderCancelled(ProcurementError):
    code = "order_cancelled"

    def __init__(self, order_id):
        super().__init__(f"Purchase order {order_id} is cancelled", order_id=order_id)


# --- Receptions ------------------------------------------------------------

class ConformityMismatch(ProcurementError):
    code = "conformity_mismatch"

    def __init__(self, order_line_id, received: int, accepted: int, rejected: int):
        super().__init__(
            f"Order line {order_line_id}: accepted ({accepted}) + rejected ({rejected}) "
            f"must equal received ({received})",
            order_line_id=order_line_id,
            quantity_received=received,
            quantity_accepted=accepted,
            quantity_rejected=rejected,
        )


class EmptyReception(ProcurementError):
    code = "empty_reception"

    def __init__(self, order_id):
        super().__init__(
            f"Reception for purchase order {order_id} has no received quantity",
            order_id=order_id,
        )


class OverDelivery(ProcurementError):
    code = "over_delivery"

    def __init__(self, order_line_id, quantity_received: int, remaining: int):
        super().__init__(
            f"Order line {order_line_id}: cannot receive {quantity_received}, only {remaining} remaining",
            order_line_id=order_line_id,
            quantity_received=quantity_received,
            remaining=remaining,
        )


class ConcurrentModification(ProcurementError):
    code = "concurrent_modification"

    def __init__(self, entity: str, entity_id, attempts: int):
        super().__init__(
            f"{entity} {entity_id} kept changing concurrently; gave up after {attempts} attempts",
            entity=entity,
            entity_id=entity_id,
            attempts=attempts,
        )

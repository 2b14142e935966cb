"""
Request Lifecycle
Need expression creation and approval state machine.

    Draft -> Pending -> {Approved, Rejected}
    Approved -> InProgress
    Rejected -> Draft (reopen), Pending -> Draft (withdraw)

Every operation resolves the actor and checks its capability first, then
validates the transition against ProcurementStatusValidator, then commits.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from app import db
from app.buisness.procurement import inputs
from app.buisness.procurement.capabilities import Capability, CapabilityCheck
from app.buisness.procurement.errors import EmptyExpression, InvalidInput, InvalidTransition, NotFound
from app.buisness.procurement.events import dispatch, expression_decided, expression_submitted
from app.buisness.procurement.status_validator import (
    ExpressionEvent,
    ExpressionStatus,
    ProcurementStatusValidator,
)
from app.buisness.procurement.transaction import atomic
from app.data.core.sequences import ExpressionNumberManager
from app.data.core.user_info.user import User
from app.data.procurement import NeedExpression, NeedLine
from app.utils.logger import get_logger
from app.services.procurement.catalog_service import CatalogService

logger = get_logger("procurement.buisness.request_lifecycle")

ENTITY = "need expression"


@dataclass(frozen=True)
class NeedLineInput:
    """One requested item as accepted by create/edit"""
    material_id: int
    quantity: int
    description: Optional[str] = None
    justification: Optional[str] = None

    @classmethod
    def from_value(cls, value, index: int) -> NeedLineInput:
        if isinstance(value, cls):
            data = {
                "material_id": value.material_id,
                "quantity": value.quantity,
                "description": value.description,
                "justification": value.justification,
            }
        elif isinstance(value, dict):
            data = value
        else:
            raise InvalidInput(f"Line {index} must be an object", line=index)

        if data.get("material_id") is None:
            raise InvalidInput(f"Line {index}: material_id is required", line=index, field="material_id")

        return cls(
            material_id=inputs.integer(data.get("material_id"), "material_id", minimum=1, line=index),
            quantity=inputs.integer(data.get("quantity"), "quantity", minimum=1, line=index),
            description=inputs.text(data.get("description"), "description", max_length=255),
            justification=inputs.text(data.get("justification"), "justification"),
        )


class RequestLifecycle:
    """
    Operations on need expressions.

    All methods are classmethods taking ids; they return the persisted
    NeedExpression and raise a ProcurementError subclass on rejection.
    """

    @staticmethod
    def get(expression_id: int) -> NeedExpression:
        expression = db.session.get(NeedExpression, expression_id)
        if expression is None:
            raise NotFound(ENTITY, expression_id)
        return expression

    @classmethod
    def create(
        cls,
        actor_id: int,
        title: str,
        division_id: int,
        service_id: Optional[int] = None,
        lines: Iterable = (),
    ) -> NeedExpression:
        """
        Create a Draft need expression with a fresh number.

        Args:
            actor_id: Creator; any active user role may create
            title: Short label of the request
            division_id: Requesting division
            service_id: Optional service, must belong to the division
            lines: NeedLineInput objects or dicts with material_id, quantity,
                description and justification

        Returns:
            The created NeedExpression

        Raises:
            NotFound: Unknown actor, division, service or material
            InvalidInput: Missing title, non-positive quantity
        """
        with atomic("create need expression"):
            actor = CapabilityCheck.require_role(actor_id, "create need expressions", Capability.CREATE_EXPRESSION)

            title = inputs.text(title, "title", required=True, max_length=255)
            division = CatalogService.get_division(division_id)
            if service_id is not None:
                service = CatalogService.get_service(service_id)
                if service.division_id != division.id:
                    raise InvalidInput(
                        f"Service {service.id} does not belong to division {division.id}",
                        field="service_id",
                        service_id=service.id,
                        division_id=division.id,
                    )
            parsed = cls._parse_lines(lines)

            expression = NeedExpression(
                number=ExpressionNumberManager.get_next_id(),
                title=title,
                division_id=division.id,
                service_id=service_id,
                status=ExpressionStatus.DRAFT,
                created_by_id=actor.id,
                updated_by_id=actor.id,
            )
            db.session.add(expression)
            cls._replace_lines(expression, parsed, actor)
            db.session.flush()

            logger.info(f"Need expression {expression.number} created by user {actor.id} with {len(parsed)} lines")

        return expression

    @classmethod
    def submit(cls, expression_id: int, actor_id: int) -> NeedExpression:
        """Draft -> Pending, creator only. An expression without lines cannot be submitted."""
        with atomic("submit need expression"):
            expression = cls.get(expression_id)
            actor = CapabilityCheck.require_owner(actor_id, ENTITY, expression)
            target = ProcurementStatusValidator.expression_target(expression, ExpressionEvent.SUBMIT)
            if not expression.lines:
                raise EmptyExpression(expression.id)
            cls._apply(expression, target, actor)

        dispatch(expression_submitted, expression.id, actor_id, number=expression.number)
        return expression

    @classmethod
    def withdraw(cls, expression_id: int, actor_id: int) -> NeedExpression:
        with atomic("withdraw need expression"):
            expression = cls.get(expression_id)
            actor = CapabilityCheck.require_owner(actor_id, ENTITY, expression)
            target = ProcurementStatusValidator.expression_target(expression, ExpressionEvent.WITHDRAW)
            cls._apply(expression, target, actor)
        return expression

    @classmethod
    def decide(
        cls,
        expression_id: int,
        actor_id: int,
        outcome: str,
        comment: Optional[str] = None,
    ) -> NeedExpression:
        """
        Approve or reject a Pending expression.

        Args:
            outcome: ExpressionStatus.APPROVED or ExpressionStatus.REJECTED

        Raises:
            InsufficientRole: Actor is neither Approver nor Administrator
            InvalidTransition: Expression not Pending, or outcome is not a decision
        """
        with atomic("decide need expression"):
            expression = cls.get(expression_id)
            actor = CapabilityCheck.require_role(actor_id, "decide need expressions", Capability.DECIDE_EXPRESSION)

            event = {
                ExpressionStatus.APPROVED: ExpressionEvent.APPROVE,
                ExpressionStatus.REJECTED: ExpressionEvent.REJECT,
            }.get(outcome)
            if event is None:
                raise InvalidTransition(ENTITY, expression.id, expression.status, "decide", outcome)

            target = ProcurementStatusValidator.expression_target(expression, event)
            expression.decision_comment = inputs.text(comment, "comment")
            expression.decided_at = datetime.utcnow()
            expression.decided_by_id = actor.id
            cls._apply(expression, target, actor)

        dispatch(
            expression_decided,
            expression.id,
            actor_id,
            outcome=outcome,
            comment=expression.decision_comment,
        )
        return expression

    @classmethod
    def reopen(cls, expression_id: int, actor_id: int) -> NeedExpression:
        """Rejected -> Draft so the creator can correct and resubmit."""
        with atomic("reopen need expression"):
            expression = cls.get(expression_id)
            actor = CapabilityCheck.require_owner(actor_id, ENTITY, expression)
            target = ProcurementStatusValidator.expression_target(expression, ExpressionEvent.REOPEN)
            cls._apply(expression, target, actor)
        return expression

    @classmethod
    def mark_in_progress(cls, expression_id: int, actor_id: int) -> NeedExpression:
        with atomic("mark need expression in progress"):
            expression = cls.get(expression_id)
            actor = CapabilityCheck.require_role(actor_id, "mark need expressions in progress", Capability.MANAGE_ORDERS)
            cls.mark_in_progress_within(expression, actor)
        return expression

    @classmethod
    def mark_in_progress_within(cls, expression: NeedExpression, actor: User) -> None:
        """Approved -> InProgress inside the caller's transaction (no commit)."""
        target = ProcurementStatusValidator.expression_target(expression, ExpressionEvent.MARK_IN_PROGRESS)
        cls._apply(expression, target, actor)

    @classmethod
    def edit(
        cls,
        expression_id: int,
        actor_id: int,
        new_lines: Iterable,
        title: Optional[str] = None,
    ) -> NeedExpression:
        """Replace every line (and optionally the title) of a Draft expression."""
        with atomic("edit need expression"):
            expression = cls.get(expression_id)
            actor = CapabilityCheck.require_owner(actor_id, ENTITY, expression)
            ProcurementStatusValidator.expression_target(expression, ExpressionEvent.EDIT)

            parsed = cls._parse_lines(new_lines)
            if title is not None:
                expression.title = inputs.text(title, "title", required=True, max_length=255)

            expression.lines.clear()
            db.session.flush()
            cls._replace_lines(expression, parsed, actor)
            expression.touch(actor.id)

            logger.info(f"Need expression {expression.number} edited by user {actor.id}: {len(parsed)} lines")
        return expression

    @classmethod
    def delete(cls, expression_id: int, actor_id: int) -> None:
        with atomic("delete need expression"):
            expression = cls.get(expression_id)
            CapabilityCheck.require_owner(actor_id, ENTITY, expression)
            ProcurementStatusValidator.expression_target(expression, ExpressionEvent.DELETE)
            number = expression.number
            db.session.delete(expression)
            logger.info(f"Need expression {number} deleted by user {actor_id}")

    # ------------------------------------------------------------------

    @staticmethod
    def _apply(expression: NeedExpression, target: str, actor: User) -> None:
        previous = expression.status
        expression.status = target
        expression.touch(actor.id)
        logger.info(f"Need expression {expression.number}: {previous} -> {target} by user {actor.id}")

    @staticmethod
    def _parse_lines(lines) -> list[NeedLineInput]:
        if lines is None:
            return []
        if isinstance(lines, (str, bytes, dict)):
            raise InvalidInput("lines must be a list", field="lines")
        return [NeedLineInput.from_value(value, index) for index, value in enumerate(lines, start=1)]

    @staticmethod
    def _replace_lines(expression: NeedExpression, parsed: list[NeedLineInput], actor: User) -> None:
        for line in parsed:
            material = CatalogService.get_material(line.material_id)
            expression.lines.append(NeedLine(
                material_id=material.id,
                description=line.description or material.designation,
                quantity=line.quantity,
                justification=line.justification,
                created_by_id=actor.id,
                updated_by_id=actor.id,
            ))

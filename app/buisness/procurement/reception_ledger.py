"""
Reception Ledger
Records deliveries against purchase order lines.

Quantity conservation: for every order line, the sum received across all
receptions never exceeds the quantity ordered. Receptions are append-only;
only their confirmation flag changes after creation.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from app import db
from app.buisness.procurement import inputs
from app.buisness.procurement.capabilities import Capability, CapabilityCheck
from app.buisness.procurement.errors import (
    ConcurrentModification,
    ConformityMismatch,
    EmptyReception,
    InvalidInput,
    NotFound,
    OrderCancelled,
    OverDelivery,
)
from app.buisness.procurement.events import dispatch, reception_recorded
from app.buisness.procurement.fulfillment_stats import derive_status
from app.buisness.procurement.transaction import atomic
from app.data.core.sequences import ReceptionNumberManager
from app.data.procurement import PurchaseOrder, Reception, ReceptionLine
from app.utils.logger import get_logger

logger = get_logger("procurement.buisness.reception_ledger")


@dataclass(frozen=True)
class ReceptionLineInput:
    order_line_id: int
    quantity_received: int
    quantity_accepted: int
    quantity_rejected: int = 0
    observations: Optional[str] = None

    @classmethod
    def from_value(cls, value, index: int) -> ReceptionLineInput:
        if isinstance(value, cls):
            # Constructed directly: validate like any other input
            value = asdict(value)
        if not isinstance(value, dict):
            raise InvalidInput(f"Line {index} must be an object", line=index)
        if value.get("order_line_id") is None:
            raise InvalidInput(f"Line {index}: order_line_id is required", line=index, field="order_line_id")

        received = inputs.integer(value.get("quantity_received", 0), "quantity_received", line=index)
        rejected = inputs.integer(value.get("quantity_rejected") or 0, "quantity_rejected", line=index)
        accepted = value.get("quantity_accepted")
        # Everything not rejected is accepted unless stated otherwise
        if accepted is None:
            accepted = max(received - rejected, 0)
        return cls(
            order_line_id=inputs.integer(value.get("order_line_id"), "order_line_id", minimum=1, line=index),
            quantity_received=received,
            quantity_accepted=inputs.integer(accepted, "quantity_accepted", line=index),
            quantity_rejected=rejected,
            observations=inputs.text(value.get("observations"), "observations"),
        )


class ReceptionLedger:
    """
    Delivery recording for purchase orders. Administrator only.

    ``record`` validates the whole request before writing anything, locks the
    order row and retries when the order's version counter shows a concurrent
    writer got there first.
    """

    @staticmethod
    def get(reception_id: int) -> Reception:
        reception = db.session.get(Reception, reception_id)
        if reception is None:
            raise NotFound("reception", reception_id)
        return reception

    @staticmethod
    def list_for_order(order_id: int) -> list[Reception]:
        order = db.session.get(PurchaseOrder, order_id)
        if order is None:
            raise NotFound("purchase order", order_id)
        return order.receptions.all()

    @classmethod
    def record(
        cls,
        order_id: int,
        actor_id: int,
        carrier: Optional[str] = None,
        observations: Optional[str] = None,
        lines: Iterable = (),
        reception_date: Optional[date] = None,
    ) -> Reception:
        """
        Record one delivery against an order.

        Args:
            order_id: Purchase order receiving goods
            actor_id: Administrator recording the delivery
            carrier: Optional carrier name
            lines: ReceptionLineInput objects or dicts with order_line_id,
                quantity_received, quantity_accepted, quantity_rejected and
                observations. Lines receiving nothing are skipped.
            reception_date: Defaults to today

        Returns:
            The new Reception

        Raises:
            NotFound: Unknown order, or a line not on this order
            OrderCancelled: The order is cancelled
            InvalidInput: Negative quantity, line listed twice
            ConformityMismatch: accepted + rejected != received
            EmptyReception: Nothing received on any line
            OverDelivery: A line would receive more than what remains
            ConcurrentModification: Version conflicts outlasted the retries
        """
        attempts = max(int(current_app.config.get("RECEPTION_MAX_RETRIES", 3)), 1)
        # Every attempt reads the same lines; malformed values are refused after the order is loaded
        if lines is not None and not isinstance(lines, (str, bytes, dict)):
            lines = list(lines)

        for attempt in range(1, attempts + 1):
            try:
                reception = cls._record_once(order_id, actor_id, carrier, observations, lines, reception_date)
                break
            except StaleDataError:
                logger.warning(f"Reception on order {order_id}: version conflict (attempt {attempt}/{attempts})")
                if attempt == attempts:
                    raise ConcurrentModification("purchase order", order_id, attempts)

        dispatch(
            reception_recorded,
            reception.id,
            actor_id,
            number=reception.number,
            order_id=order_id,
            total_received=reception.total_received,
        )
        return reception

    @classmethod
    def _record_once(cls, order_id, actor_id, carrier, observations, lines, reception_date) -> Reception:
        with atomic("record reception"):
            order = (
                db.session.query(PurchaseOrder)
                .filter(PurchaseOrder.id == order_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if order is None:
                raise NotFound("purchase order", order_id)
            actor = CapabilityCheck.require_role(actor_id, "record receptions", Capability.RECORD_RECEPTIONS)
            if order.is_cancelled:
                raise OrderCancelled(order.id)

            accepted_lines = cls._validate_lines(order, lines)

            reception = Reception(
                number=ReceptionNumberManager.get_next_id(),
                order_id=order.id,
                reception_date=reception_date or date.today(),
                carrier=inputs.text(carrier, "carrier", max_length=200),
                observations=inputs.text(observations, "observations"),
                created_by_id=actor.id,
                updated_by_id=actor.id,
            )
            for order_line, line in accepted_lines:
                reception.lines.append(ReceptionLine(
                    order_line_id=order_line.id,
                    quantity_received=line.quantity_received,
                    quantity_accepted=line.quantity_accepted,
                    quantity_rejected=line.quantity_rejected,
                    observations=line.observations,
                    created_by_id=actor.id,
                    updated_by_id=actor.id,
                ))
                order_line.quantity_received = (order_line.quantity_received or 0) + line.quantity_received
                order_line.touch(actor.id)
            db.session.add(reception)

            previous = order.status
            order.status = derive_status(
                sum(line.quantity for line in order.lines),
                sum(line.quantity_received or 0 for line in order.lines),
            )
            # Always write the order row so the version counter detects concurrent receptions
            order.touch(actor.id)
            db.session.flush()

            logger.info(
                f"Reception {reception.number} on order {order.number} by user {actor.id}: "
                f"{reception.total_received} received over {len(accepted_lines)} lines, "
                f"{previous} -> {order.status}"
            )
        return reception

    @staticmethod
    def _validate_lines(order: PurchaseOrder, lines) -> list:
        if lines is None or isinstance(lines, (str, bytes, dict)):
            raise InvalidInput("lines must be a list", field="lines")

        parsed = [ReceptionLineInput.from_value(value, index) for index, value in enumerate(lines, start=1)]
        order_lines = {line.id: line for line in order.lines}

        seen = set()
        for line in parsed:
            if line.order_line_id not in order_lines:
                raise NotFound("order line", line.order_line_id)
            if line.order_line_id in seen:
                raise InvalidInput(
                    f"Order line {line.order_line_id} appears more than once",
                    order_line_id=line.order_line_id,
                )
            seen.add(line.order_line_id)
            if line.quantity_accepted + line.quantity_rejected != line.quantity_received:
                raise ConformityMismatch(
                    line.order_line_id,
                    line.quantity_received,
                    line.quantity_accepted,
                    line.quantity_rejected,
                )

        receiving = [line for line in parsed if line.quantity_received > 0]
        if not receiving:
            raise EmptyReception(order.id)

        result = []
        for line in receiving:
            order_line = order_lines[line.order_line_id]
            remaining = order_line.quantity_remaining
            if line.quantity_received > remaining:
                raise OverDelivery(line.order_line_id, line.quantity_received, remaining)
            result.append((order_line, line))
        return result

    @classmethod
    def mark_confirmation_generated(
        cls,
        reception_id: int,
        actor_id: int,
        confirmation_url: Optional[str] = None,
    ) -> Reception:
        """
        Flag the reception's confirmation document as generated.
        One-way; repeating the call changes nothing except filling a missing URL.
        """
        with atomic("mark reception confirmation"):
            reception = cls.get(reception_id)
            actor = CapabilityCheck.require_role(actor_id, "mark confirmations", Capability.RECORD_RECEPTIONS)
            url = inputs.text(confirmation_url, "confirmation_url", max_length=500)

            if reception.confirmation_generated:
                if url and not reception.confirmation_url:
                    reception.confirmation_url = url
                    reception.touch(actor.id)
                return reception

            reception.confirmation_generated = True
            reception.confirmation_url = url
            reception.confirmation_generated_at = datetime.utcnow()
            reception.touch(actor.id)
            logger.info(f"Reception {reception.number}: confirmation generated by user {actor.id}")
        return reception

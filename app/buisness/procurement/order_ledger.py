"""
Order Ledger
Derives purchase orders from approved need expressions, regenerates them in
place and cancels them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from flask import current_app

from app import db
from app.buisness.procurement import inputs
from app.buisness.procurement.capabilities import Capability, CapabilityCheck
from app.buisness.procurement.errors import (
    ExpressionNotApproved,
    InvalidInput,
    NotFound,
    OrderAlreadyExists,
    OrderCancelled,
    RegenerationConflict,
)
from app.buisness.procurement.events import dispatch, order_cancelled, order_created, order_regenerated
from app.buisness.procurement.financials import OrderTotals, order_totals
from app.buisness.procurement.fulfillment_stats import derive_status
from app.buisness.procurement.request_lifecycle import RequestLifecycle
from app.buisness.procurement.status_validator import ExpressionStatus, OrderStatus, ProcurementStatusValidator
from app.buisness.procurement.transaction import atomic
from app.data.core.sequences import OrderNumberManager
from app.data.core.user_info.user import User
from app.data.procurement import OrderLine, PurchaseOrder
from app.utils.logger import get_logger
from app.services.procurement.catalog_service import CatalogService, MaterialSnapshot

logger = get_logger("procurement.buisness.order_ledger")

ENTITY = "purchase order"


@dataclass(frozen=True)
class OrderLineInput:
    material_id: int
    quantity: int
    unit_price: Decimal
    description: Optional[str] = None

    @classmethod
    def from_value(cls, value, index: int) -> OrderLineInput:
        if isinstance(value, cls):
            # Constructed directly: validate like any other input
            value = asdict(value)
        if not isinstance(value, dict):
            raise InvalidInput(f"Line {index} must be an object", line=index)
        if value.get("material_id") is None:
            raise InvalidInput(f"Line {index}: material_id is required", line=index, field="material_id")
        return cls(
            material_id=inputs.integer(value.get("material_id"), "material_id", minimum=1, line=index),
            quantity=inputs.integer(value.get("quantity"), "quantity", minimum=1, line=index),
            unit_price=inputs.decimal(value.get("unit_price"), "unit_price", minimum=Decimal(0), line=index),
            description=inputs.text(value.get("description"), "description", max_length=255),
        )


@dataclass(frozen=True)
class _PricedLine:
    """An input line resolved against the catalog"""
    snapshot: MaterialSnapshot
    description: str
    quantity: int
    unit_price: Decimal

    @property
    def identity(self) -> tuple[str, str]:
        return (self.snapshot.code, self.description.strip().lower())


@dataclass(frozen=True)
class _OrderTerms:
    supplier_id: Optional[int]
    supplier_name: Optional[str]
    delivery_address: Optional[str]
    tax_rate: Decimal
    discount_rate: Decimal
    observations: Optional[str]
    lines: tuple[_PricedLine, ...]


class OrderLedger:
    """
    Purchase order operations. Administrator only.

    Quantities received on order lines are never written here; they belong to
    the reception ledger. Regeneration keeps them on matching lines.
    """

    @staticmethod
    def get(order_id: int) -> PurchaseOrder:
        order = db.session.get(PurchaseOrder, order_id)
        if order is None:
            raise NotFound(ENTITY, order_id)
        return order

    @staticmethod
    def get_by_expression(expression_id: int) -> PurchaseOrder:
        order = PurchaseOrder.query.filter_by(expression_id=expression_id).first()
        if order is None:
            raise NotFound(ENTITY, f"for need expression {expression_id}")
        return order

    @staticmethod
    def totals(order: PurchaseOrder) -> OrderTotals:
        return order_totals(order, current_app.config.get("CURRENCY_DECIMALS", 2))

    @classmethod
    def create(
        cls,
        expression_id: int,
        actor_id: int,
        supplier_id: Optional[int] = None,
        delivery_address: Optional[str] = None,
        tax_rate=0,
        discount_rate=0,
        observations: Optional[str] = None,
        lines: Iterable = (),
    ) -> PurchaseOrder:
        """
        Emit the purchase order of an approved need expression.

        The expression moves to InProgress in the same transaction.

        Args:
            expression_id: Approved need expression
            actor_id: Administrator emitting the order
            supplier_id: Optional catalog supplier, its name is snapshotted
            tax_rate: Percentage in [0, 100]
            discount_rate: Percentage in [0, 100]
            lines: OrderLineInput objects or dicts with material_id, quantity,
                unit_price and an optional description

        Raises:
            NotFound: Unknown expression, supplier or material
            OrderAlreadyExists: The expression already has an order
            ExpressionNotApproved: The expression is not Approved
            InvalidInput: No lines, bad quantity, price or rate
        """
        with atomic("create purchase order"):
            expression = RequestLifecycle.get(expression_id)
            actor = CapabilityCheck.require_role(actor_id, "emit purchase orders", Capability.MANAGE_ORDERS)

            existing = PurchaseOrder.query.filter_by(expression_id=expression.id).first()
            if existing is not None:
                raise OrderAlreadyExists(expression.id, existing.id, existing.number)
            if expression.status != ExpressionStatus.APPROVED:
                raise ExpressionNotApproved(expression.id, expression.status)

            terms = cls._resolve_terms(supplier_id, delivery_address, tax_rate, discount_rate, observations, lines)

            order = PurchaseOrder(
                number=OrderNumberManager.get_next_id(),
                expression_id=expression.id,
                emitted_at=datetime.utcnow(),
                created_by_id=actor.id,
                updated_by_id=actor.id,
            )
            cls._apply_terms(order, terms, actor)
            for line_number, priced in enumerate(terms.lines, start=1):
                order.lines.append(cls._new_line(priced, line_number, actor))
            order.status = derive_status(sum(line.quantity for line in terms.lines), 0)
            db.session.add(order)

            RequestLifecycle.mark_in_progress_within(expression, actor)
            db.session.flush()

            totals = cls.totals(order)
            logger.info(
                f"Purchase order {order.number} created for expression {expression.number} "
                f"by user {actor.id}: {len(terms.lines)} lines, total {totals.rounded_total}"
            )

        dispatch(
            order_created,
            order.id,
            actor_id,
            number=order.number,
            expression_id=expression.id,
            total=str(totals.rounded_total),
        )
        return order

    @classmethod
    def regenerate(
        cls,
        order_id: int,
        actor_id: int,
        supplier_id: Optional[int] = None,
        delivery_address: Optional[str] = None,
        tax_rate=0,
        discount_rate=0,
        observations: Optional[str] = None,
        lines: Iterable = (),
    ) -> PurchaseOrder:
        """
        Replace the order terms and lines in place, keeping id and number.

        Lines are matched on material code and description (case and
        surrounding whitespace ignored). A matched line keeps its id and its
        received quantity; a line that already received goods can neither be
        dropped nor reduced below what it received.

        Raises:
            OrderCancelled: The order is cancelled
            RegenerationConflict: Received quantities would be lost
        """
        with atomic("regenerate purchase order"):
            order = cls.get(order_id)
            actor = CapabilityCheck.require_role(actor_id, "regenerate purchase orders", Capability.MANAGE_ORDERS)
            if order.is_cancelled:
                raise OrderCancelled(order.id)

            terms = cls._resolve_terms(supplier_id, delivery_address, tax_rate, discount_rate, observations, lines)

            existing = {line.snapshot_identity: line for line in order.lines}
            kept_ids = set()
            new_lines = []
            for line_number, priced in enumerate(terms.lines, start=1):
                line = existing.get(priced.identity)
                if line is None:
                    new_lines.append(cls._new_line(priced, line_number, actor))
                    continue
                received = line.quantity_received or 0
                if priced.quantity < received:
                    raise RegenerationConflict(order.id, line.id, received, priced.quantity)
                line.line_number = line_number
                line.material_id = priced.snapshot.material_id
                line.material_name = priced.snapshot.designation
                line.unit = priced.snapshot.unit
                line.description = priced.description
                line.quantity = priced.quantity
                line.unit_price = priced.unit_price
                line.touch(actor.id)
                kept_ids.add(line.id)
                new_lines.append(line)

            for line in order.lines:
                if line.id in kept_ids:
                    continue
                if line.quantity_received:
                    raise RegenerationConflict(order.id, line.id, line.quantity_received, None)

            removed = len(order.lines) - len(kept_ids)
            order.lines = new_lines
            cls._apply_terms(order, terms, actor)
            order.status = derive_status(
                sum(line.quantity for line in new_lines),
                sum(line.quantity_received or 0 for line in new_lines),
            )
            db.session.flush()

            totals = cls.totals(order)
            logger.info(
                f"Purchase order {order.number} regenerated by user {actor.id}: "
                f"{len(kept_ids)} kept, {len(new_lines) - len(kept_ids)} added, {removed} removed, "
                f"total {totals.rounded_total}"
            )

        dispatch(order_regenerated, order.id, actor_id, number=order.number, total=str(totals.rounded_total))
        return order

    @classmethod
    def cancel(cls, order_id: int, actor_id: int, reason: Optional[str] = None) -> PurchaseOrder:
        """
        Administratively cancel an order that is not fully delivered.
        Receptions are refused afterwards.
        """
        with atomic("cancel purchase order"):
            order = cls.get(order_id)
            actor = CapabilityCheck.require_role(actor_id, "cancel purchase orders", Capability.MANAGE_ORDERS)
            current = derive_status(
                sum(line.quantity for line in order.lines),
                sum(line.quantity_received or 0 for line in order.lines),
                order.is_cancelled,
            )
            ProcurementStatusValidator.check_order_cancellable(order, current)

            order.is_cancelled = True
            order.cancellation_reason = inputs.text(reason, "reason")
            order.cancelled_at = datetime.utcnow()
            order.status = OrderStatus.CANCELLED
            order.touch(actor.id)
            logger.info(f"Purchase order {order.number}: {current} -> {order.status} by user {actor.id}")

        dispatch(order_cancelled, order.id, actor_id, number=order.number, reason=order.cancellation_reason)
        return order

    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_terms(supplier_id, delivery_address, tax_rate, discount_rate, observations, lines) -> _OrderTerms:
        if lines is None or isinstance(lines, (str, bytes, dict)):
            raise InvalidInput("lines must be a non-empty list", field="lines")
        parsed = [OrderLineInput.from_value(value, index) for index, value in enumerate(lines, start=1)]
        if not parsed:
            raise InvalidInput("A purchase order needs at least one line", field="lines")

        tax = inputs.rate(tax_rate, "tax_rate")
        discount = inputs.rate(discount_rate, "discount_rate")

        priced = []
        seen = set()
        for index, line in enumerate(parsed, start=1):
            snapshot = CatalogService.snapshot_material(line.material_id)
            resolved = _PricedLine(
                snapshot=snapshot,
                description=line.description or snapshot.designation,
                quantity=line.quantity,
                unit_price=line.unit_price,
            )
            if resolved.identity in seen:
                raise InvalidInput(
                    f"Line {index} duplicates material {snapshot.code} with the same description",
                    line=index,
                    material_code=snapshot.code,
                )
            seen.add(resolved.identity)
            priced.append(resolved)

        return _OrderTerms(
            supplier_id=supplier_id,
            supplier_name=CatalogService.supplier_name(supplier_id),
            delivery_address=inputs.text(delivery_address, "delivery_address"),
            tax_rate=tax,
            discount_rate=discount,
            observations=inputs.text(observations, "observations"),
            lines=tuple(priced),
        )

    @staticmethod
    def _apply_terms(order: PurchaseOrder, terms: _OrderTerms, actor: User) -> None:
        order.supplier_id = terms.supplier_id
        order.supplier_name = terms.supplier_name
        order.delivery_address = terms.delivery_address
        order.tax_rate = terms.tax_rate
        order.discount_rate = terms.discount_rate
        order.observations = terms.observations
        order.touch(actor.id)

    @staticmethod
    def _new_line(priced: _PricedLine, line_number: int, actor: User) -> OrderLine:
        return OrderLine(
            line_number=line_number,
            material_id=priced.snapshot.material_id,
            material_code=priced.snapshot.code,
            material_name=priced.snapshot.designation,
            unit=priced.snapshot.unit,
            description=priced.description,
            quantity=priced.quantity,
            unit_price=priced.unit_price,
            quantity_received=0,
            created_by_id=actor.id,
            updated_by_id=actor.id,
        )

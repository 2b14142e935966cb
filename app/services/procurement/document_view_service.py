"""
Document View Service
Fully resolved, read-only views of need expressions and purchase orders for
the document generator (expression sheet, purchase order, reception
confirmation). Catalog names are resolved, totals and fulfillment stats are
attached, and numbers are formatted for display.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from flask import current_app

from app.buisness.procurement.financials import OrderTotals
from app.buisness.procurement.fulfillment_stats import FulfillmentStats, OrderStats
from app.buisness.procurement.order_ledger import OrderLedger
from app.buisness.procurement.request_lifecycle import RequestLifecycle
from app.data.procurement import PurchaseOrder


DEFAULT_PREFIXES = {"EXPRESSION": "EB", "ORDER": "BC", "RECEPTION": "REC"}


def format_number(prefix: str, number: Optional[int], padding: int = 6) -> Optional[str]:
    """``format_number("BC", 42)`` -> ``"BC-000042"``"""
    if number is None:
        return None
    return f"{prefix}-{number:0{padding}d}"


def _display_number(kind: str, number: Optional[int]) -> Optional[str]:
    config = current_app.config
    prefix = config.get(f"{kind}_NUMBER_PREFIX", DEFAULT_PREFIXES[kind])
    return format_number(prefix, number, int(config.get("NUMBER_PADDING", 6)))


def _user_name(user) -> Optional[str]:
    return user.display_name if user is not None else None


def _jsonable(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, tuple):
        return [_jsonable(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _View:
    def to_dict(self) -> dict:
        return {f.name: _jsonable(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class ExpressionLineView(_View):
    material_code: str
    material_name: str
    unit: str
    description: str
    quantity: int
    justification: Optional[str]


@dataclass(frozen=True)
class ExpressionDocument(_View):
    expression_id: int
    number: int
    display_number: str
    title: str
    status: str
    division_name: str
    service_name: Optional[str]
    created_by: Optional[str]
    created_at: Optional[datetime]
    decided_by: Optional[str]
    decided_at: Optional[datetime]
    decision_comment: Optional[str]
    total_quantity: int
    lines: tuple[ExpressionLineView, ...]
    order_display_number: Optional[str]


@dataclass(frozen=True)
class OrderLineView(_View):
    line_number: int
    material_code: str
    material_name: str
    unit: str
    description: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    quantity_received: int
    quantity_remaining: int
    percent_received: int


@dataclass(frozen=True)
class ReceptionLineView(_View):
    line_number: int
    material_code: str
    description: str
    quantity_received: int
    quantity_accepted: int
    quantity_rejected: int
    observations: Optional[str]


@dataclass(frozen=True)
class ReceptionView(_View):
    reception_id: int
    number: int
    display_number: str
    reception_date: date
    carrier: Optional[str]
    observations: Optional[str]
    recorded_by: Optional[str]
    confirmation_generated: bool
    confirmation_url: Optional[str]
    lines: tuple[ReceptionLineView, ...]


@dataclass(frozen=True)
class OrderDocument(_View):
    order_id: int
    number: int
    display_number: str
    expression_display_number: str
    title: str
    division_name: str
    service_name: Optional[str]
    supplier_name: Optional[str]
    delivery_address: Optional[str]
    emitted_at: datetime
    tax_rate: Decimal
    discount_rate: Decimal
    observations: Optional[str]
    is_cancelled: bool
    cancellation_reason: Optional[str]
    lines: tuple[OrderLineView, ...]
    totals: OrderTotals
    stats: OrderStats
    receptions: tuple[ReceptionView, ...]


class DocumentViewService:

    @staticmethod
    def expression_document(expression_id: int) -> ExpressionDocument:
        expression = RequestLifecycle.get(expression_id)
        order = PurchaseOrder.query.filter_by(expression_id=expression.id).first()

        lines = tuple(
            ExpressionLineView(
                material_code=line.material.code,
                material_name=line.material.designation,
                unit=line.material.unit,
                description=line.description,
                quantity=line.quantity,
                justification=line.justification,
            )
            for line in expression.lines
        )

        return ExpressionDocument(
            expression_id=expression.id,
            number=expression.number,
            display_number=_display_number("EXPRESSION", expression.number),
            title=expression.title,
            status=expression.status,
            division_name=expression.division.name,
            service_name=expression.service.name if expression.service else None,
            created_by=_user_name(expression.created_by),
            created_at=expression.created_at,
            decided_by=_user_name(expression.decided_by),
            decided_at=expression.decided_at,
            decision_comment=expression.decision_comment,
            total_quantity=expression.total_quantity,
            lines=lines,
            order_display_number=_display_number("ORDER", order.number) if order else None,
        )

    @staticmethod
    def order_document(order_id: int) -> OrderDocument:
        order = OrderLedger.get(order_id)
        expression = order.expression
        stats = FulfillmentStats.from_order(order)
        line_numbers = {line.id: line for line in order.lines}

        lines = []
        for line in order.lines:
            line_stats = stats.line(line.id)
            lines.append(OrderLineView(
                line_number=line.line_number,
                material_code=line.material_code,
                material_name=line.material_name,
                unit=line.unit,
                description=line.description,
                quantity=line.quantity,
                unit_price=Decimal(str(line.unit_price)),
                line_total=line.line_total,
                quantity_received=line_stats.quantity_received,
                quantity_remaining=line_stats.quantity_remaining,
                percent_received=line_stats.percent_received,
            ))

        receptions = []
        for reception in order.receptions:
            receptions.append(ReceptionView(
                reception_id=reception.id,
                number=reception.number,
                display_number=_display_number("RECEPTION", reception.number),
                reception_date=reception.reception_date,
                carrier=reception.carrier,
                observations=reception.observations,
                recorded_by=_user_name(reception.created_by),
                confirmation_generated=reception.confirmation_generated,
                confirmation_url=reception.confirmation_url,
                lines=tuple(
                    ReceptionLineView(
                        line_number=line_numbers[rl.order_line_id].line_number,
                        material_code=line_numbers[rl.order_line_id].material_code,
                        description=line_numbers[rl.order_line_id].description,
                        quantity_received=rl.quantity_received,
                        quantity_accepted=rl.quantity_accepted,
                        quantity_rejected=rl.quantity_rejected,
                        observations=rl.observations,
                    )
                    for rl in reception.lines
                ),
            ))

        return OrderDocument(
            order_id=order.id,
            number=order.number,
            display_number=_display_number("ORDER", order.number),
            expression_display_number=_display_number("EXPRESSION", expression.number),
            title=expression.title,
            division_name=expression.division.name,
            service_name=expression.service.name if expression.service else None,
            supplier_name=order.supplier_name,
            delivery_address=order.delivery_address,
            emitted_at=order.emitted_at,
            tax_rate=Decimal(str(order.tax_rate)),
            discount_rate=Decimal(str(order.discount_rate)),
            observations=order.observations,
            is_cancelled=order.is_cancelled,
            cancellation_reason=order.cancellation_reason,
            lines=tuple(lines),
            totals=OrderLedger.totals(order),
            stats=stats,
            receptions=tuple(receptions),
        )

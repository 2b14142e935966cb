from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import func

from app import db
from app.buisness.procurement.errors import NotFound
from app.buisness.procurement.status_validator import OrderStatus
from app.data.procurement import PurchaseOrder, Reception, ReceptionLine


def percent(part: int, whole: int) -> int:
    """
    Rounded (half-up) percentage of ``part`` over ``whole``; 0 when ``whole`` is 0.

    A partial quantity never displays as 0% or 100%: the value is kept within
    1..99 so the percentage and the derived status always agree.
    """
    if not whole:
        return 0
    value = int((Decimal(part) * 100 / Decimal(whole)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if 0 < part < whole:
        return min(max(value, 1), 99)
    return value


def derive_status(total_requested: int, total_received: int, is_cancelled: bool = False) -> str:
    if is_cancelled:
        return OrderStatus.CANCELLED
    if total_received <= 0:
        return OrderStatus.PENDING
    if total_received >= total_requested:
        return OrderStatus.DELIVERED
    return OrderStatus.PARTIALLY_DELIVERED


@dataclass(frozen=True)
class LineStats:
    order_line_id: int
    line_number: int
    material_code: str
    material_name: str
    unit: str
    description: str
    quantity_requested: int
    quantity_received: int
    quantity_accepted: int
    quantity_rejected: int
    quantity_remaining: int
    percent_received: int

    def to_dict(self) -> dict:
        return dict(self.__dict__)


@dataclass(frozen=True)
class OrderStats:
    order_id: int
    status: str
    percent_global: int
    reception_count: int
    total_requested: int
    total_received: int
    lines: tuple[LineStats, ...]

    @property
    def accepts_receptions(self) -> bool:
        return self.status in (OrderStatus.PENDING, OrderStatus.PARTIALLY_DELIVERED)

    def line(self, order_line_id: int) -> LineStats | None:
        return next((line for line in self.lines if line.order_line_id == order_line_id), None)

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "status": self.status,
            "percent_global": self.percent_global,
            "reception_count": self.reception_count,
            "total_requested": self.total_requested,
            "total_received": self.total_received,
            "lines": [line.to_dict() for line in self.lines],
        }


class FulfillmentStats:
    """
    Read-only fulfillment view of a purchase order.

    Recomputed from the order lines and recorded receptions on every call;
    nothing here is stored, and no lock is taken. Every consumer (ledger
    status persistence, document views, transport) goes through this class
    instead of recomputing percentages itself.
    """

    @staticmethod
    def for_order(order_id: int) -> OrderStats:
        order = db.session.get(PurchaseOrder, order_id)
        if order is None:
            raise NotFound("purchase order", order_id)
        return FulfillmentStats.from_order(order)

    @staticmethod
    def from_order(order: PurchaseOrder) -> OrderStats:
        conformity = FulfillmentStats._conformity_by_line(order.id)

        line_stats = []
        for line in order.lines:
            received = line.quantity_received or 0
            accepted, rejected = conformity.get(line.id, (0, 0))
            line_stats.append(LineStats(
                order_line_id=line.id,
                line_number=line.line_number,
                material_code=line.material_code,
                material_name=line.material_name,
                unit=line.unit,
                description=line.description,
                quantity_requested=line.quantity,
                quantity_received=received,
                quantity_accepted=accepted,
                quantity_rejected=rejected,
                quantity_remaining=line.quantity - received,
                percent_received=percent(received, line.quantity),
            ))

        total_requested = sum(s.quantity_requested for s in line_stats)
        total_received = sum(s.quantity_received for s in line_stats)

        return OrderStats(
            order_id=order.id,
            status=derive_status(total_requested, total_received, order.is_cancelled),
            percent_global=percent(total_received, total_requested),
            reception_count=order.receptions.count(),
            total_requested=total_requested,
            total_received=total_received,
            lines=tuple(line_stats),
        )

    @staticmethod
    def _conformity_by_line(order_id: int) -> dict[int, tuple[int, int]]:
        rows = (
            db.session.query(
                ReceptionLine.order_line_id,
                func.coalesce(func.sum(ReceptionLine.quantity_accepted), 0),
                func.coalesce(func.sum(ReceptionLine.quantity_rejected), 0),
            )
            .join(Reception, ReceptionLine.reception_id == Reception.id)
            .filter(Reception.order_id == order_id)
            .group_by(ReceptionLine.order_line_id)
            .all()
        )
        return {line_id: (int(accepted), int(rejected)) for line_id, accepted, rejected in rows}

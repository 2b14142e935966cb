"""
Domain events for the notification dispatcher

Events are sent only after the originating transaction has committed.
Delivery is fire-and-forget: a failing receiver is logged and skipped, it
never rolls back or fails the operation that produced the event.

Collaborators subscribe with blinker, e.g.::

    from app.buisness.procurement.events import reception_recorded
    reception_recorded.connect(my_receiver)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from blinker import Namespace

from app.utils.logger import get_logger

logger = get_logger("procurement.buisness.events")

_signals = Namespace()

expression_submitted = _signals.signal("Submitted")
expression_decided = _signals.signal("Decided")
order_created = _signals.signal("OrderCreated")
order_regenerated = _signals.signal("OrderRegenerated")
order_cancelled = _signals.signal("OrderCancelled")
reception_recorded = _signals.signal("ReceptionRecorded")

ALL_SIGNALS = (
    expression_submitted,
    expression_decided,
    order_created,
    order_regenerated,
    order_cancelled,
    reception_recorded,
)


@dataclass(frozen=True)
class DomainEvent:
    name: str
    entity_id: int
    actor_id: int | None = None
    payload: dict = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=datetime.utcnow)


def dispatch(signal, entity_id: int, actor_id: int | None = None, **payload) -> DomainEvent:
    """Build the event for ``signal`` and hand it to every connected receiver."""
    event = DomainEvent(name=signal.name, entity_id=entity_id, actor_id=actor_id, payload=payload)
    for receiver in list(signal.receivers_for(event)):
        try:
            receiver(event)
        except Exception:
            logger.exception(f"Receiver {getattr(receiver, '__name__', receiver)!r} failed on {event.name} {entity_id}")
    return event


def _log_event(event: DomainEvent) -> None:
    logger.info(
        f"Domain event {event.name} for {event.entity_id} by {event.actor_id}: {event.payload}",
        extra={"entity_id": event.entity_id, "actor_id": event.actor_id},
    )


def connect_default_receivers() -> None:
    for signal in ALL_SIGNALS:
        signal.connect(_log_event)

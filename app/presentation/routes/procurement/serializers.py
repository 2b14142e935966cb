"""
JSON shapes returned by the procurement API
Model rows go through DataInsertionMixin.to_dict; derived figures come from
the domain layer (totals, fulfillment stats) and never from the client.
"""

from app.buisness.procurement.fulfillment_stats import FulfillmentStats
from app.buisness.procurement.order_ledger import OrderLedger
from app.services.procurement.document_view_service import format_number
from flask import current_app


def _number(kind, number):
    config = current_app.config
    return format_number(config[f"{kind}_NUMBER_PREFIX"], number, config["NUMBER_PADDING"])


def expression_summary(expression):
    data = expression.to_dict()
    data["display_number"] = _number("EXPRESSION", expression.number)
    data["line_count"] = len(expression.lines)
    data["total_quantity"] = expression.total_quantity
    return data


def expression_detail(expression):
    data = expression_summary(expression)
    data["lines"] = [line.to_dict(include_audit_fields=False) for line in expression.lines]
    return data


def order_detail(order):
    data = order.to_dict()
    data["display_number"] = _number("ORDER", order.number)
    data["lines"] = [line.to_dict(include_audit_fields=False) for line in order.lines]
    data["totals"] = OrderLedger.totals(order).to_dict()
    data["stats"] = FulfillmentStats.from_order(order).to_dict()
    return data


def reception_detail(reception):
    data = reception.to_dict()
    data["display_number"] = _number("RECEPTION", reception.number)
    data["lines"] = [line.to_dict(include_audit_fields=False) for line in reception.lines]
    data["total_received"] = reception.total_received
    return data


def discussion_detail(discussion):
    data = discussion.to_dict()
    data["author_id"] = discussion.author_id
    data["author"] = discussion.created_by.display_name if discussion.created_by else None
    return data

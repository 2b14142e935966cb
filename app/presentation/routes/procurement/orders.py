"""
Purchase order routes
"""

from flask import jsonify
from flask_login import current_user, login_required

from app.buisness.procurement.fulfillment_stats import FulfillmentStats
from app.buisness.procurement.order_ledger import OrderLedger
from app.presentation.routes.procurement import procurement_bp
from app.presentation.routes.procurement.helpers import json_body
from app.presentation.routes.procurement.serializers import order_detail
from app.services.procurement.document_view_service import DocumentViewService


def _order_terms(data):
    return dict(
        supplier_id=data.get('supplier_id'),
        delivery_address=data.get('delivery_address'),
        tax_rate=data.get('tax_rate', 0),
        discount_rate=data.get('discount_rate', 0),
        observations=data.get('observations'),
        lines=data.get('lines') or [],
    )


@procurement_bp.route('/expressions/<int:expression_id>/order', methods=['POST'])
@login_required
def create_order(expression_id):
    """
    Emit the purchase order of an approved expression.
    Unit prices and rates may be sent as strings to keep them exact.
    """
    order = OrderLedger.create(expression_id, current_user.id, **_order_terms(json_body()))
    return jsonify(order_detail(order)), 201


@procurement_bp.route('/expressions/<int:expression_id>/order', methods=['GET'])
@login_required
def get_expression_order(expression_id):
    return jsonify(order_detail(OrderLedger.get_by_expression(expression_id)))


@procurement_bp.route('/orders/<int:order_id>', methods=['GET'])
@login_required
def get_order(order_id):
    return jsonify(order_detail(OrderLedger.get(order_id)))


@procurement_bp.route('/orders/<int:order_id>', methods=['PUT'])
@login_required
def regenerate_order(order_id):
    order = OrderLedger.regenerate(order_id, current_user.id, **_order_terms(json_body()))
    return jsonify(order_detail(order))


@procurement_bp.route('/orders/<int:order_id>/cancel', methods=['POST'])
@login_required
def cancel_order(order_id):
    order = OrderLedger.cancel(order_id, current_user.id, reason=json_body().get('reason'))
    return jsonify(order_detail(order))


@procurement_bp.route('/orders/<int:order_id>/stats', methods=['GET'])
@login_required
def order_stats(order_id):
    return jsonify(FulfillmentStats.for_order(order_id).to_dict())


@procurement_bp.route('/orders/<int:order_id>/document', methods=['GET'])
@login_required
def order_document(order_id):
    return jsonify(DocumentViewService.order_document(order_id).to_dict())

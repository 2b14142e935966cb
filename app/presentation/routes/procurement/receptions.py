"""
Reception routes
"""

from datetime import date

from flask import jsonify
from flask_login import current_user, login_required

from app.buisness.procurement.errors import InvalidInput
from app.buisness.procurement.reception_ledger import ReceptionLedger
from app.presentation.routes.procurement import procurement_bp
from app.presentation.routes.procurement.helpers import json_body
from app.presentation.routes.procurement.serializers import reception_detail


def _parse_date(value):
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidInput("reception_date must be an ISO date (YYYY-MM-DD)", field="reception_date", value=value)


@procurement_bp.route('/orders/<int:order_id>/receptions', methods=['POST'])
@login_required
def record_reception(order_id):
    data = json_body()
    reception = ReceptionLedger.record(
        order_id,
        current_user.id,
        carrier=data.get('carrier'),
        observations=data.get('observations'),
        lines=data.get('lines') or [],
        reception_date=_parse_date(data.get('reception_date')),
    )
    return jsonify(reception_detail(reception)), 201


@procurement_bp.route('/orders/<int:order_id>/receptions', methods=['GET'])
@login_required
def list_receptions(order_id):
    return jsonify({"receptions": [reception_detail(r) for r in ReceptionLedger.list_for_order(order_id)]})


@procurement_bp.route('/receptions/<int:reception_id>', methods=['GET'])
@login_required
def get_reception(reception_id):
    return jsonify(reception_detail(ReceptionLedger.get(reception_id)))


@procurement_bp.route('/receptions/<int:reception_id>/confirmation', methods=['POST'])
@login_required
def mark_confirmation(reception_id):
    reception = ReceptionLedger.mark_confirmation_generated(
        reception_id,
        current_user.id,
        confirmation_url=json_body().get('confirmation_url'),
    )
    return jsonify(reception_detail(reception))

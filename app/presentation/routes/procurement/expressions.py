"""
Need expression routes
"""

from flask import jsonify, request
from flask_login import current_user, login_required

from app.buisness.procurement.discussion_thread import DiscussionThread
from app.buisness.procurement.request_lifecycle import RequestLifecycle
from app.utils.logger import get_logger
from app.presentation.routes.procurement import procurement_bp
from app.presentation.routes.procurement.helpers import json_body
from app.presentation.routes.procurement.serializers import (
    discussion_detail,
    expression_detail,
    expression_summary,
)
from app.services.procurement.document_view_service import DocumentViewService
from app.services.procurement.expression_search_service import ExpressionSearchService

logger = get_logger("procurement.routes.expressions")


@procurement_bp.route('/expressions', methods=['GET'])
@login_required
def list_expressions():
    """List need expressions, newest first. Filters: status, search, creator_id, division_id"""
    filters = ExpressionSearchService.parse_filters(request.args)
    expressions = ExpressionSearchService.search(filters, limit=request.args.get('limit', type=int))
    return jsonify({"expressions": [expression_summary(e) for e in expressions]})


@procurement_bp.route('/expressions/dashboard', methods=['GET'])
@login_required
def expression_dashboard():
    """Counts per status; ``?mine=1`` restricts to the caller's expressions"""
    mine = request.args.get('mine', '').lower() in ('1', 'true', 'yes')
    return jsonify(ExpressionSearchService.dashboard_counts(current_user.id if mine else None))


@procurement_bp.route('/expressions', methods=['POST'])
@login_required
def create_expression():
    data = json_body()
    expression = RequestLifecycle.create(
        actor_id=current_user.id,
        title=data.get('title'),
        division_id=data.get('division_id'),
        service_id=data.get('service_id'),
        lines=data.get('lines') or [],
    )
    return jsonify(expression_detail(expression)), 201


@procurement_bp.route('/expressions/<int:expression_id>', methods=['GET'])
@login_required
def get_expression(expression_id):
    return jsonify(expression_detail(RequestLifecycle.get(expression_id)))


@procurement_bp.route('/expressions/<int:expression_id>/document', methods=['GET'])
@login_required
def expression_document(expression_id):
    return jsonify(DocumentViewService.expression_document(expression_id).to_dict())


@procurement_bp.route('/expressions/<int:expression_id>', methods=['PUT'])
@login_required
def edit_expression(expression_id):
    data = json_body()
    expression = RequestLifecycle.edit(
        expression_id,
        current_user.id,
        new_lines=data.get('lines') or [],
        title=data.get('title'),
    )
    return jsonify(expression_detail(expression))


@procurement_bp.route('/expressions/<int:expression_id>', methods=['DELETE'])
@login_required
def delete_expression(expression_id):
    RequestLifecycle.delete(expression_id, current_user.id)
    return '', 204


@procurement_bp.route('/expressions/<int:expression_id>/submit', methods=['POST'])
@login_required
def submit_expression(expression_id):
    return jsonify(expression_detail(RequestLifecycle.submit(expression_id, current_user.id)))


@procurement_bp.route('/expressions/<int:expression_id>/withdraw', methods=['POST'])
@login_required
def withdraw_expression(expression_id):
    return jsonify(expression_detail(RequestLifecycle.withdraw(expression_id, current_user.id)))


@procurement_bp.route('/expressions/<int:expression_id>/reopen', methods=['POST'])
@login_required
def reopen_expression(expression_id):
    return jsonify(expression_detail(RequestLifecycle.reopen(expression_id, current_user.id)))


@procurement_bp.route('/expressions/<int:expression_id>/decide', methods=['POST'])
@login_required
def decide_expression(expression_id):
    """Body: {"outcome": "Approved" | "Rejected", "comment": "..."}"""
    data = json_body()
    expression = RequestLifecycle.decide(
        expression_id,
        current_user.id,
        outcome=data.get('outcome'),
        comment=data.get('comment'),
    )
    return jsonify(expression_detail(expression))


@procurement_bp.route('/expressions/<int:expression_id>/mark-in-progress', methods=['POST'])
@login_required
def mark_expression_in_progress(expression_id):
    return jsonify(expression_detail(RequestLifecycle.mark_in_progress(expression_id, current_user.id)))


# Discussions

@procurement_bp.route('/expressions/<int:expression_id>/discussions', methods=['GET'])
@login_required
def list_discussions(expression_id):
    return jsonify({"discussions": [discussion_detail(d) for d in DiscussionThread.list(expression_id)]})


@procurement_bp.route('/expressions/<int:expression_id>/discussions', methods=['POST'])
@login_required
def post_discussion(expression_id):
    data = json_body()
    discussion = DiscussionThread.post(expression_id, current_user.id, data.get('message'))
    return jsonify(discussion_detail(discussion)), 201


@procurement_bp.route('/discussions/<int:discussion_id>', methods=['DELETE'])
@login_required
def delete_discussion(discussion_id):
    DiscussionThread.delete(discussion_id, current_user.id)
    return '', 204

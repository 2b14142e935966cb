"""
Error mapping for the procurement API
ProcurementError -> {"error": code, "message": ..., "details": {...}}
"""

from flask import jsonify

from app.buisness.procurement.errors import (
    ConcurrentModification,
    ConformityMismatch,
    EmptyExpression,
    EmptyReception,
    ExpressionNotApproved,
    InsufficientRole,
    InvalidInput,
    InvalidTransition,
    NotFound,
    NotOwner,
    OrderAlreadyExists,
    OrderCancelled,
    OverDelivery,
    ProcurementError,
    RegenerationConflict,
)
from app.utils.logger import get_logger
from app.presentation.routes.procurement import procurement_bp

logger = get_logger("procurement.routes.errors")

STATUS_BY_ERROR = (
    (NotFound, 404),
    (NotOwner, 403),
    (InsufficientRole, 403),
    (InvalidInput, 422),
    (ConformityMismatch, 422),
    (EmptyReception, 422),
    (EmptyExpression, 422),
    (InvalidTransition, 409),
    (ExpressionNotApproved, 409),
    (OrderAlreadyExists, 409),
    (RegenerationConflict, 409),
    (OrderCancelled, 409),
    (OverDelivery, 409),
    (ConcurrentModification, 409),
)


def status_for(error: ProcurementError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


@procurement_bp.errorhandler(ProcurementError)
def handle_procurement_error(error):
    status = status_for(error)
    logger.info(f"API answered {status} [{error.code}]: {error.message}")
    return jsonify(error.to_dict()), status

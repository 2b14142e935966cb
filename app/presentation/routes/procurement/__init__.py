"""
Procurement JSON API
Need expressions, purchase orders and receptions under /api/procurement.

The actor is resolved from the X-Actor-Id header by Flask-Login's request
loader; every handler passes ``current_user.id`` to the domain layer.
"""

from flask import Blueprint

procurement_bp = Blueprint('procurement', __name__, url_prefix='/api/procurement')

# Import route modules to register their routes
from . import errors, expressions, orders, receptions  # noqa: E402,F401

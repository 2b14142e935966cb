"""
Routes package for the procurement system
"""

from flask import g, jsonify
from app import csrf, login_manager
from app.utils.logger import get_logger

logger = get_logger("procurement.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .procurement import procurement_bp

    # Header-identified JSON API: no session cookie, so no CSRF token
    csrf.exempt(procurement_bp)
    app.register_blueprint(procurement_bp)

    @app.before_request
    def resolve_actor_per_request():
        """Drop a user cached by an enclosing app context; X-Actor-Id is read fresh on every request"""
        g.pop('_login_user', None)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({
            "error": "unauthorized",
            "message": "A valid X-Actor-Id header is required",
            "details": {},
        }), 401

    logger.info("All route blueprints registered successfully")

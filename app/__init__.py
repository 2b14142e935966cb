from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from app.utils.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"],
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(test_config=None):
    from pathlib import Path

    app = Flask(__name__)

    # Get singleton logger
    logger = get_logger("procurement")
    logger.info("Initializing Flask application")

    # Configuration
    # SECURITY: Require SECRET_KEY in environment - no fallback
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    # Prefer an explicit DATABASE_URL env var; otherwise keep the SQLite
    # database inside the project's `instance/` directory.
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        base_dir = Path(__file__).parent.parent
        instance_dir = base_dir / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'procurement.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # HTTPS/TLS Configuration
    # Default to True (secure) for production - only disable for development
    app.config['ENABLE_HTTPS'] = _env_flag('ENABLE_HTTPS', 'True')
    app.config['FORCE_HTTPS_REDIRECT'] = _env_flag('FORCE_HTTPS_REDIRECT', 'True')
    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')

    # Procurement settings
    app.config['CURRENCY_DECIMALS'] = int(os.environ.get('CURRENCY_DECIMALS', '2'))
    app.config['RECEPTION_MAX_RETRIES'] = int(os.environ.get('RECEPTION_MAX_RETRIES', '3'))
    app.config['NUMBER_PADDING'] = int(os.environ.get('NUMBER_PADDING', '6'))
    app.config['EXPRESSION_NUMBER_PREFIX'] = os.environ.get('EXPRESSION_NUMBER_PREFIX', 'EB')
    app.config['ORDER_NUMBER_PREFIX'] = os.environ.get('ORDER_NUMBER_PREFIX', 'BC')
    app.config['RECEPTION_NUMBER_PREFIX'] = os.environ.get('RECEPTION_NUMBER_PREFIX', 'REC')

    if test_config:
        app.config.update(test_config)

    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    # Log security configuration status
    if app.config['ENABLE_HTTPS']:
        logger.info("HTTPS enforcement enabled")
        if app.config['FORCE_HTTPS_REDIRECT']:
            logger.info("Automatic HTTP to HTTPS redirect enabled")
    else:
        logger.warning("HTTPS enforcement DISABLED - Acceptable for development only!")

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from app.data.core.user_info.user import User
    from app.data.core.catalog import Division, Service, Material, Supplier
    from app.data.procurement import (
        NeedExpression,
        NeedLine,
        PurchaseOrder,
        OrderLine,
        Reception,
        ReceptionLine,
        Discussion,
    )

    logger.debug("Models imported and registered")

    # Default notification receiver: log every committed domain event
    from app.buisness.procurement.events import connect_default_receivers
    connect_default_receivers()

    # Register blueprints
    from app.presentation.routes import init_app as init_routes
    init_routes(app)

    # Add HTTPS redirect before request processing
    @app.before_request
    def enforce_https():
        """Redirect HTTP requests to HTTPS if HTTPS enforcement is enabled"""
        if app.config.get('ENABLE_HTTPS') and app.config.get('FORCE_HTTPS_REDIRECT'):
            from flask import request, redirect

            if not request.is_secure and not request.headers.get('X-Forwarded-Proto') == 'https':
                url = request.url.replace('http://', 'https://', 1)
                return redirect(url, code=301)

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"

        if app.config.get('ENABLE_HTTPS'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response

    logger.info("Flask application initialization complete")

    return app

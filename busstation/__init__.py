from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from busstation.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "500 per hour"],
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def env_flag(name, default='False'):
    """Read a boolean flag from the environment (true/1/yes/on)"""
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(config_overrides=None):
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("bus_station")
    logger.info("Initializing Flask application")

    # Configuration
    base_dir = Path(__file__).parent.parent
    instance_dir = base_dir / 'instance'

    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'bus_station.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # SECURITY: SECRET_KEY must come from the environment (or explicit overrides)
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    # HTTPS/TLS Configuration
    app.config['ENABLE_HTTPS'] = env_flag('ENABLE_HTTPS', 'True')
    app.config['FORCE_HTTPS_REDIRECT'] = env_flag('FORCE_HTTPS_REDIRECT', 'True')

    # Session cookie security configuration
    app.config['SESSION_COOKIE_SECURE'] = env_flag('SESSION_COOKIE_SECURE', 'True')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['PERMANENT_SESSION_LIFETIME'] = int(os.environ.get('PERMANENT_SESSION_LIFETIME', '3600'))
    app.config['REMEMBER_COOKIE_SECURE'] = env_flag('REMEMBER_COOKIE_SECURE', 'True')
    app.config['REMEMBER_COOKIE_HTTPONLY'] = True
    app.config['REMEMBER_COOKIE_DURATION'] = int(os.environ.get('REMEMBER_COOKIE_DURATION', '86400'))

    # JSON clients send the CSRF token in a header
    app.config['WTF_CSRF_HEADERS'] = ['X-CSRFToken', 'X-CSRF-Token']
    app.config['RATELIMIT_ENABLED'] = env_flag('RATELIMIT_ENABLED', 'True')

    # Dispatch workflow
    app.config['REQUIRE_PERMIT_BEFORE_PAYMENT'] = env_flag('REQUIRE_PERMIT_BEFORE_PAYMENT', 'False')
    app.config['BOARD_POLL_INTERVAL_SECONDS'] = int(os.environ.get('BOARD_POLL_INTERVAL_SECONDS', '30'))

    # Legacy Firebase Realtime Database (read-only)
    app.config['FIREBASE_DATABASE_URL'] = os.environ.get('FIREBASE_DATABASE_URL')
    app.config['FIREBASE_AUTH_TOKEN'] = os.environ.get('FIREBASE_AUTH_TOKEN')
    app.config['FIREBASE_VEHICLES_PATH'] = os.environ.get('FIREBASE_VEHICLES_PATH', 'vehicles')
    app.config['FIREBASE_TIMEOUT_SECONDS'] = float(os.environ.get('FIREBASE_TIMEOUT_SECONDS', '10'))
    app.config['LEGACY_CACHE_TTL_SECONDS'] = int(os.environ.get('LEGACY_CACHE_TTL_SECONDS', '300'))

    if config_overrides:
        app.config.update(config_overrides)

    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    if app.config['ENABLE_HTTPS']:
        logger.info("HTTPS enforcement enabled")
    else:
        logger.warning("HTTPS enforcement DISABLED - acceptable for development only")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Authentication required', 'code': 'UNAUTHORIZED'}), 401

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from busstation.data import register_models
    register_models()

    # Per-app cache, replaces module-level globals
    from busstation.utils.cache import TTLCache
    app.extensions['busstation_cache'] = TTLCache(default_ttl=TTLCache.TTL['MEDIUM'])

    # Register blueprints
    from busstation.auth import auth
    from busstation.presentation.routes import init_app as init_routes
    from busstation.presentation.routes.errors import register_error_handlers

    app.register_blueprint(auth, url_prefix='/api/auth')
    init_routes(app)
    register_error_handlers(app)

    @app.before_request
    def enforce_https():
        """Redirect HTTP requests to HTTPS if HTTPS enforcement is enabled"""
        if app.config.get('ENABLE_HTTPS') and app.config.get('FORCE_HTTPS_REDIRECT'):
            from flask import request, redirect

            if not request.is_secure and not request.headers.get('X-Forwarded-Proto') == 'https':
                url = request.url.replace('http://', 'https://', 1)
                return redirect(url, code=301)

    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
        if app.config.get('ENABLE_HTTPS'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    logger.info("Flask application initialization complete")

    return app

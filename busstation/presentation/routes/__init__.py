"""
Routes package for the bus station API
Every blueprint is mounted under /api and speaks JSON only.
"""

from busstation.logger import get_logger

logger = get_logger("bus_station.routes")

API_PREFIX = '/api'


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .dispatching import dispatching_bp
    from .core.reference import BLUEPRINTS as reference_blueprints
    from . import reporting, legacy

    app.register_blueprint(dispatching_bp, url_prefix=API_PREFIX)
    for bp in reference_blueprints:
        app.register_blueprint(bp, url_prefix=API_PREFIX)
    app.register_blueprint(reporting.bp, url_prefix=API_PREFIX)
    app.register_blueprint(legacy.bp, url_prefix=API_PREFIX)

    logger.info("Route blueprints registered")

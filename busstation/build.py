#!/usr/bin/env python3
"""
Database build for the bus station backend
Creates tables and makes sure the admin account exists.
"""

import os

from busstation import create_app, db
from busstation.logger import get_logger

logger = get_logger("bus_station.build")


def ensure_admin_user():
    """
    Create the admin user from ADMIN_USERNAME / ADMIN_USER_PASSWORD if missing.

    Returns:
        User: The existing or newly created admin

    Raises:
        RuntimeError: If the admin is missing and no password is configured
    """
    from busstation.data.core.user import User

    username = os.environ.get('ADMIN_USERNAME', 'admin')
    admin = User.query.filter_by(username=username).first()
    if admin is not None:
        logger.info(f"Admin user '{username}' already present")
        return admin

    password = os.environ.get('ADMIN_USER_PASSWORD')
    if not password:
        raise RuntimeError("ADMIN_USER_PASSWORD is required to create the admin user. Run generate_env.py")

    admin = User(
        username=username,
        email=os.environ.get('ADMIN_EMAIL'),
        full_name='Administrator',
        is_admin=True,
        is_active=True,
    )
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()
    logger.info(f"Created admin user '{username}'")
    return admin


def build_database(app=None):
    """
    Create all tables and the admin user.

    Args:
        app: Flask app to build against (a new one is created when omitted)
    """
    app = app or create_app()

    with app.app_context():
        logger.info("Starting database build")
        from busstation.data import register_models
        register_models()
        db.create_all()
        logger.info("Tables created")

        try:
            ensure_admin_user()
        except Exception:
            db.session.rollback()
            logger.exception("Admin user creation failed")
            raise

        logger.info("Database build complete")

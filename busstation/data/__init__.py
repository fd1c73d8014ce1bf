"""
Data layer: Flask-SQLAlchemy models for the relational store.
"""


def register_models():
    """Import every model module so SQLAlchemy knows all tables"""
    from busstation.data.core import user, location, vehicle, driver, route, schedule, service  # noqa: F401
    from busstation.data.dispatching import dispatch_record, service_charge  # noqa: F401

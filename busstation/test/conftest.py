"""
Pytest configuration and fixtures for the bus station backend
"""
import os

# Keep test runs off the log files; must be set before the logger is created
os.environ.setdefault('LOG_TO_FILE', 'False')
os.environ.setdefault('LOG_LEVEL', 'WARNING')

from datetime import datetime  # noqa: E402
from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402

from busstation import create_app  # noqa: E402
from busstation import db as _db  # noqa: E402
from busstation.test.helpers import TEST_PASSWORD, login  # noqa: E402

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret-key',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'WTF_CSRF_ENABLED': False,
    'RATELIMIT_ENABLED': False,
    'ENABLE_HTTPS': False,
    'FORCE_HTTPS_REDIRECT': False,
    'SESSION_COOKIE_SECURE': False,
    'REMEMBER_COOKIE_SECURE': False,
    'REQUIRE_PERMIT_BEFORE_PAYMENT': False,
    'FIREBASE_DATABASE_URL': None,
}


def build_app(**overrides):
    config = dict(TEST_CONFIG)
    config.update(overrides)
    return create_app(config)


@pytest.fixture(scope='function')
def app():
    """Create Flask application backed by an in-memory database"""
    app = build_app()

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def db(app):
    return _db


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def user(app):
    from busstation.data.core.user import User

    user = User(username='dispatcher', email='dispatcher@example.com', full_name='Station Dispatcher')
    user.set_password(TEST_PASSWORD)
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture(scope='function')
def auth_client(client, user):
    """Test client logged in as the dispatcher user"""
    response = login(client, user.username, TEST_PASSWORD)
    assert response.status_code == 200, response.get_json()
    return client


@pytest.fixture(scope='function')
def fleet(app, user):
    """Two stations, a route between them, a schedule, a vehicle and a driver"""
    from busstation.data.core.driver import Driver
    from busstation.data.core.location import Location
    from busstation.data.core.route import Route
    from busstation.data.core.schedule import Schedule
    from busstation.data.core.vehicle import Vehicle

    departure = Location(name='Ben xe Trung tam', code='BXTT')
    arrival = Location(name='Ben xe Mien Dong', code='BXMD')
    _db.session.add_all([departure, arrival])
    _db.session.flush()

    route = Route(route_code='TT-MD', departure_station_id=departure.id, arrival_station_id=arrival.id)
    _db.session.add(route)
    _db.session.flush()

    schedule = Schedule(schedule_code='TT-MD-0800', route_id=route.id, departure_time='08:00')
    vehicle = Vehicle(plate_number='51B-123.45', seat_capacity=45, operator_name='Phuong Trang')
    spare = Vehicle(plate_number='51B-999.99', seat_capacity=40, operator_name='Phuong Trang')
    driver = Driver(full_name='Nguyen Van An', id_number='079123456789', phone='0909000111')
    _db.session.add_all([schedule, vehicle, spare, driver])
    _db.session.commit()

    return SimpleNamespace(
        departure=departure,
        arrival=arrival,
        route=route,
        schedule=schedule,
        vehicle=vehicle,
        spare_vehicle=spare,
        driver=driver,
        user=user,
    )


@pytest.fixture(scope='function')
def t0():
    return datetime(2025, 3, 1, 7, 0, 0)

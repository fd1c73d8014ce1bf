"""
Tests for the JSON error handlers
"""

import pytest

from busstation.business.core.errors import ConflictError, NotFoundError, PolicyViolation, ValidationFailed
from busstation.presentation.routes import errors as error_routes
from busstation.services.legacy.firebase_source import LegacySourceDisabled


@pytest.fixture
def failing_app(app):
    """App with one route that fails with an unexpected error"""

    def explode():
        raise RuntimeError("database password=hunter2 unreachable")

    app.add_url_rule('/api/_explode', 'explode', explode)
    return app


def test_unexpected_error_is_generic_500(failing_app, monkeypatch):
    logged = []
    monkeypatch.setattr(error_routes.logger, 'exception', lambda message, *args, **kwargs: logged.append(message))

    response = failing_app.test_client().get('/api/_explode')

    assert response.status_code == 500
    assert response.get_json() == {'error': error_routes.GENERIC_ERROR_MESSAGE, 'code': 'INTERNAL_ERROR'}
    assert len(logged) == 1
    assert 'GET /api/_explode' in logged[0]
    assert 'hunter2' not in logged[0], "Credentials must not reach the log"


def test_unknown_route_keeps_its_status(client):
    response = client.get('/api/does-not-exist')
    assert response.status_code == 404
    assert response.get_json()['code'] == 'NOT_FOUND'


@pytest.mark.parametrize('error, status', [
    (ValidationFailed("bad"), 400),
    (NotFoundError("missing"), 404),
    (ConflictError("taken"), 409),
    (PolicyViolation("refused"), 422),
    (LegacySourceDisabled(), 503),
])
def test_status_for_domain_errors(error, status):
    assert error_routes.status_for(error) == status

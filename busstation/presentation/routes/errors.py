"""
JSON error handlers

Domain exceptions carry their own message and code; this module only
decides the HTTP status.
"""

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from busstation.business.core.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    PolicyViolation,
    ValidationFailed,
)
from busstation.logger import get_logger
from busstation.services.legacy.firebase_source import LegacySourceDisabled, LegacySourceError
from busstation.utils.logging_sanitizer import sanitize_exception_message

logger = get_logger("bus_station.routes.errors")

GENERIC_ERROR_MESSAGE = 'Something went wrong. Please try again.'

# Checked in order; the first matching class wins
STATUS_BY_ERROR = (
    (ValidationFailed, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (PolicyViolation, 422),
    (LegacySourceDisabled, 503),
    (LegacySourceError, 502),
)


def status_for(error: DomainError) -> int:
    for error_class, status in STATUS_BY_ERROR:
        if isinstance(error, error_class):
            return status
    return 400


def register_error_handlers(app):

    @app.errorhandler(DomainError)
    def handle_domain_error(error):
        status = status_for(error)
        log = logger.warning if status >= 500 else logger.info
        log(f"{request.method} {request.path} -> {status} {error.code}: {sanitize_exception_message(error)}")
        return jsonify(error.to_dict()), status

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if error.code is None or error.code < 400:
            return error
        code = (error.name or 'HTTP_ERROR').upper().replace(' ', '_')
        return jsonify({'error': error.description, 'code': code}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f"Unhandled error on {request.method} {request.path}: {sanitize_exception_message(error)}")
        return jsonify({'error': GENERIC_ERROR_MESSAGE, 'code': 'INTERNAL_ERROR'}), 500

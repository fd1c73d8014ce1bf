"""
Logging Sanitizer Utility

Redacts credentials and tokens from request payloads before they are logged.
"""

from typing import Any, Dict
from werkzeug.datastructures import MultiDict


# Fields that should never be logged (compared case-insensitively)
SENSITIVE_FIELDS = {
    'password',
    'password_confirm',
    'confirm_password',
    'current_password',
    'new_password',
    'secret',
    'token',
    'api_key',
    'apikey',
    'auth_token',
    'authtoken',
    'access_token',
    'accesstoken',
    'refresh_token',
    'session_id',
    'csrf_token',
    'csrftoken',
}


def _is_sensitive(key: str) -> bool:
    return key.lower() in SENSITIVE_FIELDS


def sanitize_value(value: Any, redact_text: str = '[REDACTED]') -> Any:
    if isinstance(value, dict):
        return sanitize_dict(value, redact_text)
    if isinstance(value, list):
        return [sanitize_value(item, redact_text) for item in value]
    return value


def sanitize_dict(data: Dict[str, Any], redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Sanitize a dictionary by replacing sensitive field values with redaction text.

    Nested dictionaries and lists of dictionaries are sanitized recursively.

    Example:
        >>> sanitize_dict({'username': 'admin', 'password': 'secret123'})
        {'username': 'admin', 'password': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if _is_sensitive(str(key)):
            sanitized[key] = redact_text
        else:
            sanitized[key] = sanitize_value(value, redact_text)
    return sanitized


def sanitize_form_data(form_data: MultiDict, redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """Sanitize Flask request.form data for safe logging"""
    return sanitize_dict(form_data.to_dict(), redact_text)


def sanitize_request_payload(request, redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """Sanitize whichever body a Flask request carries (JSON first, then form)"""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return sanitize_dict(payload, redact_text)
    if request.form:
        return sanitize_form_data(request.form, redact_text)
    return {}


def sanitize_exception_message(exception: Exception) -> str:
    """
    Hide exception messages that mention a sensitive field name.
    """
    message = str(exception)
    if any(field in message.lower() for field in SENSITIVE_FIELDS):
        return f"{type(exception).__name__}: [Message contains sensitive data]"
    return message

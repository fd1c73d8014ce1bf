"""
Request helpers shared by the JSON blueprints
"""

from datetime import date
from typing import Optional

from flask import request
from flask_login import current_user

from busstation.business.core.errors import ValidationFailed


def json_body() -> dict:
    """
    The request JSON object, or {} when the body is empty.

    Raises:
        ValidationFailed: If the body is JSON but not an object
    """
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationFailed("Request body must be a JSON object", {'__root__': 'Expected an object'})
    return payload


def current_user_id() -> Optional[int]:
    if current_user and current_user.is_authenticated:
        return current_user.id
    return None


def query_flag(name: str, default: bool = False) -> bool:
    value = request.args.get(name)
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes', 'on')


def query_date(name: str, required: bool = False, default: Optional[date] = None) -> Optional[date]:
    """
    Parse a YYYY-MM-DD query argument.

    Raises:
        ValidationFailed: If the value is missing (when required) or malformed
    """
    value = request.args.get(name)
    if not value:
        if required:
            raise ValidationFailed(f"'{name}' is required", {name: 'This field is required'})
        return default
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationFailed(f"'{name}' must be a date (YYYY-MM-DD)", {name: 'Invalid date'}) from None

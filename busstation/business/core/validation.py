"""
Payload parsing for API input schemas

Wraps pydantic validation so callers receive a ValidationFailed carrying a
field-keyed error map (camelCase field names, as sent by clients).
"""

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from busstation.business.core.errors import ValidationFailed

SchemaT = TypeVar('SchemaT', bound=BaseModel)


class ApiSchema(BaseModel):
    """Base for request schemas: camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
        str_strip_whitespace=True,
    )

    @model_validator(mode="before")
    @classmethod
    def blank_strings_to_none(cls, data):
        # Forms submit "" for untouched optional inputs
        if isinstance(data, dict):
            return {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in data.items()}
        return data


def field_errors_from(exc: ValidationError) -> Dict[str, str]:
    """Collapse pydantic errors to {field: first message}"""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get('loc') or ('__root__',)
        field = '.'.join(str(part) for part in loc)
        errors.setdefault(field, error.get('msg', 'Invalid value'))
    return errors


def parse_payload(schema: Type[SchemaT], payload: Any) -> SchemaT:
    """
    Validate a request payload against a schema.

    Raises:
        ValidationFailed: With a field-keyed map of problems
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationFailed("Request body must be a JSON object", {'__root__': 'Expected an object'})
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        field_errors = field_errors_from(exc)
        raise ValidationFailed("Validation failed", field_errors) from exc

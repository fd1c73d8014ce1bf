"""
Domain exceptions shared by every business module

The presentation layer maps each class to an HTTP status and an error code;
see busstation.presentation.routes.errors.
"""

from typing import Dict, Optional


class DomainError(Exception):
    """Base exception for all domain errors"""

    code = 'DOMAIN_ERROR'

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {'error': self.message, 'code': self.code}


class ValidationFailed(DomainError):
    """Raised when input is missing required fields or fails validation"""

    code = 'VALIDATION_ERROR'

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None, code: Optional[str] = None):
        super().__init__(message, code)
        self.field_errors = dict(field_errors or {})

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['fieldErrors'] = self.field_errors
        return data


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist"""

    code = 'NOT_FOUND'

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found" if identifier is None else f"{resource} '{identifier}' not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """Raised when a write collides with existing data (unique values, references)"""

    code = 'CONFLICT'

    def __init__(self, message: str, field: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message, code)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field:
            data['field'] = self.field
        return data


class PolicyViolation(DomainError):
    """Raised when a business rule forbids the requested operation"""

    code = 'BUSINESS_RULE_VIOLATION'

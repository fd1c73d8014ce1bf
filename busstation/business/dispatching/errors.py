"""
Domain exceptions for dispatching business logic

These represent business rule violations in the dispatch workflow and are
raised by DispatchContext and its policies.
"""

from busstation.business.core.errors import (
    ValidationFailed,
    NotFoundError,
    ConflictError,
    PolicyViolation,
)


class DispatchTransitionError(PolicyViolation):
    """Raised when a status transition is not allowed"""

    code = 'INVALID_TRANSITION'

    def __init__(self, from_status: str, to_status: str, allowed=None):
        allowed = sorted(allowed or [])
        message = (
            f"Invalid status transition: {from_status} -> {to_status}. "
            f"Valid transitions from {from_status}: {', '.join(allowed) or 'none'}"
        )
        super().__init__(message)
        self.from_status = from_status
        self.to_status = to_status
        self.allowed = allowed

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['currentStatus'] = self.from_status
        data['targetStatus'] = self.to_status
        return data


class DispatchPolicyViolation(PolicyViolation):
    """Raised when a dispatch rule (other than a transition) is violated"""
    pass


class DispatchValidationError(ValidationFailed):
    """Raised when dispatch input is missing required fields"""
    pass


class DispatchRecordNotFound(NotFoundError):
    def __init__(self, record_id):
        super().__init__('Dispatch record', record_id)


class DuplicateTransportOrderError(ConflictError):
    """
    Raised when a transport order code is already used by another record.

    Carries the Postgres unique-violation SQLSTATE so clients can keep
    matching on code "23505".
    """

    code = '23505'

    def __init__(self, transport_order_code: str):
        super().__init__(
            f'Transport order code "{transport_order_code}" already exists. Please choose another code.',
            field='transportOrderCode',
        )
        self.transport_order_code = transport_order_code

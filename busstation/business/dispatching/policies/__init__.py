"""
Dispatch policies

Each policy is a class with classmethods that either report problems
or raise a dispatch error.
"""

from busstation.business.dispatching.policies.permit_validation import (
    PermitValidationPolicy,
    PermitValidationResult,
)
from busstation.business.dispatching.policies.entry_edit import EntryEditPolicy
from busstation.business.dispatching.policies.transport_order_uniqueness import TransportOrderUniquenessPolicy

__all__ = [
    'PermitValidationPolicy',
    'PermitValidationResult',
    'EntryEditPolicy',
    'TransportOrderUniquenessPolicy',
]

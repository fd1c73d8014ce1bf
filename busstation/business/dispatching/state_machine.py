"""
State machine for the dispatch record lifecycle

Encodes valid status transitions and nothing else.
Keeps "what is allowed" separate from "how persistence occurs".
"""

from typing import Dict, Set

from busstation.business.dispatching.errors import DispatchTransitionError
from busstation.business.dispatching.statuses import DispatchStatus as S


class DispatchStateMachine:
    """
    State machine for DispatchRecord.status transitions.

    Movement is forward-only through the workflow, with a detour through
    permit_rejected. Two self-transitions exist: correcting the arrived
    passenger count and re-deciding a rejected permit.

    Payment straight from entered/passengers_dropped is accepted unless
    require_permit_for_payment is set.
    """

    TERMINAL_STATES = {S.DEPARTED}

    # Valid transitions: from_status -> set of allowed to_status values
    TRANSITIONS: Dict[str, Set[str]] = {
        S.ENTERED: {S.PASSENGERS_DROPPED, S.PERMIT_ISSUED, S.PERMIT_REJECTED, S.PAID},
        S.PASSENGERS_DROPPED: {S.PASSENGERS_DROPPED, S.PERMIT_ISSUED, S.PERMIT_REJECTED, S.PAID},
        S.PERMIT_REJECTED: {S.PERMIT_ISSUED, S.PERMIT_REJECTED},
        S.PERMIT_ISSUED: {S.PAID},
        S.PAID: {S.DEPARTURE_ORDERED},
        S.DEPARTURE_ORDERED: {S.DEPARTED},
        # DEPARTED is terminal
    }

    # Transitions that skip the permit step
    PAYMENT_WITHOUT_PERMIT = {(S.ENTERED, S.PAID), (S.PASSENGERS_DROPPED, S.PAID)}

    @classmethod
    def get_allowed_transitions(cls, from_status: str, require_permit_for_payment: bool = False) -> Set[str]:
        """Get set of allowed target statuses from current status"""
        if from_status in cls.TERMINAL_STATES:
            return set()
        allowed = set(cls.TRANSITIONS.get(from_status, set()))
        if require_permit_for_payment:
            allowed = {to for to in allowed if (from_status, to) not in cls.PAYMENT_WITHOUT_PERMIT}
        return allowed

    @classmethod
    def can_transition(cls, from_status: str, to_status: str, require_permit_for_payment: bool = False) -> bool:
        """
        Check if transition is valid.

        Args:
            from_status: Current status
            to_status: Target status
            require_permit_for_payment: Refuse payment before a permit is issued

        Returns:
            bool: True if transition is allowed
        """
        return to_status in cls.get_allowed_transitions(from_status, require_permit_for_payment)

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str, require_permit_for_payment: bool = False) -> None:
        """
        Validate transition and raise exception if invalid.

        Raises:
            DispatchTransitionError: If transition is not allowed
        """
        if not cls.can_transition(from_status, to_status, require_permit_for_payment):
            raise DispatchTransitionError(
                from_status,
                to_status,
                cls.get_allowed_transitions(from_status, require_permit_for_payment),
            )

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return status in cls.TERMINAL_STATES

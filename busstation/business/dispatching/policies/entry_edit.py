"""
Entry Edit Policy

Entry details can only be corrected before the permit decision.
"""

from busstation.business.dispatching.errors import DispatchPolicyViolation
from busstation.business.dispatching.statuses import DispatchStatus


class EntryEditPolicy:

    @classmethod
    def can_edit(cls, status: str) -> bool:
        return status in DispatchStatus.EDITABLE

    @classmethod
    def validate(cls, status: str) -> None:
        """
        Raises:
            DispatchPolicyViolation: If the record has moved past entry
        """
        if not cls.can_edit(status):
            raise DispatchPolicyViolation(
                f"Entry details cannot be changed once the record is "
                f"'{DispatchStatus.display_name(status)}'"
            )

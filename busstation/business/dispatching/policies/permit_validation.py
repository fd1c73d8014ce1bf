"""
Permit Validation Policy

Checks that a permit approval carries everything needed to issue a
transport order.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from busstation.business.dispatching.errors import DispatchValidationError


@dataclass
class PermitValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    field_errors: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {'isValid': self.is_valid, 'errors': self.errors, 'fieldErrors': self.field_errors}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _positive_int(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value > 0
    if isinstance(value, float):
        return value.is_integer() and value > 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text) > 0
        except ValueError:
            return False
    return False


class PermitValidationPolicy:
    """
    Rules (all five are always evaluated):
    1. transportOrderCode is present and not blank
    2. routeId is selected
    3. departureDate is selected
    4. scheduleId or departureTime is present (reported on departureTime)
    5. seatCount is an integer greater than 0
    """

    @classmethod
    def check(cls, values: Mapping[str, Any]) -> PermitValidationResult:
        """
        Evaluate the permit fields.

        Args:
            values: camelCase field values as submitted by the client

        Returns:
            PermitValidationResult: Labels of missing fields plus a per-field map
        """
        errors: List[str] = []
        field_errors: Dict[str, str] = {}

        if _is_blank(values.get('transportOrderCode')):
            errors.append('Transport order code')
            field_errors['transportOrderCode'] = 'Please enter the transport order code'

        if _is_blank(values.get('routeId')):
            errors.append('Route')
            field_errors['routeId'] = 'Please select a route'

        if _is_blank(values.get('departureDate')):
            errors.append('Departure date')
            field_errors['departureDate'] = 'Please select a departure date'

        if _is_blank(values.get('scheduleId')) and _is_blank(values.get('departureTime')):
            errors.append('Schedule or departure time')
            field_errors['departureTime'] = 'Please select a schedule or enter a departure time'

        if not _positive_int(values.get('seatCount')):
            errors.append('Seat count (must be greater than 0)')
            field_errors['seatCount'] = 'Seat count must be greater than 0'

        return PermitValidationResult(is_valid=not errors, errors=errors, field_errors=field_errors)

    @classmethod
    def validate(cls, values: Mapping[str, Any]) -> None:
        """
        Raises:
            DispatchValidationError: Listing every missing field
        """
        result = cls.check(values)
        if not result.is_valid:
            raise DispatchValidationError(
                'Please complete the following fields: ' + ', '.join(result.errors),
                result.field_errors,
            )

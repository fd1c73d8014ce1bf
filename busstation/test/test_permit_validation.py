"""
Tests for permit validation
"""

import pytest

from busstation.business.dispatching.errors import DispatchValidationError
from busstation.business.dispatching.policies import PermitValidationPolicy

COMPLETE = {
    'transportOrderCode': 'LENH-001',
    'routeId': 3,
    'departureDate': '2025-03-01',
    'departureTime': '08:30',
    'seatCount': '40',
}


def test_complete_fields_are_valid():
    result = PermitValidationPolicy.check(COMPLETE)
    assert result.is_valid
    assert result.errors == []
    assert result.field_errors == {}


def test_schedule_satisfies_time_requirement():
    values = dict(COMPLETE, departureTime=None, scheduleId=7)
    assert PermitValidationPolicy.check(values).is_valid


def test_all_checks_run_without_short_circuit():
    result = PermitValidationPolicy.check({})
    assert not result.is_valid
    assert set(result.field_errors) == {'transportOrderCode', 'routeId', 'departureDate', 'departureTime', 'seatCount'}
    assert len(result.errors) == 5


def test_blank_transport_order_code_is_reported():
    result = PermitValidationPolicy.check(dict(COMPLETE, transportOrderCode='   '))
    assert list(result.field_errors) == ['transportOrderCode']


@pytest.mark.parametrize('seat_count', [0, -3, '0', 'abc', '', None, True, 2.5])
def test_seat_count_must_be_positive_integer(seat_count):
    result = PermitValidationPolicy.check(dict(COMPLETE, seatCount=seat_count))
    assert 'seatCount' in result.field_errors


def test_validate_raises_with_field_map():
    with pytest.raises(DispatchValidationError) as exc_info:
        PermitValidationPolicy.validate(dict(COMPLETE, transportOrderCode=''))

    assert exc_info.value.field_errors == {'transportOrderCode': 'Please enter the transport order code'}
    assert exc_info.value.to_dict()['code'] == 'VALIDATION_ERROR'


def test_result_serializes_camel_case():
    data = PermitValidationPolicy.check({}).to_dict()
    assert set(data) == {'isValid', 'errors', 'fieldErrors'}

"""
Tests for the service catalog and service charges
"""

from decimal import Decimal

import pytest

from busstation.business.billing.service_catalog import ServiceCatalog
from busstation.business.billing.service_charge_manager import ServiceChargeManager, compute_total
from busstation.business.core.errors import ConflictError, NotFoundError, PolicyViolation, ValidationFailed
from busstation.business.dispatching.context import DispatchContext
from busstation.test.helpers import approved_permit, entry_payload


@pytest.fixture
def parking(fleet):
    return ServiceCatalog.create({'code': 'PARK', 'name': 'Parking', 'basePrice': '20000', 'unit': 'hour'},
                                 user_id=fleet.user.id)


@pytest.fixture
def record(fleet, t0):
    return DispatchContext.record_entry(entry_payload(fleet), user_id=fleet.user.id, occurred_at=t0).record


def test_compute_total_rounds_half_up():
    assert compute_total(Decimal('3'), Decimal('10000')) == Decimal('30000.00')
    assert compute_total(Decimal('0.5'), Decimal('0.05')) == Decimal('0.03')


class TestCatalog:

    def test_duplicate_code(self, parking):
        with pytest.raises(ConflictError) as exc_info:
            ServiceCatalog.create({'code': 'PARK', 'name': 'Parking again'})
        assert exc_info.value.field == 'code'

    def test_listing_is_invalidated_on_write(self, parking):
        assert [s['code'] for s in ServiceCatalog.list()] == ['PARK']
        ServiceCatalog.create({'code': 'WASH', 'name': 'Bus wash', 'basePrice': 50000})
        assert sorted(s['code'] for s in ServiceCatalog.list()) == ['PARK', 'WASH']

    def test_delete_deactivates(self, parking):
        ServiceCatalog.delete(parking.id)
        assert ServiceCatalog.list() == []
        assert [s['code'] for s in ServiceCatalog.list(include_inactive=True)] == ['PARK']


class TestCharges:

    def test_unit_price_defaults_to_base_price(self, record, parking):
        charge = ServiceChargeManager.create({'dispatchRecordId': record.id, 'serviceId': parking.id, 'quantity': 2})
        assert charge.unit_price == Decimal('20000')
        assert charge.total_amount == Decimal('40000')
        assert ServiceChargeManager.total_for_record(record.id) == Decimal('40000')

    def test_explicit_unit_price(self, record, parking):
        charge = ServiceChargeManager.create(
            {'dispatchRecordId': record.id, 'serviceId': parking.id, 'quantity': '1.5', 'unitPrice': '15000'}
        )
        assert charge.total_amount == Decimal('22500')

    def test_unknown_references(self, record, parking):
        with pytest.raises(ValidationFailed) as exc_info:
            ServiceChargeManager.create({'dispatchRecordId': 999, 'serviceId': parking.id})
        assert 'dispatchRecordId' in exc_info.value.field_errors

        with pytest.raises(ValidationFailed) as exc_info:
            ServiceChargeManager.create({'dispatchRecordId': record.id, 'serviceId': 999})
        assert 'serviceId' in exc_info.value.field_errors

    def test_quantity_must_be_positive(self, record, parking):
        with pytest.raises(ValidationFailed) as exc_info:
            ServiceChargeManager.create({'dispatchRecordId': record.id, 'serviceId': parking.id, 'quantity': 0})
        assert 'quantity' in exc_info.value.field_errors

    def test_no_charges_after_departure(self, fleet, record, parking, t0):
        ctx = DispatchContext.load(record.id, user_id=fleet.user.id)
        ctx.issue_permit(approved_permit(fleet), occurred_at=t0)
        ctx.process_payment({'paymentAmount': 100000}, occurred_at=t0)
        ctx.issue_departure_order(occurred_at=t0)
        ctx.record_exit(occurred_at=t0)

        with pytest.raises(PolicyViolation):
            ServiceChargeManager.create({'dispatchRecordId': record.id, 'serviceId': parking.id})

    def test_delete(self, record, parking):
        charge = ServiceChargeManager.create({'dispatchRecordId': record.id, 'serviceId': parking.id})
        ServiceChargeManager.delete(charge.id)
        assert ServiceChargeManager.list_for_record(record.id) == []
        with pytest.raises(NotFoundError):
            ServiceChargeManager.delete(charge.id)


class TestChargeRoutes:

    def test_create_list_and_total(self, auth_client, record, parking):
        response = auth_client.post('/api/service-charges',
                                    json={'dispatchRecordId': record.id, 'serviceId': parking.id, 'quantity': 3})
        assert response.status_code == 201
        charge = response.get_json()
        assert charge['totalAmount'] == 60000.0
        assert charge['serviceCode'] == 'PARK'

        listed = auth_client.get(f'/api/service-charges?dispatchRecordId={record.id}').get_json()
        assert [c['id'] for c in listed] == [charge['id']]

        total = auth_client.get(f'/api/dispatch/{record.id}/charges-total').get_json()
        assert total == {'dispatchRecordId': record.id, 'total': 60000.0}

        response = auth_client.delete(f"/api/service-charges/{charge['id']}")
        assert response.get_json()['message'] == 'Service charge deleted'

    def test_service_routes(self, auth_client):
        response = auth_client.post('/api/services', json={'code': 'WASH', 'name': 'Bus wash', 'basePrice': 50000})
        assert response.status_code == 201
        service_id = response.get_json()['id']

        response = auth_client.put(f'/api/services/{service_id}', json={'basePrice': 60000})
        assert response.get_json()['basePrice'] == 60000.0

        response = auth_client.delete(f'/api/services/{service_id}')
        assert response.get_json()['service']['isActive'] is False
        assert auth_client.get('/api/services').get_json() == []

"""
Tests for dashboard counters and the dispatch report
"""

from datetime import date, timedelta

import pytest
from sqlalchemy import event

from busstation.business.billing.service_catalog import ServiceCatalog
from busstation.business.billing.service_charge_manager import ServiceChargeManager
from busstation.business.core.errors import ValidationFailed
from busstation.business.dispatching.context import DispatchContext
from busstation.services.reporting.dashboard_service import DashboardService
from busstation.test.helpers import approved_permit, entry_payload


@pytest.fixture
def activity(fleet, t0):
    """One departed vehicle, one rejected and one still waiting, all on 2025-03-01"""
    uid = fleet.user.id
    departed = DispatchContext.record_entry(entry_payload(fleet), user_id=uid, occurred_at=t0)
    departed.issue_permit(approved_permit(fleet), occurred_at=t0 + timedelta(minutes=5))
    departed.process_payment({'paymentAmount': 120000}, occurred_at=t0 + timedelta(minutes=10))
    wash = ServiceCatalog.create({'code': 'WASH', 'name': 'Bus wash', 'basePrice': 30000})
    ServiceChargeManager.create({'dispatchRecordId': departed.record_id, 'serviceId': wash.id})
    departed.issue_departure_order(occurred_at=t0 + timedelta(minutes=15))
    departed.record_exit(occurred_at=t0 + timedelta(minutes=20))

    rejected = DispatchContext.record_entry(
        entry_payload(fleet, vehicleId=fleet.spare_vehicle.id), user_id=uid, occurred_at=t0 + timedelta(hours=1)
    )
    rejected.issue_permit({'permitStatus': 'rejected', 'rejectionReasons': ['Expired inspection']},
                          occurred_at=t0 + timedelta(hours=1, minutes=5))

    waiting = DispatchContext.record_entry(entry_payload(fleet), user_id=uid, occurred_at=t0 + timedelta(hours=2))

    return departed, rejected, waiting


def test_stats_for_day(activity):
    stats = DashboardService.get_stats(date(2025, 3, 1))
    assert stats['date'] == '2025-03-01'
    assert stats['entries'] == 3
    assert stats['permitsIssued'] == 1
    assert stats['permitsRejected'] == 1
    assert stats['payments'] == 1
    assert stats['departureOrders'] == 1
    assert stats['departures'] == 1
    assert stats['revenue'] == 120000.0
    assert stats['board']['in-station'] == 2
    assert stats['vehiclesInStation'] == 2


def test_stats_for_other_day(activity):
    stats = DashboardService.get_stats(date(2025, 3, 2))
    assert stats['entries'] == 0
    assert stats['revenue'] == 0.0
    # The board is live, not per day
    assert stats['vehiclesInStation'] == 2


def test_dispatch_report(activity):
    departed = activity[0]
    report = DashboardService.get_dispatch_report(date(2025, 3, 1))
    assert report['from'] == report['to'] == '2025-03-01'
    assert report['totals'] == {'records': 3, 'paymentAmount': 120000.0, 'chargesAmount': 30000.0}
    row = next(r for r in report['rows'] if r['id'] == departed.record_id)
    assert row['chargesTotal'] == 30000.0


def test_dispatch_report_loads_references_up_front(db, activity):
    statements = []

    def count(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    db.session.expunge_all()
    event.listen(db.engine, 'before_cursor_execute', count)
    try:
        report = DashboardService.get_dispatch_report(date(2025, 3, 1))
    finally:
        event.remove(db.engine, 'before_cursor_execute', count)

    assert {row['vehiclePlateNumber'] for row in report['rows']} == {'51B-123.45', '51B-999.99'}
    assert {row['driverName'] for row in report['rows']} == {'Nguyen Van An'}
    # One query for the records, one for the charge totals
    assert len(statements) <= 2, statements


def test_report_range_must_be_ordered(app):
    with pytest.raises(ValidationFailed):
        DashboardService.get_dispatch_report(date(2025, 3, 2), date(2025, 3, 1))


class TestReportingRoutes:

    def test_stats_route(self, auth_client, activity):
        response = auth_client.get('/api/dashboard/stats?date=2025-03-01')
        assert response.status_code == 200
        assert response.get_json()['departures'] == 1

    def test_bad_date(self, auth_client):
        response = auth_client.get('/api/dashboard/stats?date=01/03/2025')
        assert response.status_code == 400
        assert 'date' in response.get_json()['fieldErrors']

    def test_report_requires_from(self, auth_client):
        response = auth_client.get('/api/reports/dispatch')
        assert response.status_code == 400
        assert 'from' in response.get_json()['fieldErrors']

    def test_report_route(self, auth_client, activity):
        response = auth_client.get('/api/reports/dispatch?from=2025-03-01&to=2025-03-02')
        assert response.get_json()['totals']['records'] == 3

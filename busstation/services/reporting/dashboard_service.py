"""
Dashboard Service
Aggregates dispatch activity for the reporting dashboard.

Handles:
- Daily counters (entries, permits, payments, departures, revenue)
- Current board column counts
- Per-record dispatch report with service charge totals
"""

from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import func

from busstation import db
from busstation.business.core.errors import ValidationFailed
from busstation.business.core.serialization_mixin import serialize_value
from busstation.business.dispatching.mappers import dispatch_to_api
from busstation.business.dispatching.statuses import PermitStatus
from busstation.data.dispatching.dispatch_record import DispatchRecord
from busstation.data.dispatching.service_charge import ServiceCharge
from busstation.logger import get_logger
from busstation.services.dispatching.dispatch_service import DispatchService
from busstation.utils.timeutils import day_bounds

logger = get_logger("bus_station.reporting")


def _count_between(column, start, end, *criteria) -> int:
    return (
        db.session.query(func.count(DispatchRecord.id))
        .filter(column >= start, column < end, *criteria)
        .scalar()
    ) or 0


def _as_decimal(value) -> Decimal:
    return Decimal(str(value or 0))


class DashboardService:

    @staticmethod
    def get_stats(day: date, poll_interval_seconds: int = 30) -> dict:
        """
        Counters for one calendar day plus the live board counts.

        Each counter looks at the timestamp of its own event, so a vehicle
        entering yesterday and leaving today counts as a departure today.
        """
        start, end = day_bounds(day)
        revenue = (
            db.session.query(func.coalesce(func.sum(DispatchRecord.payment_amount), 0))
            .filter(DispatchRecord.payment_time >= start, DispatchRecord.payment_time < end)
            .scalar()
        )
        board = DispatchService.get_board(poll_interval_seconds=poll_interval_seconds)
        stats = {
            'date': day.isoformat(),
            'entries': _count_between(DispatchRecord.entry_time, start, end),
            'permitsIssued': _count_between(
                DispatchRecord.boarding_permit_time, start, end,
                DispatchRecord.permit_status == PermitStatus.APPROVED,
            ),
            'permitsRejected': _count_between(
                DispatchRecord.boarding_permit_time, start, end,
                DispatchRecord.permit_status == PermitStatus.REJECTED,
            ),
            'payments': _count_between(DispatchRecord.payment_time, start, end),
            'departureOrders': _count_between(DispatchRecord.departure_order_time, start, end),
            'departures': _count_between(DispatchRecord.exit_time, start, end),
            'revenue': float(_as_decimal(revenue)),
            'board': board.counts,
            'vehiclesInStation': sum(board.counts.values()),
        }
        logger.debug(f"Dashboard stats computed for {stats['date']}")
        return stats

    @staticmethod
    def _charge_totals(record_ids) -> Dict[int, Decimal]:
        if not record_ids:
            return {}
        rows = (
            db.session.query(ServiceCharge.dispatch_record_id, func.sum(ServiceCharge.total_amount))
            .filter(ServiceCharge.dispatch_record_id.in_(record_ids))
            .group_by(ServiceCharge.dispatch_record_id)
            .all()
        )
        return {record_id: _as_decimal(total) for record_id, total in rows}

    @staticmethod
    def get_dispatch_report(date_from: date, date_to: Optional[date] = None) -> dict:
        """
        One row per record entered between date_from and date_to (inclusive).

        Raises:
            ValidationFailed: If the range is reversed
        """
        date_to = date_to or date_from
        if date_to < date_from:
            raise ValidationFailed("'to' must not be before 'from'", {'to': "Must be on or after 'from'"})

        start = day_bounds(date_from)[0]
        end = day_bounds(date_to)[1]
        query = DispatchService.build_filtered_query().filter(
            DispatchRecord.entry_time >= start, DispatchRecord.entry_time < end
        )
        records = DispatchService._with_references(query).all()
        charge_totals = DashboardService._charge_totals([r.id for r in records])

        rows = []
        payment_total = Decimal('0')
        charges_total = Decimal('0')
        for record in records:
            row = dispatch_to_api(record)
            charges = charge_totals.get(record.id, Decimal('0'))
            row['chargesTotal'] = float(charges)
            rows.append(row)
            payment_total += _as_decimal(record.payment_amount)
            charges_total += charges

        return {
            'from': serialize_value(date_from),
            'to': serialize_value(date_to),
            'rows': rows,
            'totals': {
                'records': len(rows),
                'paymentAmount': float(payment_total),
                'chargesAmount': float(charges_total),
            },
        }

"""
Dispatch Service
Read-side queries for dispatch records: filtered lists and the board.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import joinedload

from busstation.business.dispatching.display_status import DispatchBoard, build_board
from busstation.business.dispatching.mappers import dispatch_list_to_api
from busstation.business.dispatching.schemas import DispatchListQuery
from busstation.business.dispatching.statuses import DispatchStatus
from busstation.data.core.route import Route
from busstation.data.dispatching.dispatch_record import DispatchRecord
from busstation.utils.timeutils import day_bounds


class DispatchService:
    """
    Service for dispatch presentation data.

    Provides methods for:
    - Building filtered dispatch queries
    - Listing records in API form
    - Building the kanban board
    """

    @staticmethod
    def _with_references(query):
        return query.options(
            joinedload(DispatchRecord.vehicle),
            joinedload(DispatchRecord.driver),
            joinedload(DispatchRecord.route).joinedload(Route.departure_station),
            joinedload(DispatchRecord.route).joinedload(Route.arrival_station),
            joinedload(DispatchRecord.schedule),
        )

    @staticmethod
    def build_filtered_query(
        status: Optional[str] = None,
        vehicle_id: Optional[int] = None,
        driver_id: Optional[int] = None,
        route_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ):
        """
        Build a filtered dispatch query.

        Args:
            status: Filter by workflow status
            vehicle_id: Filter by vehicle
            driver_id: Filter by driver
            route_id: Filter by route
            start_date: Entry time on or after this day
            end_date: Entry time on or before this day (inclusive)

        Returns:
            SQLAlchemy query object
        """
        query = DispatchRecord.query

        if status:
            query = query.filter(DispatchRecord.status == status)

        if vehicle_id:
            query = query.filter(DispatchRecord.vehicle_id == vehicle_id)

        if driver_id:
            query = query.filter(DispatchRecord.driver_id == driver_id)

        if route_id:
            query = query.filter(DispatchRecord.route_id == route_id)

        if start_date:
            query = query.filter(DispatchRecord.entry_time >= day_bounds(start_date)[0])

        if end_date:
            query = query.filter(DispatchRecord.entry_time < day_bounds(end_date)[1])

        # Newest entry first
        query = query.order_by(DispatchRecord.entry_time.desc(), DispatchRecord.id.desc())

        return query

    @staticmethod
    def list_records(filters: Optional[DispatchListQuery] = None) -> List[dict]:
        filters = filters or DispatchListQuery()
        query = DispatchService.build_filtered_query(**filters.model_dump())
        return dispatch_list_to_api(DispatchService._with_references(query).all())

    @staticmethod
    def get_board(search: Optional[str] = None, poll_interval_seconds: int = 30) -> DispatchBoard:
        """Every record still at the station, grouped into board columns"""
        query = DispatchRecord.query.filter(DispatchRecord.status != DispatchStatus.DEPARTED)
        query = query.order_by(DispatchRecord.entry_time.desc(), DispatchRecord.id.desc())
        records = DispatchService._with_references(query).all()
        return build_board(dispatch_list_to_api(records), search, poll_interval_seconds)

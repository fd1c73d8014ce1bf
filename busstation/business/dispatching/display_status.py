"""
Display-status projection and the dispatch board

Collapses the seven workflow statuses into the four kanban columns shown
to station staff.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from busstation.business.dispatching.statuses import DispatchStatus as S


class DisplayStatus:
    IN_STATION = 'in-station'
    PERMIT_ISSUED = 'permit-issued'
    PAID = 'paid'
    DEPARTED = 'departed'

    # Column order on the board
    ALL = (IN_STATION, PERMIT_ISSUED, PAID, DEPARTED)


_PROJECTION = {
    S.ENTERED: DisplayStatus.IN_STATION,
    S.PASSENGERS_DROPPED: DisplayStatus.IN_STATION,
    S.PERMIT_REJECTED: DisplayStatus.IN_STATION,
    S.PERMIT_ISSUED: DisplayStatus.PERMIT_ISSUED,
    S.PAID: DisplayStatus.PAID,
    S.DEPARTURE_ORDERED: DisplayStatus.DEPARTED,
    S.DEPARTED: DisplayStatus.DEPARTED,
}


def project_display_status(status: str) -> str:
    """
    Map a workflow status to its board column.

    Raises:
        ValueError: If status is not a known workflow status
    """
    try:
        return _PROJECTION[status]
    except KeyError:
        raise ValueError(f"Unknown dispatch status: {status!r}") from None


def matches_search(item: dict, search: Optional[str]) -> bool:
    """Case-insensitive match on plate number, route name or driver name"""
    if not search or not search.strip():
        return True
    needle = search.strip().lower()
    for key in ('vehiclePlateNumber', 'routeName', 'driverName'):
        value = item.get(key)
        if value and needle in str(value).lower():
            return True
    return False


def is_on_board(status: str) -> bool:
    # Vehicles that have left the station drop off the board;
    # the departed column holds only those still waiting to exit.
    return status != S.DEPARTED


@dataclass
class DispatchBoard:
    columns: Dict[str, List[dict]] = field(default_factory=lambda: {c: [] for c in DisplayStatus.ALL})
    poll_interval_seconds: int = 30

    @property
    def counts(self) -> Dict[str, int]:
        return {column: len(items) for column, items in self.columns.items()}

    def to_dict(self) -> dict:
        return {
            'columns': self.columns,
            'counts': self.counts,
            'total': sum(self.counts.values()),
            'pollIntervalSeconds': self.poll_interval_seconds,
        }


def build_board(items: Iterable[dict], search: Optional[str] = None, poll_interval_seconds: int = 30) -> DispatchBoard:
    """
    Group serialized dispatch records into board columns.

    Args:
        items: Records in API form (dispatch_to_api output)
        search: Optional free-text filter
        poll_interval_seconds: Interval the client should poll at
    """
    board = DispatchBoard(poll_interval_seconds=poll_interval_seconds)
    for item in items:
        status = item['currentStatus']
        if not is_on_board(status) or not matches_search(item, search):
            continue
        board.columns[project_display_status(status)].append(item)
    return board

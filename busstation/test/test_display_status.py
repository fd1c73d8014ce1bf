"""
Tests for the display-status projection and board grouping
"""

import pytest

from busstation.business.dispatching.display_status import (
    DisplayStatus,
    build_board,
    project_display_status,
)
from busstation.business.dispatching.statuses import DispatchStatus as S


def test_projection_is_total():
    for status in S.ALL:
        assert project_display_status(status) in DisplayStatus.ALL


@pytest.mark.parametrize('status,bucket', [
    (S.ENTERED, DisplayStatus.IN_STATION),
    (S.PASSENGERS_DROPPED, DisplayStatus.IN_STATION),
    (S.PERMIT_REJECTED, DisplayStatus.IN_STATION),
    (S.PERMIT_ISSUED, DisplayStatus.PERMIT_ISSUED),
    (S.PAID, DisplayStatus.PAID),
    (S.DEPARTURE_ORDERED, DisplayStatus.DEPARTED),
    (S.DEPARTED, DisplayStatus.DEPARTED),
])
def test_projection_buckets(status, bucket):
    assert project_display_status(status) == bucket


def test_departed_never_in_station():
    assert project_display_status(S.DEPARTED) != DisplayStatus.IN_STATION


def test_unknown_status_rejected():
    with pytest.raises(ValueError):
        project_display_status('cancelled')


def _item(item_id, status, plate='51B-000.00', route=None, driver=None):
    return {
        'id': item_id,
        'currentStatus': status,
        'vehiclePlateNumber': plate,
        'routeName': route,
        'driverName': driver,
    }


def test_board_groups_and_drops_departed():
    items = [
        _item(1, S.ENTERED),
        _item(2, S.PERMIT_REJECTED),
        _item(3, S.PERMIT_ISSUED),
        _item(4, S.PAID),
        _item(5, S.DEPARTURE_ORDERED),
        _item(6, S.DEPARTED),
    ]

    board = build_board(items, poll_interval_seconds=15)
    data = board.to_dict()

    assert [i['id'] for i in data['columns'][DisplayStatus.IN_STATION]] == [1, 2]
    assert [i['id'] for i in data['columns'][DisplayStatus.PERMIT_ISSUED]] == [3]
    assert [i['id'] for i in data['columns'][DisplayStatus.PAID]] == [4]
    assert [i['id'] for i in data['columns'][DisplayStatus.DEPARTED]] == [5]
    assert data['counts'] == {'in-station': 2, 'permit-issued': 1, 'paid': 1, 'departed': 1}
    assert data['total'] == 5
    assert data['pollIntervalSeconds'] == 15


def test_board_search_matches_plate_route_and_driver():
    items = [
        _item(1, S.ENTERED, plate='51B-123.45'),
        _item(2, S.ENTERED, route='Ben xe Mien Dong - Da Lat'),
        _item(3, S.PAID, driver='Tran Thi Binh'),
        _item(4, S.PAID),
    ]

    assert [i['id'] for i in build_board(items, search='123').columns[DisplayStatus.IN_STATION]] == [1]
    assert [i['id'] for i in build_board(items, search='da lat').columns[DisplayStatus.IN_STATION]] == [2]
    assert [i['id'] for i in build_board(items, search='BINH').columns[DisplayStatus.PAID]] == [3]
    assert build_board(items, search='   ').to_dict()['total'] == 4

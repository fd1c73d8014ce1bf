"""
Map DispatchRecord rows to the camelCase API shape
"""

from typing import Iterable, List

from busstation.business.core.serialization_mixin import serialize_value
from busstation.business.dispatching.display_status import project_display_status


def dispatch_to_api(record) -> dict:
    vehicle = record.vehicle
    driver = record.driver
    route = record.route
    schedule = record.schedule
    return {
        'id': record.id,
        'vehicleId': record.vehicle_id,
        'vehiclePlateNumber': vehicle.plate_number if vehicle else None,
        'operatorName': vehicle.operator_name if vehicle else None,
        'driverId': record.driver_id,
        'driverName': driver.full_name if driver else None,
        'routeId': record.route_id,
        'routeName': route.route_name if route else None,
        'routeType': route.route_type if route else None,
        'scheduleId': record.schedule_id,
        'scheduleCode': schedule.schedule_code if schedule else None,
        'entryTime': serialize_value(record.entry_time),
        'entryBy': record.entry_by_id,
        'entryImageUrl': record.entry_image_url,
        'passengerDropTime': serialize_value(record.passenger_drop_time),
        'passengersArrived': record.passengers_arrived,
        'passengerDropBy': record.passenger_drop_by_id,
        'boardingPermitTime': serialize_value(record.boarding_permit_time),
        'plannedDepartureTime': serialize_value(record.planned_departure_time),
        'transportOrderCode': record.transport_order_code,
        'seatCount': record.seat_count,
        'permitStatus': record.permit_status,
        'rejectionReason': record.rejection_reason,
        'boardingPermitBy': record.boarding_permit_by_id,
        'paymentTime': serialize_value(record.payment_time),
        'paymentAmount': serialize_value(record.payment_amount),
        'paymentMethod': record.payment_method,
        'invoiceNumber': record.invoice_number,
        'paymentBy': record.payment_by_id,
        'departureOrderTime': serialize_value(record.departure_order_time),
        'passengersDeparting': record.passengers_departing,
        'departureOrderBy': record.departure_order_by_id,
        'exitTime': serialize_value(record.exit_time),
        'exitBy': record.exit_by_id,
        'currentStatus': record.status,
        'displayStatus': project_display_status(record.status),
        'notes': record.notes,
        'metadata': record.extra_data,
        'createdAt': serialize_value(record.created_at),
        'updatedAt': serialize_value(record.updated_at),
    }


def dispatch_list_to_api(records: Iterable) -> List[dict]:
    return [dispatch_to_api(record) for record in records]

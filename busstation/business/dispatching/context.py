"""
DispatchContext - Domain Facade for the dispatch record aggregate

Acts as the aggregate controller and provides an intention-revealing
interface for the station workflow: entry, passenger drop, permit,
payment, departure order and exit. Every operation validates its input,
checks the state machine, writes the new status with its timestamp and
actor, then commits.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Type, Union

from flask import current_app, has_app_context
from sqlalchemy.exc import IntegrityError

from busstation import db
from busstation.business.core.validation import ApiSchema, parse_payload
from busstation.business.core.errors import ConflictError, ValidationFailed
from busstation.business.dispatching.errors import (
    DispatchPolicyViolation,
    DispatchRecordNotFound,
    DispatchValidationError,
    DuplicateTransportOrderError,
)
from busstation.business.dispatching.mappers import dispatch_to_api
from busstation.business.dispatching.policies import (
    EntryEditPolicy,
    PermitValidationPolicy,
    TransportOrderUniquenessPolicy,
)
from busstation.business.dispatching.schemas import (
    DepartureOrderInput,
    EntryImageInput,
    EntryInput,
    EntryUpdateInput,
    ExitInput,
    PassengerDropInput,
    PaymentInput,
    PermitInput,
)
from busstation.business.dispatching.state_machine import DispatchStateMachine
from busstation.business.dispatching.statuses import DispatchStatus, PermitStatus
from busstation.data.core.driver import Driver
from busstation.data.core.route import Route
from busstation.data.core.schedule import Schedule
from busstation.data.core.vehicle import Vehicle
from busstation.data.dispatching.dispatch_record import DispatchRecord
from busstation.logger import get_logger
from busstation.utils.timeutils import combine_date_time, to_naive_utc, utcnow

logger = get_logger("bus_station.dispatching")

Payload = Union[Dict[str, Any], ApiSchema, None]

# Reference columns checked before they are written: field -> (model, api field, label)
_REFERENCES = {
    'vehicle_id': (Vehicle, 'vehicleId', 'Vehicle'),
    'driver_id': (Driver, 'driverId', 'Driver'),
    'route_id': (Route, 'routeId', 'Route'),
    'schedule_id': (Schedule, 'scheduleId', 'Schedule'),
}


def _coerce(schema: Type[ApiSchema], data: Payload) -> ApiSchema:
    if isinstance(data, schema):
        return data
    return parse_payload(schema, data)


def _check_reference(field: str, value: Optional[int]) -> None:
    """Raise a field-keyed validation error when a referenced row does not exist"""
    if value is None:
        return
    model, api_field, label = _REFERENCES[field]
    if db.session.get(model, value) is None:
        raise DispatchValidationError(
            f"{label} {value} does not exist",
            {api_field: f"{label} not found"},
        )


class DispatchContext:
    """
    Domain Facade for one DispatchRecord.

    Use DispatchContext.record_entry() to create a record and
    DispatchContext.load() to work with an existing one.
    """

    def __init__(self, record: DispatchRecord, user_id: Optional[int] = None,
                 require_permit_for_payment: Optional[bool] = None):
        if record is None:
            raise ValueError("A DispatchRecord is required")
        self.record = record
        self.record_id = record.id
        self.user_id = user_id
        if require_permit_for_payment is None:
            require_permit_for_payment = bool(
                has_app_context() and current_app.config.get('REQUIRE_PERMIT_BEFORE_PAYMENT', False)
            )
        self.require_permit_for_payment = require_permit_for_payment

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, record_id: int, user_id: Optional[int] = None, **kwargs) -> 'DispatchContext':
        """
        Raises:
            DispatchRecordNotFound: If no record has this id
        """
        record = db.session.get(DispatchRecord, record_id)
        if record is None:
            raise DispatchRecordNotFound(record_id)
        return cls(record, user_id=user_id, **kwargs)

    @classmethod
    def record_entry(cls, data: Payload, user_id: Optional[int] = None,
                     occurred_at: Optional[datetime] = None, **kwargs) -> 'DispatchContext':
        """
        Register a vehicle arriving at the station.

        Creates the record with status 'entered'. entryTime defaults to
        occurred_at, or now.
        """
        entry = _coerce(EntryInput, data)
        for field in ('vehicle_id', 'driver_id', 'route_id', 'schedule_id'):
            _check_reference(field, getattr(entry, field))

        entry_time = to_naive_utc(entry.entry_time) if entry.entry_time else (occurred_at or utcnow())
        record = DispatchRecord.create(
            user_id=user_id,
            vehicle_id=entry.vehicle_id,
            driver_id=entry.driver_id,
            route_id=entry.route_id,
            schedule_id=entry.schedule_id,
            entry_time=entry_time,
            entry_by_id=user_id,
            entry_image_url=entry.entry_image_url,
            notes=entry.notes,
            status=DispatchStatus.ENTERED,
        )
        ctx = cls(record, user_id=user_id, **kwargs)
        ctx._commit()
        logger.info(f"Vehicle entry recorded: dispatch={record.id} vehicle={record.vehicle_id} at {entry_time.isoformat()}")
        return ctx

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def status(self) -> str:
        return self.record.status

    @property
    def allowed_transitions(self):
        return DispatchStateMachine.get_allowed_transitions(self.status, self.require_permit_for_payment)

    def to_api(self) -> dict:
        return dispatch_to_api(self.record)

    # ------------------------------------------------------------------
    # Workflow operations
    # ------------------------------------------------------------------

    def record_passenger_drop(self, data: Payload, occurred_at: Optional[datetime] = None) -> 'DispatchContext':
        """
        Record arriving passengers getting off.

        A positive count moves the record to 'passengers_dropped'. A count of
        zero (or none) only stores the value, which is allowed while the
        vehicle is still at the entry stage.
        """
        drop = _coerce(PassengerDropInput, data)
        count = drop.passengers_arrived
        _check_reference('route_id', drop.route_id)

        if count is not None and count > 0:
            self._transition(DispatchStatus.PASSENGERS_DROPPED)
            self.record.passenger_drop_time = occurred_at or utcnow()
            self.record.passenger_drop_by_id = self.user_id
        elif self.status not in DispatchStatus.EDITABLE:
            raise DispatchPolicyViolation(
                f"Passenger count can only be recorded before the permit decision "
                f"(current status: {self.status})"
            )

        self.record.passengers_arrived = count
        if drop.route_id is not None:
            self.record.route_id = drop.route_id
        self._touch()
        self._commit()
        logger.info(f"Passenger drop recorded: dispatch={self.record_id} passengers={count} status={self.status}")
        return self

    def issue_permit(self, data: Payload, occurred_at: Optional[datetime] = None) -> 'DispatchContext':
        """
        Approve or reject the boarding permit.

        Approval requires transportOrderCode, routeId, departureDate,
        scheduleId or departureTime, and seatCount > 0. Rejection requires
        at least one rejection reason.
        """
        try:
            permit = _coerce(PermitInput, data)
        except ValidationFailed as exc:
            self._raise_with_permit_errors(data, exc)
        approved = permit.permit_status == PermitStatus.APPROVED
        target = DispatchStatus.PERMIT_ISSUED if approved else DispatchStatus.PERMIT_REJECTED
        self._validate_transition(target)

        route_id = permit.route_id if permit.route_id is not None else self.record.route_id
        schedule_id = permit.schedule_id if permit.schedule_id is not None else self.record.schedule_id
        _check_reference('route_id', route_id)
        _check_reference('schedule_id', schedule_id)
        if permit.replacement_vehicle_id is not None:
            _check_reference('vehicle_id', permit.replacement_vehicle_id)

        if approved:
            values = permit.model_dump(by_alias=True)
            values['routeId'] = route_id
            values['scheduleId'] = schedule_id
            PermitValidationPolicy.validate(values)
            rejection_reason = None
        else:
            rejection_reason = self._rejection_reason(permit.rejection_reasons)

        code = permit.transport_order_code
        if code:
            TransportOrderUniquenessPolicy.validate(code, exclude_record_id=self.record_id)

        now = occurred_at or utcnow()
        record = self.record
        record.status = target
        record.permit_status = permit.permit_status
        record.boarding_permit_time = now
        record.boarding_permit_by_id = self.user_id
        record.route_id = route_id
        record.schedule_id = schedule_id
        record.rejection_reason = rejection_reason
        if code or approved:
            record.transport_order_code = code
        if permit.seat_count is not None or approved:
            record.seat_count = permit.seat_count
        record.planned_departure_time = self._planned_departure(permit, now)
        if permit.notes is not None:
            record.notes = permit.notes
        self._apply_replacement_vehicle(permit)

        self._touch()
        self._commit()
        if approved:
            logger.info(f"Permit issued: dispatch={self.record_id} order={code} seats={record.seat_count}")
        else:
            logger.info(f"Permit rejected: dispatch={self.record_id} reason={rejection_reason}")
        return self

    def process_payment(self, data: Payload, occurred_at: Optional[datetime] = None) -> 'DispatchContext':
        payment = _coerce(PaymentInput, data)
        self._transition(DispatchStatus.PAID)
        record = self.record
        record.payment_time = occurred_at or utcnow()
        record.payment_amount = payment.payment_amount
        record.payment_method = payment.payment_method
        record.invoice_number = payment.invoice_number
        record.payment_by_id = self.user_id
        if payment.notes is not None:
            record.notes = payment.notes
        self._touch()
        self._commit()
        logger.info(
            f"Payment processed: dispatch={self.record_id} amount={payment.payment_amount} "
            f"method={payment.payment_method}"
        )
        return self

    def issue_departure_order(self, data: Payload = None, occurred_at: Optional[datetime] = None) -> 'DispatchContext':
        order = _coerce(DepartureOrderInput, data)
        self._transition(DispatchStatus.DEPARTURE_ORDERED)
        self.record.departure_order_time = occurred_at or utcnow()
        self.record.departure_order_by_id = self.user_id
        self.record.passengers_departing = order.passengers_departing
        self._touch()
        self._commit()
        logger.info(f"Departure order issued: dispatch={self.record_id} passengers={order.passengers_departing}")
        return self

    def record_exit(self, data: Payload = None, occurred_at: Optional[datetime] = None) -> 'DispatchContext':
        """exitTime defaults to occurred_at, or now; passengersDeparting is only overwritten when sent"""
        exit_input = _coerce(ExitInput, data)
        self._transition(DispatchStatus.DEPARTED)
        if exit_input.exit_time:
            self.record.exit_time = to_naive_utc(exit_input.exit_time)
        else:
            self.record.exit_time = occurred_at or utcnow()
        self.record.exit_by_id = self.user_id
        if 'passengers_departing' in exit_input.model_fields_set:
            self.record.passengers_departing = exit_input.passengers_departing
        self._touch()
        self._commit()
        logger.info(f"Vehicle exit recorded: dispatch={self.record_id} at {self.record.exit_time.isoformat()}")
        return self

    # ------------------------------------------------------------------
    # Entry edits
    # ------------------------------------------------------------------

    def update_entry(self, data: Payload) -> 'DispatchContext':
        """Correct entry details; only the keys sent are changed"""
        update = _coerce(EntryUpdateInput, data)
        EntryEditPolicy.validate(self.status)

        changes = {}
        for field in update.model_fields_set:
            value = getattr(update, field)
            if field == 'vehicle_id' and value is None:
                raise DispatchValidationError("Vehicle is required", {'vehicleId': 'Vehicle is required'})
            if field in _REFERENCES:
                _check_reference(field, value)
            if field == 'entry_time':
                if value is None:
                    raise DispatchValidationError("Entry time is required", {'entryTime': 'Entry time is required'})
                value = to_naive_utc(value)
            changes[field] = value

        changed = self.record.apply_changes(changes, user_id=self.user_id)
        self._commit()
        logger.info(f"Entry updated: dispatch={self.record_id} fields={sorted(changed)}")
        return self

    def update_entry_image(self, data: Payload) -> 'DispatchContext':
        """Set or clear the entry photo URL"""
        image = _coerce(EntryImageInput, data)
        self.record.entry_image_url = image.entry_image_url
        self._touch()
        self._commit()
        action = 'updated' if image.entry_image_url else 'removed'
        logger.info(f"Entry image {action}: dispatch={self.record_id}")
        return self

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_transition(self, target: str) -> None:
        DispatchStateMachine.validate_transition(self.status, target, self.require_permit_for_payment)

    def _transition(self, target: str) -> None:
        self._validate_transition(target)
        previous = self.status
        self.record.status = target
        logger.debug(f"Dispatch {self.record_id}: {previous} -> {target}")

    def _touch(self) -> None:
        if self.user_id is not None:
            self.record.updated_by_id = self.user_id

    def _rejection_reason(self, reasons) -> str:
        if not reasons:
            raise DispatchValidationError(
                "At least one rejection reason is required",
                {'rejectionReasons': 'Please select at least one rejection reason'},
            )
        descriptions = {}
        if has_app_context():
            descriptions = current_app.config.get('REJECTION_REASONS') or {}
        return '; '.join(descriptions.get(reason, reason) for reason in reasons)

    def _raise_with_permit_errors(self, data: Payload, exc: ValidationFailed) -> None:
        """
        Re-raise a failed permit parse, adding every approval check that
        also fails on the raw payload.
        """
        if not isinstance(data, dict) or data.get('permitStatus') != PermitStatus.APPROVED:
            raise exc
        values = dict(data)
        if not values.get('routeId'):
            values['routeId'] = self.record.route_id
        if not values.get('scheduleId'):
            values['scheduleId'] = self.record.schedule_id
        result = PermitValidationPolicy.check(values)
        field_errors = dict(exc.field_errors)
        field_errors.update(result.field_errors)
        labels = result.errors or ['Permit fields']
        raise DispatchValidationError(
            'Please complete the following fields: ' + ', '.join(labels),
            field_errors,
        ) from exc

    def _planned_departure(self, permit: PermitInput, now: datetime) -> datetime:
        if permit.departure_date and permit.departure_time:
            return combine_date_time(permit.departure_date, permit.departure_time.isoformat())
        return self.record.planned_departure_time or now

    def _apply_replacement_vehicle(self, permit: PermitInput) -> None:
        if 'replacement_vehicle_id' not in permit.model_fields_set:
            return
        metadata = dict(self.record.extra_data or {})
        if permit.replacement_vehicle_id is None:
            metadata.pop('replacementVehicleId', None)
        else:
            metadata['replacementVehicleId'] = permit.replacement_vehicle_id
        self.record.extra_data = metadata or None

    def _commit(self) -> None:
        """
        Commit the session, turning unique violations into domain conflicts.

        Raises:
            DuplicateTransportOrderError: If another record took the transport order code
            ConflictError: For any other integrity failure
        """
        code = self.record.transport_order_code
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            if "transport_order_code" in str(exc.orig):
                raise DuplicateTransportOrderError(code) from exc
            logger.warning(f"Integrity error saving dispatch {self.record_id}: {exc.orig}")
            raise ConflictError("The dispatch record conflicts with existing data") from exc

"""
Service charge manager

Creates and removes billable line items on dispatch records. The total
of a charge is always computed here from quantity and unit price.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import func

from busstation import db
from busstation.business.billing.schemas import ServiceChargeInput
from busstation.business.core.errors import NotFoundError, PolicyViolation, ValidationFailed
from busstation.business.core.validation import parse_payload
from busstation.business.dispatching.statuses import DispatchStatus
from busstation.data.core.service import Service
from busstation.data.dispatching.dispatch_record import DispatchRecord
from busstation.data.dispatching.service_charge import ServiceCharge
from busstation.logger import get_logger

logger = get_logger("bus_station.billing")

CENT = Decimal('0.01')


def compute_total(quantity: Decimal, unit_price: Decimal) -> Decimal:
    return (Decimal(quantity) * Decimal(unit_price)).quantize(CENT, rounding=ROUND_HALF_UP)


class ServiceChargeManager:
    """Write operations for ServiceCharge rows"""

    @staticmethod
    def list_for_record(dispatch_record_id: Optional[int] = None):
        query = ServiceCharge.query
        if dispatch_record_id is not None:
            query = query.filter(ServiceCharge.dispatch_record_id == dispatch_record_id)
        return query.order_by(ServiceCharge.created_at.desc(), ServiceCharge.id.desc()).all()

    @staticmethod
    def create(data, user_id: Optional[int] = None) -> ServiceCharge:
        """
        Add a charge to a dispatch record.

        Raises:
            ValidationFailed: Unknown dispatch record or service
            PolicyViolation: The vehicle has already left the station
        """
        charge_input = data if isinstance(data, ServiceChargeInput) else parse_payload(ServiceChargeInput, data)

        record = db.session.get(DispatchRecord, charge_input.dispatch_record_id)
        if record is None:
            raise ValidationFailed(
                "Dispatch record not found",
                {'dispatchRecordId': 'Dispatch record not found'},
            )
        service = db.session.get(Service, charge_input.service_id)
        if service is None:
            raise ValidationFailed("Service not found", {'serviceId': 'Service not found'})
        if record.status == DispatchStatus.DEPARTED:
            raise PolicyViolation("Charges cannot be added after the vehicle has departed")

        unit_price = charge_input.unit_price
        if unit_price is None:
            unit_price = Decimal(service.base_price or 0)

        charge = ServiceCharge.create(
            user_id=user_id,
            dispatch_record_id=record.id,
            service_id=service.id,
            quantity=charge_input.quantity,
            unit_price=unit_price,
            total_amount=compute_total(charge_input.quantity, unit_price),
        )
        db.session.commit()
        logger.info(
            f"Service charge added: id={charge.id} dispatch={record.id} service={service.code} "
            f"total={charge.total_amount}"
        )
        return charge

    @staticmethod
    def delete(charge_id: int) -> None:
        """
        Raises:
            NotFoundError: If the charge does not exist
        """
        charge = db.session.get(ServiceCharge, charge_id)
        if charge is None:
            raise NotFoundError('Service charge', charge_id)
        db.session.delete(charge)
        db.session.commit()
        logger.info(f"Service charge deleted: id={charge_id}")

    @staticmethod
    def total_for_record(dispatch_record_id: int) -> Decimal:
        total = (
            db.session.query(func.coalesce(func.sum(ServiceCharge.total_amount), 0))
            .filter(ServiceCharge.dispatch_record_id == dispatch_record_id)
            .scalar()
        )
        return Decimal(str(total or 0))

"""
Request schemas for the dispatch workflow endpoints
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from busstation.business.core.validation import ApiSchema
from busstation.business.dispatching.statuses import DispatchStatus


class EntryInput(ApiSchema):
    vehicle_id: int = Field(gt=0)
    driver_id: Optional[int] = None
    route_id: Optional[int] = None
    schedule_id: Optional[int] = None
    entry_time: Optional[datetime] = None
    entry_image_url: Optional[str] = None
    notes: Optional[str] = None


class EntryUpdateInput(ApiSchema):
    """Only the keys the client sent are applied (see model_fields_set)"""
    vehicle_id: Optional[int] = Field(default=None, gt=0)
    driver_id: Optional[int] = None
    route_id: Optional[int] = None
    schedule_id: Optional[int] = None
    entry_time: Optional[datetime] = None
    notes: Optional[str] = None


class EntryImageInput(ApiSchema):
    # Required key; null clears the image
    entry_image_url: Optional[str]


class PassengerDropInput(ApiSchema):
    passengers_arrived: Optional[int] = Field(default=None, ge=0, le=100)
    route_id: Optional[int] = None


class PermitInput(ApiSchema):
    permit_status: Literal['approved', 'rejected']
    transport_order_code: Optional[str] = Field(default=None, max_length=100)
    route_id: Optional[int] = None
    schedule_id: Optional[int] = None
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    seat_count: Optional[int] = None
    rejection_reasons: Optional[List[str]] = None
    replacement_vehicle_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator('rejection_reasons')
    @classmethod
    def drop_blank_reasons(cls, value):
        if value is None:
            return value
        return [reason.strip() for reason in value if reason and reason.strip()]


class PaymentInput(ApiSchema):
    payment_amount: Decimal = Field(ge=0)
    payment_method: Literal['cash', 'transfer', 'card'] = 'cash'
    invoice_number: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None


class DepartureOrderInput(ApiSchema):
    passengers_departing: Optional[int] = Field(default=None, ge=0, le=100)


class ExitInput(ApiSchema):
    exit_time: Optional[datetime] = None
    passengers_departing: Optional[int] = Field(default=None, ge=0, le=100)


class DispatchListQuery(ApiSchema):
    status: Optional[str] = None
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None
    route_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator('status')
    @classmethod
    def known_status(cls, value):
        if value is not None and not DispatchStatus.is_valid(value):
            raise ValueError(f"Unknown status '{value}'")
        return value

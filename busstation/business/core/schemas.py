"""
Request schemas for reference data (fleet, stations, routes, schedules)

Create schemas declare required fields; update schemas make everything
optional and only the keys a client sends are applied.
"""

from datetime import date
from typing import Optional

from pydantic import Field, field_validator

from busstation.business.core.validation import ApiSchema
from busstation.utils.timeutils import combine_date_time


class VehicleInput(ApiSchema):
    plate_number: str = Field(min_length=1, max_length=20)
    seat_capacity: int = Field(default=0, ge=0)
    bed_capacity: Optional[int] = Field(default=None, ge=0)
    operator_name: Optional[str] = Field(default=None, max_length=200)
    vehicle_type: Optional[str] = Field(default=None, max_length=100)
    manufacture_year: Optional[int] = Field(default=None, ge=1950, le=2100)
    color: Optional[str] = Field(default=None, max_length=50)
    insurance_expiry_date: Optional[date] = None
    inspection_expiry_date: Optional[date] = None
    notes: Optional[str] = None
    is_active: bool = True

    @field_validator('plate_number')
    @classmethod
    def normalize_plate(cls, value):
        return value.upper() if value else value


class VehicleUpdateInput(VehicleInput):
    plate_number: Optional[str] = Field(default=None, min_length=1, max_length=20)
    seat_capacity: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class DriverInput(ApiSchema):
    full_name: str = Field(min_length=1, max_length=150)
    phone: Optional[str] = Field(default=None, max_length=30)
    id_number: str = Field(min_length=1, max_length=30)
    license_number: Optional[str] = Field(default=None, max_length=30)
    license_class: Optional[str] = Field(default=None, max_length=10)
    license_expiry_date: Optional[date] = None
    is_active: bool = True


class DriverUpdateInput(DriverInput):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    id_number: Optional[str] = Field(default=None, min_length=1, max_length=30)
    is_active: Optional[bool] = None


class LocationInput(ApiSchema):
    name: str = Field(min_length=1, max_length=150)
    code: str = Field(min_length=1, max_length=50)
    station_type: Optional[str] = Field(default=None, max_length=50)
    phone: Optional[str] = Field(default=None, max_length=30)
    email: Optional[str] = Field(default=None, max_length=120)
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    is_active: bool = True


class LocationUpdateInput(LocationInput):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    is_active: Optional[bool] = None


class RouteInput(ApiSchema):
    route_code: str = Field(min_length=1, max_length=50)
    departure_station_id: Optional[int] = None
    arrival_station_id: Optional[int] = None
    distance_km: Optional[int] = Field(default=None, ge=0)
    itinerary: Optional[str] = None
    route_type: Optional[str] = Field(default=None, max_length=50)
    is_active: bool = True


class RouteUpdateInput(RouteInput):
    route_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    is_active: Optional[bool] = None


class ScheduleInput(ApiSchema):
    schedule_code: str = Field(min_length=1, max_length=50)
    route_id: int = Field(gt=0)
    departure_time: str
    is_active: bool = True

    @field_validator('departure_time')
    @classmethod
    def valid_clock(cls, value):
        if value is None:
            return value
        try:
            combine_date_time(date.today(), value)
        except ValueError:
            raise ValueError('Departure time must be HH:MM') from None
        return value


class ScheduleUpdateInput(ScheduleInput):
    schedule_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    route_id: Optional[int] = Field(default=None, gt=0)
    departure_time: Optional[str] = None
    is_active: Optional[bool] = None

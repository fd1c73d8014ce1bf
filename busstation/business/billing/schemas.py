"""
Request schemas for service charges and the service catalog
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from busstation.business.core.validation import ApiSchema


class ServiceChargeInput(ApiSchema):
    dispatch_record_id: int = Field(gt=0)
    service_id: int = Field(gt=0)
    quantity: Decimal = Field(default=Decimal('1'), gt=0)
    # Defaults to the service's base price
    unit_price: Optional[Decimal] = Field(default=None, ge=0)


class ServiceInput(ApiSchema):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    base_price: Decimal = Field(default=Decimal('0'), ge=0)
    unit: Optional[str] = Field(default=None, max_length=50)
    is_active: bool = True


class ServiceUpdateInput(ApiSchema):
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    base_price: Optional[Decimal] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None, max_length=50)
    is_active: Optional[bool] = None

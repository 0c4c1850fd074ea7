"""
Request and response models for transfer search.
Wire format is camelCase; Python attributes are snake_case.
"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from .models import RouteDirection, VehicleType

# pydantic parses fractional seconds and "Z" on every supported Python
_PICKUP_TIME = TypeAdapter(datetime)


def parse_pickup_time(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; timestamps without an offset are taken as UTC."""
    parsed = _PICKUP_TIME.validate_python(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransferSearchRequest(CamelModel):
    """Search body posted by the booking widget."""
    airport_id: int = Field(..., gt=0)
    zone_id: int = Field(..., gt=0)
    direction: RouteDirection
    pickup_time: str = Field(..., min_length=1, description="ISO-8601, must be in the future")
    pax_adults: int = Field(..., ge=1)
    pax_children: Optional[int] = Field(0, ge=0)
    currency: str = Field(..., min_length=3, max_length=3)

    @field_validator("pickup_time")
    @classmethod
    def check_pickup_time(cls, value: str) -> str:
        try:
            parse_pickup_time(value)
        except ValueError:
            raise ValueError("pickupTime must be an ISO-8601 timestamp")
        return value

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        return value.upper()

    @property
    def total_pax(self) -> int:
        return self.pax_adults + (self.pax_children or 0)

    @property
    def pickup_at(self) -> datetime:
        return parse_pickup_time(self.pickup_time)


class SupplierSummary(CamelModel):
    id: int
    name: str
    rating: float
    rating_count: int


class TransferOption(CamelModel):
    supplier: SupplierSummary
    vehicle_type: VehicleType
    currency: str
    total_price: float
    estimated_duration_min: int
    cancellation_policy: str
    option_code: str


class TransferSearchResponse(CamelModel):
    options: List[TransferOption]


class ErrorResponse(BaseModel):
    error: str

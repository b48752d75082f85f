from __future__ import annotations
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, confloat, model_validator
from pydantic.alias_generators import to_camel

from app.models.enums import ShipmentStatus

PositiveFloat = confloat(gt=0)


class CamelModel(BaseModel):
    # наружу camelCase, внутри snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Address(CamelModel):
    name: str = Field(..., min_length=1, description="Имя отправителя/получателя")
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    country_code: str = Field(..., min_length=2, max_length=3, description="ISO-код страны")


class Dimensions(CamelModel):
    weight: PositiveFloat = Field(..., description="Вес, кг")
    length: Optional[PositiveFloat] = None
    width: Optional[PositiveFloat] = None
    height: Optional[PositiveFloat] = None


class WaybillRequest(CamelModel):
    order_reference: str = Field(..., min_length=1, description="Номер заказа магазина")
    sender: Address
    receiver: Address
    dimensions: Dimensions


class WaybillResult(CamelModel):
    tracking_number: str
    courier_ref: str
    label_url: Optional[str] = None
    raw_response: Any = Field(default=None, exclude=True)  # только для аудита


class Capabilities(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    supports_cancellation: bool = False
    supports_label_printing: bool = False


class CourierInfo(CamelModel):
    id: str
    capabilities: Capabilities


class TrackingEvent(CamelModel):
    raw_status: str
    status: ShipmentStatus
    description: Optional[str] = None
    event_date: datetime


class TrackingResult(CamelModel):
    tracking_number: str
    current_status: Optional[ShipmentStatus] = None
    events: List[TrackingEvent] = Field(default_factory=list)

    @classmethod
    def from_events(cls, tracking_number: str, events: List[TrackingEvent]) -> "TrackingResult":
        """События идут от старых к новым: текущий статус = статус последнего."""
        current = events[-1].status if events else None
        return cls(tracking_number=tracking_number, current_status=current, events=events)


class LabelResult(BaseModel):
    """Либо бинарный файл (content), либо ссылка (url), но не оба сразу."""

    content: Optional[bytes] = None
    url: Optional[str] = None
    media_type: str = "application/pdf"

    @model_validator(mode="after")
    def _exactly_one(self) -> "LabelResult":
        if (self.content is None) == (self.url is None):
            raise ValueError("label must carry either content or url")
        return self

    @property
    def is_file(self) -> bool:
        return self.content is not None

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.enums import ShipmentStatus
from app.schemas.courier import CamelModel, WaybillRequest


class ShipmentCreate(CamelModel):
    courier_id: str = Field(..., min_length=1, description="provider_id курьера, см. GET /couriers")
    data: WaybillRequest


class ShipmentRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    courier_id: str
    order_reference: str
    sender_details: Dict[str, Any]
    receiver_details: Dict[str, Any]
    dimensions: Dict[str, Any]
    tracking_number: Optional[str] = None
    courier_ref: Optional[str] = None
    label_url: Optional[str] = None
    status: ShipmentStatus
    created_at: datetime
    updated_at: datetime


class LabelUrlResponse(CamelModel):
    url: str


class CancelResponse(CamelModel):
    success: bool = True
    message: str = "Shipment cancelled successfully"
    data: ShipmentRead

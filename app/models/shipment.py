from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from sqlalchemy import String, DateTime, JSON, func, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.enums import ShipmentStatus


class Shipment(Base):
    __tablename__ = "shipments"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    courier_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    order_reference: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # снимки адресов и габаритов на момент создания
    sender_details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    receiver_details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    dimensions: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    # появляются только после успешного createWaybill
    tracking_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, unique=True, index=True)
    courier_ref: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    label_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    raw_response: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    status: Mapped[ShipmentStatus] = mapped_column(
        SAEnum(ShipmentStatus, name="shipment_status", native_enum=False),
        nullable=False,
        default=ShipmentStatus.PENDING,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

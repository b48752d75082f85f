import asyncio
import logging
import random
from datetime import datetime

from app.couriers.base import CancellableCourierAdapter
from app.models.enums import ShipmentStatus
from app.schemas.courier import (
    Capabilities,
    LabelResult,
    TrackingEvent,
    TrackingResult,
    WaybillRequest,
    WaybillResult,
)

logger = logging.getLogger(__name__)

MOCK_SMSA_STATUS_MAP = {
    "DATA_RECEIVED": ShipmentStatus.CREATED,
    "WITH_COURIER": ShipmentStatus.PICKED_UP,
    "OUT_FOR_DELIVERY": ShipmentStatus.OUT_FOR_DELIVERY,
    "DELIVERED_TO_CUSTOMER": ShipmentStatus.DELIVERED,
    "CANCELED": ShipmentStatus.CANCELLED,
}

_MOCK_HISTORY = (
    ("DATA_RECEIVED", "2023-10-01T10:00:00+00:00", "Riyadh Hub"),
    ("WITH_COURIER", "2023-10-01T14:00:00+00:00", "Riyadh Hub"),
    ("OUT_FOR_DELIVERY", "2023-10-02T09:00:00+00:00", "Jeddah"),
)


def _mock_pdf(tracking_number: str) -> bytes:
    # минимальный однострочный PDF, для тестов печати хватает
    return (
        b"%PDF-1.4\n% mock SMSA label\n"
        + f"% AWB {tracking_number}\n".encode()
        + b"trailer\n<<>>\n%%EOF\n"
    )


class MockSmsaAdapter(CancellableCourierAdapter):
    """Локальная имитация SMSA без сети. Этикетка отдаётся бинарным PDF."""

    provider_id = "mockSmsa"
    capabilities = Capabilities(supports_cancellation=True, supports_label_printing=True)

    def __init__(self, latency: float = 0.5):
        self.latency = latency

    def map_status(self, raw_status: str) -> ShipmentStatus:
        normalized = (raw_status or "").upper().strip()
        return MOCK_SMSA_STATUS_MAP.get(normalized, ShipmentStatus.PENDING)

    async def create_waybill(self, request: WaybillRequest) -> WaybillResult:
        logger.info(f"Creating waybill for order {request.order_reference}...")
        await asyncio.sleep(self.latency)

        tracking_number = f"2900{random.randint(0, 9_999_999):07d}"
        reference = f"SMSA-REF-{random.randint(0, 999)}"
        return WaybillResult(
            tracking_number=tracking_number,
            courier_ref=reference,
            label_url=f"https://track.smsa.sa/print/{tracking_number}",
            raw_response={
                "status": "success",
                "message": "Waybill created successfully",
                "awb": tracking_number,
                "ref_id": reference,
            },
        )

    async def track_shipment(self, tracking_number: str) -> TrackingResult:
        logger.info(f"Tracking shipment {tracking_number}...")
        await asyncio.sleep(self.latency)

        events = [
            TrackingEvent(
                raw_status=raw,
                status=self.map_status(raw),
                description=f"Status changed to {raw} at {location}",
                event_date=datetime.fromisoformat(time),
            )
            for raw, time, location in _MOCK_HISTORY
        ]
        return TrackingResult.from_events(tracking_number, events)

    async def get_label(self, tracking_number: str) -> LabelResult:
        return LabelResult(content=_mock_pdf(tracking_number), media_type="application/pdf")

    async def cancel_shipment(self, tracking_number: str) -> bool:
        logger.info(f"Cancelling shipment {tracking_number}")
        await asyncio.sleep(self.latency / 2)
        return True

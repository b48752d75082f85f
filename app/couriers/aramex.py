import asyncio
import logging
import random
from datetime import datetime, timedelta, timezone

from app.couriers.base import CourierAdapter, match_substring
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

# порядок важен: проверяются по очереди
ARAMEX_STATUS_TABLE = (
    ("out for delivery", ShipmentStatus.OUT_FOR_DELIVERY),
    ("delivered", ShipmentStatus.DELIVERED),
    ("returned", ShipmentStatus.RETURNED),
    ("cancelled", ShipmentStatus.CANCELLED),
    ("picked up", ShipmentStatus.PICKED_UP),
    ("received at", ShipmentStatus.IN_TRANSIT),
    ("in transit", ShipmentStatus.IN_TRANSIT),
    ("record created", ShipmentStatus.CREATED),
    ("created", ShipmentStatus.CREATED),
)


class AramexAdapter(CourierAdapter):
    """Симуляция Aramex: отмены через API нет, этикетка отдаётся ссылкой."""

    provider_id = "aramex"
    capabilities = Capabilities(supports_cancellation=False, supports_label_printing=True)

    def __init__(self, latency: float = 0.6):
        self.latency = latency

    async def create_waybill(self, request: WaybillRequest) -> WaybillResult:
        logger.info(f"[MOCK] Creating Aramex waybill for ref {request.order_reference}")
        await asyncio.sleep(self.latency)

        tracking_number = "3" + str(random.randint(0, 9_999_999_999)).zfill(10)
        logger.info(f"✅ [MOCK] Aramex shipment created: {tracking_number}")
        return WaybillResult(
            tracking_number=tracking_number,
            courier_ref=self.provider_id,
            label_url=self._label_url(tracking_number),
            raw_response={
                "HasErrors": False,
                "Notifications": [],
                "Shipments": [{"ID": tracking_number, "Reference1": request.order_reference}],
            },
        )

    async def track_shipment(self, tracking_number: str) -> TrackingResult:
        logger.debug(f"[MOCK] Tracking Aramex {tracking_number}")
        await asyncio.sleep(self.latency)

        now = datetime.now(timezone.utc)
        raw_events = [
            (now - timedelta(days=1), "Received at Operations Facility", "Shipment received at hub"),
            (now, "Out for Delivery", "Shipment is out for delivery"),
        ]
        events = [
            TrackingEvent(
                raw_status=raw,
                status=self.map_status(raw),
                description=description,
                event_date=event_date,
            )
            for event_date, raw, description in raw_events
        ]
        return TrackingResult.from_events(tracking_number, events)

    async def get_label(self, tracking_number: str) -> LabelResult:
        logger.debug(f"[MOCK] Fetching Aramex label for {tracking_number}")
        return LabelResult(url=self._label_url(tracking_number))

    def map_status(self, raw_status: str) -> ShipmentStatus:
        return match_substring(raw_status, ARAMEX_STATUS_TABLE)

    @staticmethod
    def _label_url(tracking_number: str) -> str:
        return f"https://www.aramex.com/mock-label/{tracking_number}.pdf"

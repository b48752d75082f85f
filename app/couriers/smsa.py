import logging
from typing import Any, Dict

import httpx

from app.core.errors import PermanentProviderError, TransientProviderError
from app.couriers.base import CancellableCourierAdapter, match_substring
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

SMSA_STATUS_TABLE = (
    ("RECEIVED", ShipmentStatus.CREATED),
    ("WITH COURIER", ShipmentStatus.PICKED_UP),
    ("OUT FOR DELIVERY", ShipmentStatus.OUT_FOR_DELIVERY),
    ("DELIVERED", ShipmentStatus.DELIVERED),
)


def _json_or_text(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"text": response.text}


class SmsaAdapter(CancellableCourierAdapter):
    """HTTP-адаптер SMSA Express. Клиент httpx общий на процесс, создаётся в main."""

    provider_id = "smsa"
    capabilities = Capabilities(supports_cancellation=True, supports_label_printing=True)

    def __init__(self, client: httpx.AsyncClient, api_url: str, api_key: str):
        if not api_url:
            raise ValueError("SMSA_API_URL is not configured")
        if not api_key:
            raise ValueError("SMSA_API_KEY is not configured")
        self.client = client
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.api_url}{path}"
        try:
            response = await self.client.request(method, url, headers={"apikey": self.api_key}, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            payload = _json_or_text(e.response)
            logger.error(f"[SMSA] {method} {path} -> {code}: {payload}")
            if 400 <= code < 500:
                raise PermanentProviderError(
                    f"SMSA rejected the request ({code})",
                    status_code=code, payload=payload, courier_id=self.provider_id,
                ) from e
            raise TransientProviderError(
                f"SMSA API returned {code}",
                status_code=code, payload=payload, courier_id=self.provider_id,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"[SMSA] {method} {path} failed: {e!r}")
            raise TransientProviderError(
                "SMSA API is unreachable", courier_id=self.provider_id,
            ) from e
        return _json_or_text(response)

    def _malformed(self, endpoint: str, data: Any) -> PermanentProviderError:
        logger.error(f"[SMSA] Unexpected {endpoint} payload: {data!r}")
        return PermanentProviderError(
            f"SMSA returned a malformed {endpoint} response",
            payload=data, courier_id=self.provider_id,
        )

    async def create_waybill(self, request: WaybillRequest) -> WaybillResult:
        logger.info(f"[SMSA] Creating waybill for order {request.order_reference}")

        sender, receiver = request.sender, request.receiver
        payload: Dict[str, Any] = {
            "refNo": request.order_reference,
            "sName": sender.name,
            "sPhone": sender.phone,
            "sAddress": sender.address,
            "sCity": sender.city,
            "sCntry": sender.country_code,
            "rName": receiver.name,
            "rPhone": receiver.phone,
            "rAddress": receiver.address,
            "rCity": receiver.city,
            "rCntry": receiver.country_code,
            "weight": request.dimensions.weight,
        }
        data = await self._request("POST", "/create-shipment", json=payload)
        if not isinstance(data, dict):
            raise self._malformed("create-shipment", data)

        # SMSA может вернуть 200 с флагом error в теле
        if data.get("error"):
            raise PermanentProviderError(
                f"SMSA Error: {data.get('message', 'unknown error')}",
                payload=data, courier_id=self.provider_id,
            )
        if not data.get("awbNo"):
            raise PermanentProviderError(
                "SMSA response has no AWB number", payload=data, courier_id=self.provider_id,
            )

        try:
            return WaybillResult(
                tracking_number=str(data["awbNo"]),
                courier_ref=str(data.get("refNo") or request.order_reference),
                label_url=data.get("labelUrl"),
                raw_response=data,
            )
        except ValueError as e:
            raise self._malformed("create-shipment", data) from e

    async def track_shipment(self, tracking_number: str) -> TrackingResult:
        data = await self._request("GET", f"/tracking/{tracking_number}")
        try:
            events = [
                TrackingEvent(
                    raw_status=update.get("activity", ""),
                    status=self.map_status(update.get("activity", "")),
                    description=update.get("details"),
                    event_date=update["date"],
                )
                for update in data.get("updates") or []
            ]
            # SMSA не гарантирует порядок, а контракт требует "последнее = текущее"
            events.sort(key=lambda ev: ev.event_date)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise self._malformed("tracking", data) from e
        return TrackingResult.from_events(tracking_number, events)

    async def get_label(self, tracking_number: str) -> LabelResult:
        # SMSA отдаёт публичную ссылку на PDF
        return LabelResult(url=f"{self.api_url}/print/{tracking_number}")

    async def cancel_shipment(self, tracking_number: str) -> bool:
        try:
            await self._request("POST", f"/cancel/{tracking_number}", json={})
        except PermanentProviderError as e:
            logger.warning(f"[SMSA] Cancellation refused for {tracking_number}: {e.detail}")
            return False
        return True

    def map_status(self, raw_status: str) -> ShipmentStatus:
        return match_substring(raw_status, SMSA_STATUS_TABLE, upper=True)

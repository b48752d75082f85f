"""
SmsaAdapter over httpx.MockTransport: payload mapping and error classification.
"""
import json

import httpx
import pytest

from app.core.errors import PermanentProviderError, TransientProviderError
from app.core.retry import is_permanent
from app.couriers.smsa import SmsaAdapter
from app.models.enums import ShipmentStatus


pytestmark = [pytest.mark.component]

API_URL = "https://smsa.test/api"


def make_adapter(handler) -> SmsaAdapter:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SmsaAdapter(client, API_URL + "/", "secret-key")


class TestCreateWaybill:

    @pytest.mark.asyncio
    async def test_maps_request_and_response(self, waybill_request):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["apikey"] = request.headers.get("apikey")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "awbNo": "290012345",
                "refNo": "ORD-123",
                "labelUrl": "https://smsa.test/pdf/290012345",
            })

        result = await make_adapter(handler).create_waybill(waybill_request)

        assert seen["url"] == f"{API_URL}/create-shipment"
        assert seen["apikey"] == "secret-key"
        assert seen["body"]["refNo"] == "ORD-123"
        assert seen["body"]["sCity"] == "Riyadh"
        assert seen["body"]["rCntry"] == "SA"
        assert seen["body"]["weight"] == 1
        assert result.tracking_number == "290012345"
        assert result.courier_ref == "ORD-123"
        assert result.label_url == "https://smsa.test/pdf/290012345"
        assert result.raw_response["awbNo"] == "290012345"

    @pytest.mark.asyncio
    async def test_error_flag_in_body_is_permanent(self, waybill_request):
        adapter = make_adapter(lambda request: httpx.Response(200, json={"error": True, "message": "Invalid city"}))

        with pytest.raises(PermanentProviderError) as exc_info:
            await adapter.create_waybill(waybill_request)

        assert "Invalid city" in exc_info.value.detail
        assert exc_info.value.payload == {"error": True, "message": "Invalid city"}
        assert is_permanent(exc_info.value)

    @pytest.mark.asyncio
    async def test_4xx_is_permanent(self, waybill_request):
        adapter = make_adapter(lambda request: httpx.Response(422, json={"message": "bad phone"}))

        with pytest.raises(PermanentProviderError) as exc_info:
            await adapter.create_waybill(waybill_request)

        assert exc_info.value.status_code == 422
        assert exc_info.value.payload == {"message": "bad phone"}

    @pytest.mark.asyncio
    async def test_5xx_is_transient(self, waybill_request):
        adapter = make_adapter(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(TransientProviderError) as exc_info:
            await adapter.create_waybill(waybill_request)

        assert exc_info.value.status_code == 502
        assert exc_info.value.payload == {"text": "Bad Gateway"}
        assert not is_permanent(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_error_is_transient(self, waybill_request):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransientProviderError):
            await make_adapter(handler).create_waybill(waybill_request)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        [{"awbNo": "1"}],
        {"awbNo": "290012345", "labelUrl": {"href": "https://smsa.test/pdf"}},
    ])
    async def test_malformed_payload_is_permanent(self, waybill_request, body):
        adapter = make_adapter(lambda request: httpx.Response(200, json=body))

        with pytest.raises(PermanentProviderError) as exc_info:
            await adapter.create_waybill(waybill_request)

        assert exc_info.value.payload == body
        assert is_permanent(exc_info.value)


class TestTrackShipment:

    @pytest.mark.asyncio
    async def test_events_sorted_and_mapped(self):
        updates = [
            {"activity": "Out for Delivery", "details": "Jeddah", "date": "2024-01-03T09:00:00Z"},
            {"activity": "Data Received", "details": "Riyadh Hub", "date": "2024-01-01T10:00:00Z"},
            {"activity": "With Courier", "details": "Riyadh Hub", "date": "2024-01-02T14:00:00Z"},
        ]

        def handler(request):
            assert request.url.path == "/api/tracking/2900111"
            return httpx.Response(200, json={"updates": updates})

        result = await make_adapter(handler).track_shipment("2900111")

        assert [e.status for e in result.events] == [
            ShipmentStatus.CREATED, ShipmentStatus.PICKED_UP, ShipmentStatus.OUT_FOR_DELIVERY,
        ]
        assert result.current_status == ShipmentStatus.OUT_FOR_DELIVERY
        assert result.events[-1].raw_status == "Out for Delivery"

    @pytest.mark.asyncio
    async def test_no_updates(self):
        result = await make_adapter(lambda request: httpx.Response(200, json={"updates": []})).track_shipment("1")
        assert result.current_status is None

    @pytest.mark.asyncio
    async def test_timeout_is_transient(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransientProviderError):
            await make_adapter(handler).track_shipment("1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        [{"activity": "Delivered"}],
        {"updates": [{"activity": "Delivered", "details": "no date"}]},
        {"updates": [
            {"activity": "Data Received", "date": "2024-01-01T10:00:00"},
            {"activity": "Delivered", "date": "2024-01-02T10:00:00Z"},
        ]},
        {"updates": "not-a-list"},
    ])
    async def test_malformed_payload_is_permanent(self, body):
        adapter = make_adapter(lambda request: httpx.Response(200, json=body))

        with pytest.raises(PermanentProviderError) as exc_info:
            await adapter.track_shipment("2900111")

        assert exc_info.value.payload == body
        assert is_permanent(exc_info.value)


class TestLabelAndCancel:

    @pytest.mark.asyncio
    async def test_label_is_url(self):
        label = await make_adapter(lambda request: httpx.Response(500)).get_label("2900111")

        assert label.url == f"{API_URL}/print/2900111"
        assert not label.is_file

    @pytest.mark.asyncio
    async def test_cancel_success(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json={"status": "cancelled"})

        assert await make_adapter(handler).cancel_shipment("2900111") is True
        assert seen == [("POST", "/api/cancel/2900111")]

    @pytest.mark.asyncio
    async def test_cancel_refused(self):
        adapter = make_adapter(lambda request: httpx.Response(409, json={"message": "already picked up"}))
        assert await adapter.cancel_shipment("2900111") is False

    @pytest.mark.asyncio
    async def test_cancel_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        with pytest.raises(TransientProviderError):
            await make_adapter(handler).cancel_shipment("2900111")


def test_requires_configuration():
    client = httpx.AsyncClient()
    with pytest.raises(ValueError):
        SmsaAdapter(client, "", "key")
    with pytest.raises(ValueError):
        SmsaAdapter(client, API_URL, "")

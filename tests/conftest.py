"""
Shared fixtures: in-memory repository, scripted adapters, a ready ShipmentService.
"""
import pytest

from app.core.retry import RetryPolicy
from app.couriers.registry import CourierRegistry
from app.schemas.courier import WaybillRequest
from app.service.shipment_service import ShipmentService
from tests.mocks import FakeCancellableAdapter, FakeCourierAdapter, MockShipmentRepository


@pytest.fixture
def mock_repository():
    return MockShipmentRepository()


@pytest.fixture
def adapter():
    """providerA: labels, no cancellation"""
    return FakeCourierAdapter("providerA")


@pytest.fixture
def cancellable_adapter():
    """providerB: labels and cancellation"""
    return FakeCancellableAdapter("providerB")


@pytest.fixture
def registry(adapter, cancellable_adapter):
    return CourierRegistry([adapter, cancellable_adapter])


@pytest.fixture
def retry_policy():
    return RetryPolicy(max_attempts=3, delay=0)


@pytest.fixture
def service(mock_repository, registry, retry_policy):
    return ShipmentService(mock_repository, registry, retry_policy=retry_policy)


@pytest.fixture
def waybill_request():
    return WaybillRequest.model_validate({
        "orderReference": "ORD-123",
        "sender": {
            "name": "Sender",
            "phone": "123",
            "address": "Addr",
            "city": "Riyadh",
            "countryCode": "SA",
        },
        "receiver": {
            "name": "Receiver",
            "phone": "456",
            "address": "Addr2",
            "city": "Jeddah",
            "countryCode": "SA",
        },
        "dimensions": {"weight": 1},
    })

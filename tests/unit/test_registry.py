"""
CourierRegistry: explicit registration, resolve, discovery view.
"""
import pytest
from pydantic import ValidationError

from app.core.errors import CourierNotFoundError, NotFoundError
from app.couriers.registry import CourierRegistry
from app.schemas.courier import Capabilities
from tests.mocks import FakeCancellableAdapter, FakeCourierAdapter


pytestmark = [pytest.mark.unit]


class TestCourierRegistry:

    def test_resolve_registered_adapter(self):
        adapter = FakeCourierAdapter("providerA")
        registry = CourierRegistry([adapter])

        assert registry.resolve("providerA") is adapter
        assert "providerA" in registry
        assert len(registry) == 1

    def test_resolve_unknown_raises_not_found(self):
        registry = CourierRegistry([FakeCourierAdapter("providerA")])

        with pytest.raises(CourierNotFoundError) as exc_info:
            registry.resolve("dhl")

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.status_code == 404
        assert "dhl" in exc_info.value.detail

    def test_duplicate_id_last_registration_wins(self):
        first = FakeCourierAdapter("providerA")
        second = FakeCourierAdapter("providerA")
        registry = CourierRegistry([first])

        registry.register(second)

        assert registry.resolve("providerA") is second
        assert len(registry) == 1

    def test_list_exposes_ids_and_capabilities(self):
        registry = CourierRegistry([FakeCourierAdapter("providerA"), FakeCancellableAdapter("providerB")])

        listed = {info.id: info.capabilities for info in registry.list()}

        assert listed == {
            "providerA": Capabilities(supports_cancellation=False, supports_label_printing=True),
            "providerB": Capabilities(supports_cancellation=True, supports_label_printing=True),
        }

    def test_list_is_a_copy(self):
        registry = CourierRegistry([FakeCourierAdapter("providerA")])

        registry.list().clear()

        assert len(registry.list()) == 1

    def test_empty_registry(self):
        registry = CourierRegistry()
        assert registry.list() == []
        with pytest.raises(CourierNotFoundError):
            registry.resolve("anything")

    def test_capabilities_are_immutable(self):
        caps = Capabilities(supports_cancellation=True)
        with pytest.raises(ValidationError):
            caps.supports_cancellation = False

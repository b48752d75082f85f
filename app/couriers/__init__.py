import logging
from typing import List, Optional

import httpx

from app.core.config import Settings, settings as default_settings
from app.couriers.aramex import AramexAdapter
from app.couriers.base import CancellableCourierAdapter, CourierAdapter, supports_cancellation
from app.couriers.mock_smsa import MockSmsaAdapter
from app.couriers.registry import CourierRegistry
from app.couriers.smsa import SmsaAdapter

logger = logging.getLogger(__name__)


def build_courier_adapters(http_client: httpx.AsyncClient,
                           settings: Optional[Settings] = None) -> List[CourierAdapter]:
    """Явный список адаптеров. Новый курьер = новая строка здесь."""
    settings = settings or default_settings
    adapters: List[CourierAdapter] = []

    if settings.SMSA_API_URL and settings.SMSA_API_KEY:
        adapters.append(SmsaAdapter(http_client, settings.SMSA_API_URL, settings.SMSA_API_KEY))
    else:
        logger.warning("SMSA_API_URL / SMSA_API_KEY not set, 'smsa' courier is disabled")

    if settings.MOCK_COURIERS_ENABLED:
        adapters.append(MockSmsaAdapter(latency=settings.MOCK_LATENCY_SEC))
        adapters.append(AramexAdapter(latency=settings.MOCK_LATENCY_SEC))

    return adapters


def build_courier_registry(http_client: httpx.AsyncClient,
                           settings: Optional[Settings] = None) -> CourierRegistry:
    registry = CourierRegistry(build_courier_adapters(http_client, settings))
    logger.info(f"Courier registry ready: {[info.id for info in registry.list()]}")
    return registry


__all__ = [
    "CourierAdapter",
    "CancellableCourierAdapter",
    "CourierRegistry",
    "AramexAdapter",
    "MockSmsaAdapter",
    "SmsaAdapter",
    "build_courier_adapters",
    "build_courier_registry",
    "supports_cancellation",
]

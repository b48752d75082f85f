import logging
from typing import Dict, Iterable, List, Optional

from app.core.errors import CourierNotFoundError
from app.couriers.base import CourierAdapter
from app.schemas.courier import CourierInfo

logger = logging.getLogger(__name__)


class CourierRegistry:
    """
    Индекс адаптеров по provider_id.

    Собирается один раз при старте из явного списка. Повторная регистрация
    того же provider_id заменяет предыдущий адаптер: побеждает последний.
    """

    def __init__(self, adapters: Optional[Iterable[CourierAdapter]] = None):
        self._adapters: Dict[str, CourierAdapter] = {}
        for adapter in adapters or ():
            self.register(adapter)

    def register(self, adapter: CourierAdapter) -> None:
        previous = self._adapters.get(adapter.provider_id)
        if previous is not None:
            logger.warning(f"Courier '{adapter.provider_id}' re-registered: {previous!r} replaced by {adapter!r}")
        self._adapters[adapter.provider_id] = adapter

    def resolve(self, provider_id: str) -> CourierAdapter:
        adapter = self._adapters.get(provider_id)
        if adapter is None:
            raise CourierNotFoundError(provider_id)
        return adapter

    def list(self) -> List[CourierInfo]:
        return [
            CourierInfo(id=adapter.provider_id, capabilities=adapter.capabilities)
            for adapter in self._adapters.values()
        ]

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)

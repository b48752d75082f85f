from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from app.models.enums import ShipmentStatus
from app.schemas.courier import (
    Capabilities,
    LabelResult,
    TrackingResult,
    WaybillRequest,
    WaybillResult,
)


class CourierAdapter(ABC):
    """
    Контракт адаптера курьерской службы.

    Один класс на провайдера. Адаптер не хранит изменяемого состояния:
    все побочные эффекты ограничены исходящим вызовом к API курьера.
    Ошибки вендора: PermanentProviderError (4xx, плохие данные),
    TransientProviderError (сеть, 5xx).
    """

    provider_id: ClassVar[str]
    capabilities: ClassVar[Capabilities]

    @abstractmethod
    async def create_waybill(self, request: WaybillRequest) -> WaybillResult:
        ...

    @abstractmethod
    async def track_shipment(self, tracking_number: str) -> TrackingResult:
        """События упорядочены от старых к новым; current_status берётся из последнего."""
        ...

    @abstractmethod
    async def get_label(self, tracking_number: str) -> LabelResult:
        ...

    @abstractmethod
    def map_status(self, raw_status: str) -> ShipmentStatus:
        """Тотальная функция: неизвестный статус -> PENDING, никаких исключений."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} provider_id={self.provider_id!r}>"


class CancellableCourierAdapter(CourierAdapter):
    """Адаптер, у которого есть API отмены."""

    @abstractmethod
    async def cancel_shipment(self, tracking_number: str) -> bool:
        ...


def supports_cancellation(adapter: CourierAdapter) -> bool:
    return adapter.capabilities.supports_cancellation and isinstance(adapter, CancellableCourierAdapter)


def match_substring(raw_status: str, table: tuple[tuple[str, ShipmentStatus], ...],
                    *, upper: bool = False) -> ShipmentStatus:
    """Первое совпадение подстроки из таблицы (порядок важен), иначе PENDING."""
    if not raw_status:
        return ShipmentStatus.PENDING
    status = raw_status.upper() if upper else raw_status.lower()
    for needle, mapped in table:
        if needle in status:
            return mapped
    return ShipmentStatus.PENDING

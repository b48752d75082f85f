from typing import Any, Optional, Protocol, runtime_checkable

from app.models.shipment import Shipment


@runtime_checkable
class ShipmentRepositoryProtocol(Protocol):
    """
    Всё, что ShipmentService требует от хранилища.

    Атомарность чтения/записи одной записи обеспечивает реализация,
    а не сервис.
    """

    async def create(self, **fields: Any) -> Shipment:
        ...

    async def update(self, id: str, **fields: Any) -> Shipment:
        ...

    async def get_by_tracking_number(self, tracking_number: str) -> Optional[Shipment]:
        ...

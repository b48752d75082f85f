import logging
from typing import Optional
from uuid import uuid4

from app.core.errors import (
    CancellationFailedError,
    ConflictError,
    ProviderError,
    ShipmentCreationError,
    ShipmentNotFoundError,
    UnsupportedOperationError,
)
from app.core.retry import RetryPolicy, attempt
from app.couriers.base import CourierAdapter, supports_cancellation
from app.couriers.registry import CourierRegistry
from app.models.enums import ShipmentStatus, TERMINAL_STATUSES
from app.models.shipment import Shipment
from app.repositories.protocols import ShipmentRepositoryProtocol
from app.schemas.courier import LabelResult, TrackingResult, WaybillRequest

logger = logging.getLogger(__name__)


def _failure_audit(exc: Exception) -> dict:
    audit = {"error": type(exc).__name__, "message": str(exc)}
    payload = getattr(exc, "payload", None)
    if payload is not None:
        audit["payload"] = payload
    return audit


class ShipmentService:
    """
    Жизненный цикл отправления поверх адаптеров курьеров.

    Запись создаётся в PENDING до любого внешнего вызова и после create_shipment
    всегда оказывается либо в CREATED, либо в FAILED. Остальные операции при
    ошибке статус не трогают.
    """

    def __init__(self, repo: ShipmentRepositoryProtocol, registry: CourierRegistry,
                 retry_policy: Optional[RetryPolicy] = None,
                 freeze_terminal: bool = False):
        self.repo = repo
        self.registry = registry
        self.retry_policy = retry_policy or RetryPolicy()
        self.freeze_terminal = freeze_terminal

    async def create_shipment(self, courier_id: str, data: WaybillRequest) -> Shipment:
        # неизвестный курьер -> CourierNotFoundError, в БД ничего не пишем
        adapter = self.registry.resolve(courier_id)

        shipment = await self.repo.create(
            id=str(uuid4()),
            courier_id=courier_id,
            order_reference=data.order_reference,
            sender_details=data.sender.model_dump(mode="json"),
            receiver_details=data.receiver.model_dump(mode="json"),
            dimensions=data.dimensions.model_dump(mode="json"),
            status=ShipmentStatus.PENDING,
        )

        # запись CREATED тоже внутри try: если она упала (например, дубль tracking_number),
        # отправление уходит в FAILED, а не остаётся в PENDING
        try:
            result = await attempt(
                self.retry_policy,
                lambda: adapter.create_waybill(data),
                label=f"{courier_id}.create_waybill",
            )
            created = await self.repo.update(
                shipment.id,
                status=ShipmentStatus.CREATED,
                tracking_number=result.tracking_number,
                courier_ref=result.courier_ref,
                label_url=result.label_url,
                raw_response=result.raw_response,
            )
        except Exception as e:
            logger.error(f"❌ Courier '{courier_id}' failed for order {data.order_reference}: {e}")
            await self.repo.update(
                shipment.id,
                status=ShipmentStatus.FAILED,
                raw_response=_failure_audit(e),
            )
            raise ShipmentCreationError(f"Courier failed: {e}") from e

        logger.info(f"✅ Shipment {shipment.id} created via {courier_id}: {result.tracking_number}")
        return created

    async def track_shipment(self, tracking_number: str) -> TrackingResult:
        shipment = await self._get_shipment(tracking_number)
        adapter = self.registry.resolve(shipment.courier_id)

        tracking = await attempt(
            self.retry_policy,
            lambda: adapter.track_shipment(tracking_number),
            label=f"{shipment.courier_id}.track_shipment",
        )

        current = tracking.current_status
        if current is not None and current != shipment.status:
            if self.freeze_terminal and shipment.status in TERMINAL_STATUSES:
                logger.warning(
                    f"Shipment {shipment.id} is {shipment.status.value}, "
                    f"ignoring provider status {current.value}"
                )
            else:
                logger.info(f"Shipment {shipment.id}: {shipment.status.value} -> {current.value}")
                await self.repo.update(shipment.id, status=current)

        return tracking

    async def get_label(self, tracking_number: str) -> LabelResult:
        shipment = await self._get_shipment(tracking_number)
        adapter = self.registry.resolve(shipment.courier_id)

        if not adapter.capabilities.supports_label_printing:
            raise UnsupportedOperationError(
                f"Courier '{shipment.courier_id}' does not support label printing via API"
            )

        return await attempt(
            self.retry_policy,
            lambda: adapter.get_label(tracking_number),
            label=f"{shipment.courier_id}.get_label",
        )

    async def cancel_shipment(self, tracking_number: str) -> Shipment:
        shipment = await self._get_shipment(tracking_number)

        if shipment.status == ShipmentStatus.DELIVERED:
            raise ConflictError("Cannot cancel a delivered shipment")

        adapter: CourierAdapter = self.registry.resolve(shipment.courier_id)
        if not supports_cancellation(adapter):
            raise UnsupportedOperationError(
                f"Cancellation is not supported by courier: {shipment.courier_id}"
            )

        try:
            cancelled = await adapter.cancel_shipment(tracking_number)
        except ProviderError as e:
            raise CancellationFailedError(f"Cancellation failed: {e}") from e

        if not cancelled:
            raise CancellationFailedError("Cancellation failed: courier refused cancellation")

        logger.info(f"Shipment {shipment.id} ({tracking_number}) cancelled")
        return await self.repo.update(shipment.id, status=ShipmentStatus.CANCELLED)

    async def _get_shipment(self, tracking_number: str) -> Shipment:
        shipment = await self.repo.get_by_tracking_number(tracking_number)
        if shipment is None:
            raise ShipmentNotFoundError(tracking_number)
        return shipment

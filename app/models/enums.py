from enum import Enum


class ShipmentStatus(str, Enum):
    """Единый (провайдер-независимый) статус отправления."""

    PENDING = "PENDING"
    CREATED = "CREATED"
    PICKED_UP = "PICKED_UP"
    IN_TRANSIT = "IN_TRANSIT"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"
    FAILED = "FAILED"


# после этих статусов трекинг уже ничего не меняет (см. TRACKING_FREEZE_TERMINAL)
TERMINAL_STATUSES = frozenset({
    ShipmentStatus.DELIVERED,
    ShipmentStatus.CANCELLED,
    ShipmentStatus.RETURNED,
    ShipmentStatus.FAILED,
})

# app/core/errors.py
from __future__ import annotations

from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class CourierGatewayError(Exception):
    """Базовая доменная ошибка. status_code используется и ретраем, и HTTP-слоем."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, *, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(CourierGatewayError):
    status_code = status.HTTP_404_NOT_FOUND


class CourierNotFoundError(NotFoundError):
    def __init__(self, courier_id: str):
        super().__init__(f"Courier provider '{courier_id}' is not supported.")
        self.courier_id = courier_id


class ShipmentNotFoundError(NotFoundError):
    def __init__(self, tracking_number: str):
        super().__init__(f"Shipment with tracking number '{tracking_number}' not found")
        self.tracking_number = tracking_number


class ConflictError(CourierGatewayError):
    status_code = status.HTTP_409_CONFLICT


class UnsupportedOperationError(CourierGatewayError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class ProviderError(CourierGatewayError):
    """Ошибка на стороне курьера. payload: сырой ответ вендора, только для логов/аудита."""

    def __init__(self, detail: str, *, status_code: Optional[int] = None,
                 payload: Any = None, courier_id: Optional[str] = None):
        super().__init__(detail, status_code=status_code)
        self.payload = payload
        self.courier_id = courier_id


class PermanentProviderError(ProviderError):
    # 4xx: ретраить бессмысленно
    status_code = status.HTTP_400_BAD_REQUEST


class TransientProviderError(ProviderError):
    # сеть / 5xx
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class ShipmentCreationError(CourierGatewayError):
    status_code = status.HTTP_400_BAD_REQUEST


class CancellationFailedError(CourierGatewayError):
    status_code = status.HTTP_400_BAD_REQUEST


async def gateway_error_handler(request: Request, exc: CourierGatewayError) -> JSONResponse:
    # payload вендора наружу не отдаём
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

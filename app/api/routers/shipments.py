from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_shipment_service
from app.schemas.courier import TrackingResult
from app.schemas.shipment import CancelResponse, LabelUrlResponse, ShipmentCreate, ShipmentRead
from app.service.shipment_service import ShipmentService

router = APIRouter(prefix="/shipments", tags=["shipments"])


@router.post(
    "",
    response_model=ShipmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Создать отправление у выбранного курьера",
)
async def create_shipment(
    payload: ShipmentCreate,
    service: ShipmentService = Depends(get_shipment_service),
):
    return await service.create_shipment(payload.courier_id, payload.data)


@router.get(
    "/{tracking_number}/track",
    response_model=TrackingResult,
    summary="Трекинг с синхронизацией статуса",
)
async def track_shipment(
    tracking_number: str,
    service: ShipmentService = Depends(get_shipment_service),
):
    return await service.track_shipment(tracking_number)


@router.get(
    "/{tracking_number}/label",
    response_model=LabelUrlResponse,
    summary="Этикетка: PDF-файл или ссылка",
)
async def get_label(
    tracking_number: str,
    service: ShipmentService = Depends(get_shipment_service),
):
    label = await service.get_label(tracking_number)
    if label.is_file:
        return Response(
            content=label.content,
            media_type=label.media_type,
            headers={"Content-Disposition": f'attachment; filename="label-{tracking_number}.pdf"'},
        )
    return LabelUrlResponse(url=label.url)


@router.post(
    "/{tracking_number}/cancel",
    response_model=CancelResponse,
    summary="Отменить отправление",
)
async def cancel_shipment(
    tracking_number: str,
    service: ShipmentService = Depends(get_shipment_service),
):
    shipment = await service.cancel_shipment(tracking_number)
    return CancelResponse(data=ShipmentRead.model_validate(shipment))

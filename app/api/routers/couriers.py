from fastapi import APIRouter, Depends

from app.api.deps import get_courier_registry
from app.couriers.registry import CourierRegistry
from app.schemas.courier import CourierInfo

router = APIRouter(prefix="/couriers", tags=["couriers"])


@router.get(
    "",
    response_model=list[CourierInfo],
    summary="Доступные курьеры и их возможности",
)
async def list_couriers(registry: CourierRegistry = Depends(get_courier_registry)):
    return registry.list()

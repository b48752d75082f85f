from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.config import settings
from app.core.retry import RetryPolicy
from app.couriers.registry import CourierRegistry
from app.repositories.shipment_repo import ShipmentRepository
from app.service.shipment_service import ShipmentService

# DB
from app.db.session import get_session


logger = logging.getLogger(__name__)

#Registry (собирается один раз в startup, см. app.main)
def get_courier_registry(request: Request) -> CourierRegistry:
    return request.app.state.courier_registry

def get_retry_policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=settings.RETRY_MAX_ATTEMPTS, delay=settings.RETRY_DELAY_SEC)

#Repositories
def get_shipment_repo(db: AsyncSession = Depends(get_session)) -> ShipmentRepository:
    return ShipmentRepository(db)

#Services
def get_shipment_service(
    repo: ShipmentRepository = Depends(get_shipment_repo),
    registry: CourierRegistry = Depends(get_courier_registry),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> ShipmentService:
    return ShipmentService(
        repo,
        registry,
        retry_policy=retry_policy,
        freeze_terminal=settings.TRACKING_FREEZE_TERMINAL,
    )

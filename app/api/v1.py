from fastapi import APIRouter
from app.api.routers import shipments
from app.api.routers import couriers

api_router = APIRouter()
api_router.include_router(shipments.router)
api_router.include_router(couriers.router)

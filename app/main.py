# app/main.py
from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import CourierGatewayError, gateway_error_handler
from app.api.v1 import api_router
from app.couriers import build_courier_registry
from app.db.session import engine

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# доменные ошибки -> {"detail": ...} с их status_code
app.add_exception_handler(CourierGatewayError, gateway_error_handler)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.on_event("startup")
async def _startup() -> None:
    # один httpx-клиент на процесс, адаптеры его только используют
    app.state.http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SEC)
    app.state.courier_registry = build_courier_registry(app.state.http_client, settings)
    logger.info("🌐 API started. Couriers: %s", len(app.state.courier_registry))


@app.on_event("shutdown")
async def _shutdown() -> None:
    http_client: httpx.AsyncClient | None = getattr(app.state, "http_client", None)
    if http_client is not None:
        await http_client.aclose()
    await engine.dispose()
    logger.info("🛑 API stopped.")

from contextlib import asynccontextmanager

import yaml
from fastapi import FastAPI
from loguru import logger

from seatlock.infrastructure.config import settings
from seatlock.infrastructure.log_config import configure_logging
from seatlock.presentation.exception_handlers import register_exception_handlers
from seatlock.presentation.routers import router
from seatlock.services.reservation_service import build_reservation_service

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create the seat table (all seats Available) and its expiry scheduler for this process,
    and stop the scheduler on the way out
    """
    app.state.reservation_service = build_reservation_service(settings)
    try:
        yield
    finally:
        app.state.reservation_service.close()
        logger.info("[shutdown] reservation service closed")


app = FastAPI(lifespan=lifespan)


# Use the contractual schema
def custom_openapi():
    with open(settings.openapi_path) as f:
        return yaml.safe_load(f)


app.openapi = custom_openapi
register_exception_handlers(app)
app.include_router(router)

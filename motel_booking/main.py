import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from motel_booking.api.deps import engine
from motel_booking.api.errors import internal_error_response, register_domain_error_handler
from motel_booking.api.routers.health import router as health_router
from motel_booking.api.routers.motels import router as motels_router
from motel_booking.api.routers.payments import router as payments_router
from motel_booking.api.routers.reservations import router as reservations_router
from motel_booking.api.routers.webhooks import router as webhooks_router
from motel_booking.api.routers.worker import router as worker_router
from motel_booking.config import get_settings
from motel_booking.infrastructure.db.tables import metadata

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables for dev/demo databases; production schemas are migrated.
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield
    await engine.dispose()


app = FastAPI(
    title="Motel Booking API",
    version="0.1.0",
    lifespan=lifespan,
)

register_domain_error_handler(app)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Unhandled errors are logged with traceback; clients only get an error_id."""
    error_id = str(uuid.uuid4())
    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        },
    )
    return internal_error_response(error_id)


app.include_router(health_router, tags=["Health"])
app.include_router(motels_router, prefix="/api/v1", tags=["Motels"])
app.include_router(reservations_router, prefix="/api/v1", tags=["Reservations"])
app.include_router(payments_router, prefix="/api/v1", tags=["Payments"])
app.include_router(webhooks_router, prefix="/api/v1", tags=["Webhooks"])
app.include_router(worker_router, prefix="/api/v1", tags=["Worker"])

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db, init_db
from .middleware.audit import audit_middleware
from .middleware.auth import auth_middleware
from .redis_client import get_redis
from .routers import absences, appointments, businesses, customers, services, slots, working_days
from .services.errors import BookingError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()
    logger.info("Booking API started")
    yield


def _validation_payload(exc: RequestValidationError) -> dict:
    """First error only: {message, field} with the camelCase field path."""
    errors = exc.errors()
    if not errors:
        return {"message": "Invalid request", "field": None}

    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    message = first.get("msg", "Invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return {"message": message, "field": ".".join(loc) or None}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=_validation_payload(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"message": "Internal server error."})


def create_app() -> FastAPI:
    app = FastAPI(title="Appointment Booking API", lifespan=lifespan)

    # ===== Middleware order: auth runs first, audit sees its result =====
    app.middleware("http")(audit_middleware)
    app.middleware("http")(auth_middleware)

    register_exception_handlers(app)

    for module in (businesses, services, working_days, absences, customers, slots, appointments):
        app.include_router(module.router, prefix="/api")

    @app.get("/health")
    def health(
        db: Session = Depends(get_db),
        redis: Redis | None = Depends(get_redis),
    ):
        result = {"database": True, "redis": None}
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError:
            result["database"] = False
        if redis is not None:
            try:
                result["redis"] = bool(redis.ping())
            except RedisError:
                result["redis"] = False
        return result

    return app


app = create_app()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import settings
from .core.errors import AppError
from .database import Base, SessionLocal, engine

# every model module, so that relationships resolve before create_all
from .models import booking, messaging, photographer, review, slot, user  # noqa: F401
from .routers import admin as admin_router
from .routers import auth as auth_router
from .routers import availability as availability_router
from .routers import bookings as bookings_router
from .routers import messaging as messaging_router
from .routers import photographers as photographers_router
from .routers import reviews as reviews_router
from .services.admin import bootstrap_admins

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        promoted = bootstrap_admins(db)
        if promoted:
            logger.info("Admin bootstrap promoted %s user(s)", promoted)
    finally:
        db.close()
    yield


app = FastAPI(title="LensMatch", lifespan=lifespan)


# --- Error mapping ---
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    # same challenge header OAuth2PasswordBearer sends for a missing token
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("Invalid payload on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid data provided", "errors": jsonable_encoder(exc.errors())},
    )


# --- API Routers ---
app.include_router(auth_router.router)
app.include_router(photographers_router.router)
app.include_router(availability_router.router)
app.include_router(bookings_router.router)
app.include_router(reviews_router.router)
app.include_router(messaging_router.router)
app.include_router(admin_router.router)


@app.get("/ping")
def ping():
    return {"ok": True}

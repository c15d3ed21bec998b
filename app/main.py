import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import get_settings
from app.errors import (
    AuthorizationError,
    ClassVaultError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.routers import audit, auth, classes, dashboard, notifications, requests

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Checked in order; first isinstance match wins.
ERROR_STATUS_MAP: list[tuple[type[ClassVaultError], int]] = [
    (ValidationError, 422),
    (ConflictError, 409),
    (AuthorizationError, 403),
    (NotFoundError, 404),
]


def status_for(error: ClassVaultError) -> int:
    for error_type, status_code in ERROR_STATUS_MAP:
        if isinstance(error, error_type):
            return status_code
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("ClassVault API starting (database: %s)", settings.database_url.split("@")[-1])
    yield
    logger.info("ClassVault API stopped")


app = FastAPI(title="ClassVault API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ClassVaultError)
async def classvault_error_handler(request: Request, exc: ClassVaultError):
    """Kind -> status so the frontend can choose redirect (403), inline message (409/422) or 404."""
    status_code = status_for(exc)
    detail = {"code": exc.code, "message": exc.message}
    field = getattr(exc, "field", None)
    if field:
        detail["field"] = field
    return JSONResponse(status_code=status_code, content={"detail": detail})


app.include_router(auth.router)
app.include_router(classes.router)
app.include_router(requests.router)
app.include_router(notifications.router)
app.include_router(dashboard.router)
app.include_router(audit.router)


@app.get("/")
def root():
    return {"message": "ClassVault API", "docs": "/docs"}

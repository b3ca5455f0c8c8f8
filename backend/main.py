import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_provider
from api.routes import router as api_router
from auth.routes import router as auth_router
from config.settings import settings
from errors import JobTrackerError, StorageError
from providers.base import StorageProvider

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Job Application Tracker API",
    description="Backend API for tracking job applications and their lifecycle events",
    version="1.0.0",
    root_path=settings.API_ROOT_PATH,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
app.include_router(api_router, prefix="/api")


# =============================================================================
# Error responses: every error is {"error": "<message>"}
# =============================================================================

def _validation_message(errors: list) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


@app.exception_handler(JobTrackerError)
async def job_tracker_error_handler(request: Request, exc: JobTrackerError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.original_error!r})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _validation_message(exc.errors())})


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_error_handler(request: Request, exc: PydanticValidationError):
    return JSONResponse(status_code=400, content={"error": _validation_message(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} failed: {exc!r}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health/storage")
async def storage_health_check(provider: StorageProvider = Depends(get_provider)):
    """
    Storage probe: reaches the active provider's backend

    503 lets the client offer switching to mock data.
    """
    try:
        await provider.ping()
    except StorageError as e:
        return JSONResponse(
            status_code=503,
            content={"error": e.message, "provider": provider.kind.value},
        )
    return {"status": "healthy", "provider": provider.kind.value}


# Lambda handler
handler = Mangum(app, lifespan="off")

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from videohub.config import settings
from videohub.database import database
from videohub.errors import ApiError
from videohub.logger import api_logger, app_logger
from videohub.redis_client import redis_client
from videohub.routers import users, videos
from videohub.schemas.response import api_error_response

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production else None,
    openapi_url=f"{settings.api_prefix}/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "PATCH"],
    allow_headers=["*"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

# Include routers
app.include_router(users.router, prefix=settings.api_prefix, tags=["Users"])
app.include_router(videos.router, prefix=settings.api_prefix, tags=["Videos"])


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Serialize workflow errors into the failure envelope."""
    if exc.status_code >= 500:
        api_logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return api_error_response(exc.status_code, exc.message, exc.errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    return api_error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return api_error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    api_logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return api_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    app_logger.info(f"Starting {settings.app_name}")
    app_logger.info(f"Environment: {settings.environment}")
    app_logger.info(f"Debug mode: {settings.debug}")

    database.connect()
    redis_client.connect()


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    app_logger.info("Shutting down application")

    redis_client.close()
    database.dispose()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.environment,
    }


@app.get("/health")
async def health_check():
    """Detailed health check endpoint."""
    db_status = "connected"
    try:
        database.connect()
    except Exception as e:
        db_status = f"error: {str(e)}"

    redis_status = "connected" if redis_client.ping() else "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "app": settings.app_name,
        "version": "1.0.0",
        "environment": settings.environment,
        "database": db_status,
        "redis": redis_status,
    }

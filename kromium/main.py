from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime, timezone
import time
import logging

from .api import appointments, auth, chat, doctors, health_metrics, medical_records, users
from .api.deps import api_rate_limit
from .core.config import settings
from .core.database import init_db

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Healthcare appointment booking: doctors, appointments, medical records, health metrics and chat",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Custom middleware for request logging and timing
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Log request
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.4f}s"
    )

    return response


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    content = {"success": False, "message": exc.detail}
    if exc.status_code == 404 and exc.detail == "Not Found":
        content = {"success": False, "message": "Route not found", "path": request.url.path}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": message, "detail": jsonable_encoder(errors)},
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal server error on {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "An unexpected error occurred"
        }
    )


# Include routers
for module in (auth, users, doctors, appointments, medical_records, health_metrics, chat):
    app.include_router(
        module.router,
        prefix=settings.API_PREFIX,
        dependencies=[Depends(api_rate_limit)]
    )


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info(f"Starting {settings.APP_NAME}...")

    dialect = settings.get_database_url.split(":", 1)[0]
    logger.info(f"Database dialect: {dialect}; chat provider configured: {settings.chat_configured}")

    try:
        init_db()
    except Exception:
        logger.exception("Could not create database tables")
        raise

    logger.info(f"{settings.APP_NAME} ready, routes under {settings.API_PREFIX}")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on application shutdown."""
    logger.info(f"Shutting down {settings.APP_NAME}...")


# Health check endpoint
@app.get(f"{settings.API_PREFIX}/health")
async def health_check():
    """Health check endpoint."""
    return {
        "success": True,
        "status": "OK",
        "message": f"{settings.APP_NAME} API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION,
        "chatConfigured": settings.chat_configured,
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    prefix = settings.API_PREFIX
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": settings.VERSION,
        "status": "operational",
        "endpoints": {
            "health": f"{prefix}/health",
            "auth": f"{prefix}/auth",
            "users": f"{prefix}/users",
            "doctors": f"{prefix}/doctors",
            "appointments": f"{prefix}/appointments",
            "medicalRecords": f"{prefix}/medical-records",
            "healthMetrics": f"{prefix}/health-metrics",
            "chat": f"{prefix}/chat",
            "docs": "/docs",
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "kromium.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )

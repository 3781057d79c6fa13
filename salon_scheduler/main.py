from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, DisconnectionError, OperationalError, TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import logging

from .api.routes.auth import router as auth_router
from .api.routes.appointments import router as appointments_router
from .core.config import settings
from .core.database import check_connection, init_db
from .core.errors import SchedulingError, StoreUnavailable, ValidationError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Appointment scheduling backend for a single-location salon",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials="*" not in settings.ALLOWED_ORIGINS,
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
@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Routing failures (unknown path, wrong method) in the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            "message": exc.detail,
        },
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ValidationError("Malformed or missing fields")
    content = error.to_dict()
    # Rejected input is not echoed back; it may not be JSON-serializable (NaN, Infinity)
    content["details"] = jsonable_encoder(
        [{"loc": e["loc"], "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
    )
    return JSONResponse(status_code=error.status_code, content=content)

@app.exception_handler(DataError)
async def data_error_handler(request: Request, exc: DataError):
    logger.warning(f"Store rejected a value during {request.method} {request.url.path}: {exc.orig}")
    error = ValidationError("A field value is out of range for the store")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())

@app.exception_handler(OperationalError)
@app.exception_handler(DisconnectionError)
@app.exception_handler(PoolTimeoutError)
async def store_unavailable_handler(request: Request, exc: Exception):
    logger.error(f"Store unavailable during {request.method} {request.url.path}: {exc}")
    error = StoreUnavailable()
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict(),
        headers=error.headers,
    )

@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal server error: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred"
        }
    )

# Include routers
app.include_router(auth_router)
app.include_router(appointments_router)

# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Refuse to serve traffic without a signing secret or a reachable store."""
    logger.info("Starting Salon Scheduler...")

    settings.check_startup()

    db_url = settings.get_database_url
    db_type = "PostgreSQL" if "postgresql" in db_url else "SQLite" if "sqlite" in db_url else "Unknown"
    logger.info(f"Using {db_type} database")

    try:
        check_connection()
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    logger.info("Application startup complete")

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on application shutdown."""
    logger.info("Shutting down Salon Scheduler...")

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.VERSION
    }

def run():
    import uvicorn
    uvicorn.run(
        "salon_scheduler.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )

if __name__ == "__main__":
    run()

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
import time
from app.config import get_settings
from app.database import init_db

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    # Startup
    await init_db()
    logger.info(f"Aadhaar Advance API started ({settings.ENVIRONMENT})")
    yield
    # Shutdown
    logger.info("Aadhaar Advance API stopped")


app = FastAPI(
    title="Aadhaar Advance API",
    description="Appointment booking, OTP verification and record management for Aadhaar updates",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Local frontends are always allowed next to the configured origins
localhost_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

cors_origins = list(settings.cors_origins) if settings.cors_origins else []
for origin in localhost_origins:
    if origin not in cors_origins:
        cors_origins.insert(0, origin)

if settings.ENVIRONMENT == "development":
    logger.info(f"CORS allowed origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Add Gzip compression
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f} ms)")
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Required fields missing"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Aadhaar Advance API",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "operational"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT
    }


# Import and include routers
from app.api.v1 import (  # noqa: E402
    auth, otp, get_phone, centers, time_slots, update_types, aadhaar_records,
    appointments, documents, fraud_logs, analytics,
)
from app.websocket.manager import manager  # noqa: E402

app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(otp.router, prefix="/api/v1/otp", tags=["OTP"])
app.include_router(get_phone.router, prefix="/api/v1", tags=["Authentication"])
app.include_router(centers.router, prefix="/api/v1/centers", tags=["Centers"])
app.include_router(time_slots.router, prefix="/api/v1/time-slots", tags=["Time Slots"])
app.include_router(update_types.router, prefix="/api/v1/update-types", tags=["Update Types"])
app.include_router(aadhaar_records.router, prefix="/api/v1/aadhaar-records", tags=["Aadhaar Records"])
app.include_router(appointments.router, prefix="/api/v1/appointments", tags=["Appointments"])
app.include_router(documents.router, prefix="/api/v1/documents", tags=["Documents"])
app.include_router(fraud_logs.router, prefix="/api/v1/fraud-logs", tags=["Fraud Logs"])
app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["Analytics"])


@app.websocket("/ws/admin")
async def websocket_admin_endpoint(websocket: WebSocket):
    """WebSocket endpoint for admin dashboard updates"""
    await manager.connect(websocket, is_admin=True)
    try:
        while True:
            # Keep connection alive
            await websocket.receive_text()
            await websocket.send_json({"type": "pong", "message": "Admin connection active"})
    except WebSocketDisconnect:
        manager.disconnect(websocket, is_admin=True)


@app.websocket("/ws/{aadhaar_record_id}")
async def websocket_endpoint(websocket: WebSocket, aadhaar_record_id: str):
    """WebSocket endpoint for a citizen's appointment updates"""
    await manager.connect(websocket, aadhaar_record_id=aadhaar_record_id)
    try:
        while True:
            await websocket.receive_text()
            await websocket.send_json({"type": "pong", "message": "Connection active"})
    except WebSocketDisconnect:
        manager.disconnect(websocket, aadhaar_record_id=aadhaar_record_id)

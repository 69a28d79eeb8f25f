from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime
from config.database import engine, Base, check_db_connection
from config.logging_config import setup_logging
from config.middleware import add_cors_middleware
from config.settings import HEARTBEAT_INTERVAL_SECONDS, warn_on_insecure_defaults
from shared_utils.auth import ExpiredSignatureError, InvalidTokenError, decode_access_token
import models
import audit.router, auth.router, visitors.router, staff.router, complaints.router
import announcements.router, finance.router, amenities.router
import documents.router, inventory.router, messaging.router, security.router
import dashboard.router
import realtime.router
import logging

# ------------- Logging -------------
setup_logging()
logger = logging.getLogger(__name__)

warn_on_insecure_defaults()


# ------------- Lifespan -------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown"""
    logger.info("GateSphere API starting up...")

    try:
        realtime.router.heartbeat_scheduler.start(seconds=HEARTBEAT_INTERVAL_SECONDS)
    except Exception as e:
        logger.error(f"❌ Failed to start heartbeat scheduler: {str(e)}")

    yield

    logger.info("GateSphere API shutting down...")
    try:
        realtime.router.heartbeat_scheduler.stop()
    except Exception as e:
        logger.error(f"Error stopping heartbeat scheduler: {str(e)}")


# ------------- Create app -------------
app = FastAPI(title="GateSphere API", lifespan=lifespan)


# ------------- JWT Authentication Middleware -------------
# WebSocket upgrades never reach this middleware; /ws authenticates in-band.
PUBLIC_PATHS = {
    "/",
    "/health",
    "/api/otp/send",
    "/api/otp/verify",
    "/openapi.json",
}


async def jwt_middleware(request: Request, call_next):
    """
    Public routes pass through; everything else needs
    Authorization: Bearer <access token>
    """
    if (request.url.path in PUBLIC_PATHS
            or request.url.path.startswith("/docs")
            or request.method == "OPTIONS"):
        return await call_next(request)

    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer "):
        return JSONResponse(
            status_code=401,
            content={"error": "unauthorized", "message": "Authorization token missing"}
        )

    token = auth.replace("Bearer ", "")

    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        return JSONResponse(
            status_code=401,
            content={"error": "token_expired", "message": "Access token has expired"}
        )
    except InvalidTokenError:
        return JSONResponse(
            status_code=401,
            content={"error": "invalid_token", "message": "Invalid token"}
        )

    request.state.user_id = payload.get("sub")
    request.state.society_id = payload.get("society_id")
    request.state.role = payload.get("role")
    return await call_next(request)


app.middleware("http")(jwt_middleware)

# ------------- CORS + DB -------------
add_cors_middleware(app)
Base.metadata.create_all(bind=engine)

# ------------- Routers -------------
app.include_router(auth.router.router)
app.include_router(visitors.router.router)
app.include_router(staff.router.router)
app.include_router(complaints.router.router)
app.include_router(announcements.router.router)
app.include_router(finance.router.router)
app.include_router(amenities.router.router)
app.include_router(documents.router.router)
app.include_router(messaging.router.router)
app.include_router(security.router.router)
app.include_router(inventory.router.router)
app.include_router(audit.router.router)
app.include_router(dashboard.router.router)
app.include_router(realtime.router.router)


# ------------- Health endpoints -------------
@app.get("/health")
def health_check():
    return {
        "status": "OK",
        "database": "connected" if check_db_connection() else "unavailable",
        "connections": len(realtime.router.registry),
        "heartbeat": realtime.router.heartbeat_scheduler.get_status(),
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }


@app.get("/")
def read_root():
    return {"message": "GateSphere API is running"}

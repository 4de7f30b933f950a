"""
Todo service backend
Multi-user todos with a free tier, subscriptions and an admin moderation area
"""

from pathlib import Path
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

# Import routers
from auth import auth_router
from routers.admin_router import admin_router
from routers.subscription_router import subscription_router
from routers.todos_router import todos_router
from routers.webhook_router import webhook_router
from backend.utils.errors import AppError, Invalid, Unauthenticated
from backend.utils.responses import error_response
from database import init_db
from config import settings, IS_PRODUCTION


def configure_logging():
    """Stream handler always; file handler at LOG_DIR/app.log when LOG_DIR is set."""
    handlers = [logging.StreamHandler()]
    if settings.log_dir:
        logs_dir = Path(settings.log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(logs_dir / "app.log"))
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


configure_logging()
logger = logging.getLogger(__name__)

# ============================================================================
# FASTAPI APP SETUP
# ============================================================================

app = FastAPI(title="Todo Service")


# Uncaught exception middleware - logs all unhandled exceptions and returns 500
class UncaughtExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Uncaught exception: {e}\n{traceback.format_exc()}")
            return JSONResponse(
                status_code=500,
                content={"ok": False, "data": {}, "error": "internal_error", "message": "Internal Server Error"}
            )


# Security headers middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses: HSTS, X-Frame-Options, X-Content-Type-Options"""
    async def dispatch(self, request, call_next):
        response = await call_next(request)

        # HTTPS is only guaranteed behind the production proxy
        if IS_PRODUCTION:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"

        return response


app.add_middleware(UncaughtExceptionMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

# CORS MUST be near the bottom
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url] if settings.frontend_url else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# ERROR HANDLING
# ============================================================================


def _is_browser_navigation(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, Unauthenticated):
        if _is_browser_navigation(request):
            return RedirectResponse(settings.sign_in_url, status_code=303)
        return error_response(
            exc.error_code,
            status=exc.status_code,
            message=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed upstream: {exc.message}")
    return error_response(exc.error_code, status=exc.status_code, message=exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", Invalid.default_message) if errors else Invalid.default_message
    return error_response(Invalid.error_code, status=Invalid.status_code, message=message)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # Storage details stay in the log
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}\n{traceback.format_exc()}")
    return error_response("internal_error", status=500, message="Internal Server Error")


# ============================================================================
# STARTUP
# ============================================================================

@app.on_event("startup")
async def check_env_keys_on_startup():
    """Check for missing environment variables on startup (non-fatal warning)"""
    missing = []
    if not settings.jwt_secret_key:
        missing.append("JWT_SECRET_KEY")
    if not settings.identity_provider_api_url:
        missing.append("IDENTITY_PROVIDER_API_URL")
    if not settings.identity_webhook_secret:
        missing.append("IDENTITY_WEBHOOK_SECRET")
    if missing:
        logger.warning(f"Startup check: Missing environment variables: {', '.join(missing)}")
    else:
        logger.info("Startup check: All critical environment variables are set")
    if not settings.identity_provider_api_url:
        logger.info(f"Roles resolved from ADMIN_USER_IDS ({len(settings.admin_ids)} admins)")


@app.on_event("startup")
async def initialize_database():
    """Create all tables if they do not exist yet."""
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


@app.get("/health")
async def health():
    return {"ok": True}


# ============================================================================
# INCLUDE ROUTERS
# ============================================================================
app.include_router(auth_router)
app.include_router(todos_router)
app.include_router(admin_router)
app.include_router(subscription_router)
app.include_router(webhook_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

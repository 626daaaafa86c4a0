from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import forms, products, users
from core.config import settings
from core.errors import register_error_handlers
from core.logging import configure_logging, get_logger
from core.middleware import RequestLoggingMiddleware
from core.uploads import RULES

# Initialize logging before anything else
configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", message=f"{settings.APP_NAME} starting up")

    for rule in RULES.values():
        if rule.unrestricted:
            log.warning(
                "upload_rule_unrestricted",
                rule=rule.name,
                max_files=rule.max_files,
                max_file_size=rule.max_file_size,
                message="No MIME allow-list configured for this upload rule",
            )

    yield

    log.info("shutdown", message=f"{settings.APP_NAME} shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    description="Form validation and upload gating for the Nite Store storefront and admin",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Register structured error handlers
register_error_handlers(app)

# Middleware (order matters: last added = first executed)
app.add_middleware(RequestLoggingMiddleware, slow_threshold_ms=settings.SLOW_REQUEST_MS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(users.router, prefix="/api/v1", tags=["users"])
app.include_router(products.router, prefix="/api/v1", tags=["products"])
app.include_router(forms.router, prefix="/api/v1", tags=["forms"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}


if __name__ == "__main__":
    import uvicorn

    log.info("server_config", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, debug=settings.APP_DEBUG)
    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,  # Disable uvicorn's default logging, we handle it
    )

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog
from app.core.config import settings
from app.core.exceptions import SwipeMatchError, ValidationError
from app.core.logging import configure_logging
from app.middleware.request_id import setup_request_id_middleware
from app.api.v1 import swipes

configure_logging(app_env=settings.app_env, level=settings.log_level)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Side Project Match API",
    description="Swipe-to-match backend pairing people with side projects",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_request_id_middleware(app)


@app.exception_handler(SwipeMatchError)
async def swipe_match_error_handler(request: Request, exc: SwipeMatchError) -> JSONResponse:
    """Render domain errors as {"error": {"kind", "message"}} with their status."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_failed",
        kind=exc.kind,
        status_code=exc.status_code,
        detail=exc.message,
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed ids, missing fields and unknown directions are rejected before any handler runs."""
    errors = exc.errors()
    fields = sorted({".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]) for err in errors})
    message = f"Invalid or missing fields: {', '.join(fields)}" if fields else "Invalid request"
    return await swipe_match_error_handler(request, ValidationError(message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback server-side and return a generic 500."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": {"kind": "internal_error", "message": "Internal server error"}},
    )


# Include API routers
app.include_router(swipes.router, prefix="/api/v1/swipes", tags=["Swipes"])
if settings.debug_routes_enabled:
    app.include_router(swipes.debug_router, prefix="/api/v1/swipes", tags=["Swipes (Debug)"])


@app.get("/healthz")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "version": "1.0.0"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "Side Project Match API", "docs": "/docs"}

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
import logging
from typing import Optional

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.core.responses import envelope, failed_response, get_status_text
from src.routers import health, users

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Resume Backend",
    description="APIs for user registration, login and user listing.",
    version="0.1.0",
    openapi_tags=[
        {"name": "health", "description": "Service health"},
        {"name": "users", "description": "User accounts and authentication"},
    ],
)

# Install CORS middleware early so that OPTIONS preflight is handled
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,  # keep True to allow cookies/Authorization headers if needed
    allow_methods=["*"],     # include OPTIONS automatically
    allow_headers=["*"],     # include requested custom headers
)


def _failure(message: str, status_code: int, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(failed_response(message, status_code)),
        headers=headers,
    )


# Exception handlers: every error body uses the failure envelope
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else get_status_text(exc.status_code)
    return _failure(message, exc.status_code, getattr(exc, "headers", None))

# Do not treat validation errors from OPTIONS as failures; keep 422 for other requests
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # If it's a CORS preflight (OPTIONS), respond with empty OK to avoid 400/422 from body validation
    if request.method.upper() == "OPTIONS":
        return JSONResponse(status_code=204, content=None)
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    return _failure(problems or get_status_text(422), 422)

# Catch-all for truly unhandled exceptions only
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _failure(get_status_text(500), 500)

# Routers
app.include_router(health.router)
app.include_router(users.router)

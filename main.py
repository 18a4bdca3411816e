from __future__ import annotations

import logging
from functools import lru_cache
from typing import Awaitable, Callable, Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import settings
from core.errors import ConfigurationError, InternalError, RateLimitedError, TokenServiceError
from core.rate_limit import SlidingWindowLimiter
from core.security import TokenService
from models.schemas import ErrorResponse, HealthResponse, TokenResponse, VerifyResponse

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("stream_token.api")

NO_CACHE = "no-cache, no-store, must-revalidate"
ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

app = FastAPI(title=settings.app_name, version=settings.app_version)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def catch_unexpected_errors(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
        return _error(500, InternalError.public_message)


# Added first so it sits inside CORSMiddleware and 500s still carry CORS headers.
app.add_middleware(BaseHTTPMiddleware, dispatch=catch_unexpected_errors)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    return TokenService(secret=settings.token_secret, ttl_seconds=settings.token_ttl_seconds)


@lru_cache(maxsize=1)
def get_limiter() -> SlidingWindowLimiter:
    return SlidingWindowLimiter(max_events=settings.max_tokens_per_minute)


@app.exception_handler(TokenServiceError)
async def token_service_error_handler(request: Request, exc: TokenServiceError) -> JSONResponse:
    if isinstance(exc, ConfigurationError):
        logger.error("TOKEN_SECRET environment variable is not set")
    elif isinstance(exc, InternalError):
        logger.error("Error generating token: %s", exc, exc_info=exc.__cause__)
    return _error(exc.status_code, exc.public_message)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, "Invalid query parameters")


@app.get("/api/token", response_model=TokenResponse, responses=ERROR_RESPONSES)
async def issue_token(
    request: Request,
    response: Response,
    user: Optional[str] = Query(None),
    service: TokenService = Depends(get_token_service),
    limiter: SlidingWindowLimiter = Depends(get_limiter),
) -> TokenResponse:
    client = request.client.host if request.client else "unknown"
    if not limiter.allow(client):
        logger.warning("Rate limited token request from %s", client)
        raise RateLimitedError(client)

    issued = service.issue(user)
    response.headers["Cache-Control"] = NO_CACHE
    return TokenResponse(token=issued.token, expiry=issued.expiry, user=issued.user)


@app.get("/api/token/verify", response_model=VerifyResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def verify_token(
    response: Response,
    token: str = Query(...),
    user: str = Query(...),
    expiry: int = Query(...),
    service: TokenService = Depends(get_token_service),
) -> VerifyResponse:
    response.headers["Cache-Control"] = NO_CACHE
    return VerifyResponse(valid=service.verify(token, user, expiry))


@app.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(version=settings.app_version)

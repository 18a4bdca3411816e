from __future__ import annotations


class TokenServiceError(Exception):
    """Base exception for all token service errors."""

    status_code: int = 500
    public_message: str = "Internal server error"


class ConfigurationError(TokenServiceError):
    status_code = 500
    public_message = "Server configuration error: TOKEN_SECRET not set"


class ValidationError(TokenServiceError):
    status_code = 400
    public_message = "Invalid user parameter"


class InternalError(TokenServiceError):
    status_code = 500
    public_message = "Internal server error while generating token"


class RateLimitedError(TokenServiceError):
    status_code = 429
    public_message = "Too many token requests"

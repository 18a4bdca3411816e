from __future__ import annotations

from pydantic import BaseModel


class TokenResponse(BaseModel):
    token: str
    expiry: int
    user: str


class VerifyResponse(BaseModel):
    valid: bool


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool = True
    version: str

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from core.errors import ConfigurationError, InternalError, ValidationError

logger = logging.getLogger("stream_token.security")

DEFAULT_USER = "anonymous"
MAX_USER_LENGTH = 100
TOKEN_TTL_SECONDS = 60


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expiry: int
    user: str


def canonical_payload(user: str, expiry: int) -> str:
    return f"user={user}&exp={expiry}"


def sign(secret: str, payload: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def _is_utf8_text(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_user(user: object) -> str:
    if not _is_utf8_text(user) or not 0 < len(user) <= MAX_USER_LENGTH:  # type: ignore[arg-type]
        raise ValidationError(f"user must be 1-{MAX_USER_LENGTH} characters of UTF-8 text")
    return user  # type: ignore[return-value]


class TokenService:
    def __init__(
        self,
        secret: Optional[str],
        ttl_seconds: int = TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret or None
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def issue(self, user: Optional[str] = None) -> IssuedToken:
        secret = self._require_secret()
        user = validate_user(DEFAULT_USER if user is None else user)

        expiry = int(self._clock()) + self.ttl_seconds
        try:
            signature = sign(secret, canonical_payload(user, expiry))
        except Exception as exc:
            raise InternalError("failed to sign token payload") from exc

        logger.info("Generated token for user=%s expiry=%s", user, expiry)
        return IssuedToken(token=signature, expiry=expiry, user=user)

    def verify(self, token: object, user: object, expiry: object, now: Optional[int] = None) -> bool:
        # Bad signature, expiry and malformed input all look the same to the caller.
        secret = self._require_secret()
        if now is None:
            now = int(self._clock())

        if not _is_utf8_text(token) or not _is_utf8_text(user):
            return False
        if not isinstance(expiry, int) or isinstance(expiry, bool):
            return False

        expected = sign(secret, canonical_payload(user, expiry))  # type: ignore[arg-type]
        signature_ok = hmac.compare_digest(expected.encode("ascii"), token.encode("utf-8"))  # type: ignore[union-attr]
        valid = signature_ok and now <= expiry
        logger.debug("Verified token for user=%s valid=%s", user, valid)
        return valid

    def _require_secret(self) -> str:
        if self._secret is None:
            raise ConfigurationError("TOKEN_SECRET is not configured")
        return self._secret

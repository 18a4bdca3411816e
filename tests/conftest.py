from typing import Iterator, Optional

import pytest
from fastapi.testclient import TestClient

from core.rate_limit import SlidingWindowLimiter
from core.security import TokenService
from main import app, get_limiter, get_token_service

SECRET = "test-secret"
T0 = 1700000000


def make_client(
    secret: Optional[str] = SECRET,
    max_events: int = 0,
    raise_server_exceptions: bool = True,
) -> TestClient:
    service = TokenService(secret=secret, clock=lambda: T0)
    limiter = SlidingWindowLimiter(max_events=max_events)
    app.dependency_overrides[get_token_service] = lambda: service
    app.dependency_overrides[get_limiter] = lambda: limiter
    return TestClient(app, raise_server_exceptions=raise_server_exceptions)


@pytest.fixture(autouse=True)
def _clear_overrides() -> Iterator[None]:
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client() -> TestClient:
    return make_client()

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

from core.security import IssuedToken


def build_stream_url(
    base_url: str,
    endpoint_path: str,
    token: IssuedToken,
    channel: Optional[str] = None,
) -> str:
    params: list[tuple[str, str]] = []
    if channel:
        params.append(("channel", channel))
    params.extend(
        [
            ("token", token.token),
            ("user", token.user),
            ("expiry", str(token.expiry)),
        ]
    )
    url = base_url.rstrip("/")
    if endpoint_path:
        url += "/" + endpoint_path.lstrip("/")
    return f"{url}?{urlencode(params)}"

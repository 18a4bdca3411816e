from __future__ import annotations

import random
import string
import time
from typing import Optional

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def anonymous_user_id(now: Optional[float] = None, rng: Optional[random.Random] = None) -> str:
    """Return a throwaway listener id like ``anon_1700000000000_k3j9x0a1b2c``."""
    millis = int((time.time() if now is None else now) * 1000)
    rng = rng or random.Random()
    suffix = _to_base36(rng.getrandbits(64))[:13]
    return f"anon_{millis}_{suffix}"

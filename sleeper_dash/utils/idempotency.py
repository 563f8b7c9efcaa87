# sleeper_dash/utils/idempotency.py
import hashlib
import inspect
import os
import threading
import time
from functools import wraps
from typing import Any, Dict, Tuple

from fastapi import HTTPException, Request

# Per-process replay cache: key -> (stored_at, response)
_store: Dict[str, Tuple[float, Any]] = {}
_lock = threading.Lock()

REPLAY_TTL_SECONDS = float(os.getenv("IDEMPOTENCY_TTL_SECONDS", "3600"))


def reset_idempotency_store() -> None:
    with _lock:
        _store.clear()


def _prune_expired(now: float) -> None:
    # caller holds _lock
    for key in [k for k, (stored_at, _) in _store.items() if now - stored_at >= REPLAY_TTL_SECONDS]:
        del _store[key]


async def _fingerprint(request: Request) -> str:
    """method | path | query | sha256(body). Starlette caches the body, so re-reading is safe."""
    body = await request.body()
    digest = hashlib.sha256(body or b"").hexdigest()
    return f"{request.method.upper()}|{request.url.path}|{request.url.query or ''}|{digest}"


def _find_request(args, kwargs) -> Request | None:
    candidate = kwargs.get("request")
    if isinstance(candidate, Request):
        return candidate
    return next((a for a in args if isinstance(a, Request)), None)


def with_idempotency(key_prefix: str):
    """
    Replay guard for write endpoints.

    The caller sends an `Idempotency-Key` header; a retry with the same key and
    the same request fingerprint gets the first successful response back instead
    of running the handler again. Errors are not cached. With TESTING=1 a
    missing header falls back to a fixed per-endpoint key.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request = _find_request(args, kwargs)
            if request is None:
                raise HTTPException(status_code=500, detail="Request object not found")

            header_key = request.headers.get("Idempotency-Key")
            if not header_key and os.getenv("TESTING", "0") == "1":
                header_key = f"test-{key_prefix}"
            if not header_key:
                raise HTTPException(status_code=400, detail="Missing Idempotency-Key header")

            cache_key = f"{key_prefix}::{header_key}::{await _fingerprint(request)}"
            now = time.monotonic()
            with _lock:
                hit = _store.get(cache_key)
                if hit is not None and now - hit[0] < REPLAY_TTL_SECONDS:
                    return hit[1]

            result = await func(*args, **kwargs) if inspect.iscoroutinefunction(func) else func(*args, **kwargs)

            with _lock:
                _prune_expired(time.monotonic())
                _store[cache_key] = (now, result)
            return result

        return wrapper

    return decorator

from __future__ import annotations

import os
import time
from typing import Callable, TypeVar

from ..utils.logging import get_logger
from .base import AIConfigError

T = TypeVar("T")
logger = get_logger("feedrelay.ai.retry")


def _env_override(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, raw)
        return default


def with_retries(fn: Callable[[], T], *, retries: int = 1, backoff: float = 1.5) -> T:
    """Call ``fn`` until it succeeds or ``retries`` extra attempts are used.

    ``AI_RETRIES`` and ``AI_BACKOFF`` override the defaults. Configuration
    errors are not retried.
    """
    retries = _env_override("AI_RETRIES", retries, int)
    backoff = _env_override("AI_BACKOFF", backoff, float)
    last_exc: BaseException | None = None
    for attempt in range(retries + 1):
        try:
            return fn()
        except AIConfigError:
            raise
        except Exception as exc:  # noqa: BLE001
            last_exc = exc
            if attempt >= retries:
                break
            sleep_s = backoff ** attempt
            logger.warning("AI call failed (attempt %s/%s): %s; retrying in %.1fs", attempt + 1, retries + 1, exc, sleep_s)
            time.sleep(sleep_s)
    assert last_exc is not None
    raise last_exc

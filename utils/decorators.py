from __future__ import annotations
import time
from functools import wraps
from utils.logger import get_logger

log = get_logger(__name__)

def timed(fn):
    """Log wall time of each call, tagged with whether it raised."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        outcome = "failed"
        try:
            result = fn(*args, **kwargs)
            outcome = "ok"
            return result
        finally:
            ms = (time.perf_counter() - start) * 1000
            log.info(f"{fn.__qualname__} {outcome} in {ms:.1f}ms")
    return wrapper

import logging
import time
from typing import Callable

import httpx

from provisioner.errors import ProbeError, ReadinessTimeout

logger = logging.getLogger(__name__)


def wait_until(
    probe: Callable[[], bool],
    *,
    max_attempts: int,
    interval: float,
    description: str = "service",
    timeout_message: str | None = None,
    on_retry: Callable[[int, int], None] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Call probe() until it returns True, at most max_attempts times, interval seconds apart.

    Returns the attempt number that succeeded. Raises ReadinessTimeout once the
    attempts are used up. A probe raising ProbeError counts as not ready.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            ready = probe()
        except ProbeError as e:
            logger.debug("%s probe failed: %s", description, e)
            ready = False

        if ready:
            logger.debug("%s ready after %d attempt(s)", description, attempt)
            return attempt

        if attempt < max_attempts:
            if on_retry:
                on_retry(attempt, max_attempts)
            sleep(interval)

    raise ReadinessTimeout(description, max_attempts, timeout_message)


def http_responds(url: str, timeout: float = 2) -> bool:
    """True if anything answers HTTP at url, whatever the status code."""
    try:
        httpx.get(url, timeout=timeout)
        return True
    except httpx.TransportError as e:
        raise ProbeError(str(e)) from e

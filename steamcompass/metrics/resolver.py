# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
from typing import Any, Iterable, List, Optional

from steamcompass.config import MIN_CANDIDATE_LENGTH, RESOLVER_ATTEMPT_DELAY, SIGNAL_TIMEOUT
from steamcompass.models.signals import Signal, SignalFetcher, Success, Unavailable

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
async def fetch_signal(fetch_fn: SignalFetcher, key: Any, timeout: Optional[float] = SIGNAL_TIMEOUT) -> Signal:
    """
    Calls one provider with an explicit timeout and settles to a Signal.
    Timeouts and provider exceptions become Unavailable; nothing propagates.
    """
    try:
        result = await asyncio.wait_for(fetch_fn(key), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"⚠️ [fetch_signal] Provider timed out after {timeout}s for '{key}'")
        return Unavailable(f"timeout after {timeout}s")
    except Exception as e:
        logger.warning(f"⚠️ [fetch_signal] Provider failed for '{key}': {type(e).__name__}: {e}")
        return Unavailable(f"{type(e).__name__}: {e}")

    if isinstance(result, (Success, Unavailable)):
        return result
    if result is None:
        return Unavailable("no result")
    return Success(result)


async def resolve(
    candidates: Iterable[str],
    fetch_fn: SignalFetcher,
    delay_seconds: float = RESOLVER_ATTEMPT_DELAY,
    timeout: Optional[float] = SIGNAL_TIMEOUT,
) -> Signal:
    """
    Tries each name candidate in order against a name-keyed source and returns
    the first Success. Candidates that are too short to search are skipped.
    A politeness delay separates consecutive attempts against the source.
    """
    tried: List[str] = []
    for candidate in candidates:
        if not candidate or len(candidate) < MIN_CANDIDATE_LENGTH:
            logger.debug(f"[resolve] Skipping short candidate '{candidate}'")
            continue

        if tried and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)

        tried.append(candidate)
        result = await fetch_signal(fetch_fn, candidate, timeout=timeout)
        if isinstance(result, Success):
            if len(tried) > 1:
                logger.info(f"✅ [resolve] Matched on variant '{candidate}' after {len(tried)} attempts")
            return result
        logger.debug(f"[resolve] No match for '{candidate}': {result.reason}")

    if not tried:
        return Unavailable("no searchable name candidates")
    return Unavailable(f"no match for any of {tried}")

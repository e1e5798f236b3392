"""
Scrape coordinator — fan out to every platform adapter, fan the results back in.

Per-platform policy, composed in this order:
  1. rate limit  → wait until MIN_INTERVAL has passed since the last call to the
                   same platform (process-wide state, shared across requests)
  2. retry       → up to N attempts, linear backoff (unit × attempt) in between
  3. timeout     → the retrying call races a deadline; the loser is abandoned
  4. isolation   → any error surviving 1-3 becomes a zero-valued placeholder

All platform slots run concurrently and the coordinator waits for every slot to
settle. A run always returns exactly one PlatformSignals per platform, even when
every adapter fails.
"""
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Callable, Dict, Optional, Type

from verifyit.config import (
    MOCK_SCRAPING,
    PLATFORMS,
    SCRAPE_MIN_INTERVAL_MS,
    SCRAPE_RETRY_ATTEMPTS,
    SCRAPE_RETRY_BACKOFF_MS,
    SCRAPE_TIMEOUT_SECONDS,
)
from verifyit.models.lead import LeadData
from verifyit.models.signals import PlatformSignals, empty_signals
from verifyit.scraping.base import PlatformAdapter, build_adapters

logger = logging.getLogger('scraping.coordinator')


class ScrapeTimeoutError(Exception):
    """Raised when a platform's total allotted time elapses."""
    def __init__(self, platform, timeout):
        self.platform = platform
        self.timeout = timeout
        super().__init__(f"{platform} scrape timeout after {timeout:g}s")


# ── Rate limiting ─────────────────────────────────────────────────────────────

class RateLimiter:
    """
    Minimum interval between calls to the same key.

    Each wait() reserves the next free slot for its key under a lock, then sleeps
    outside the lock, so concurrent callers for one platform are serialized while
    different platforms never block each other.
    """

    def __init__(self, min_interval: float, clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_call: Dict[str, float] = {}

    def wait(self, key: str) -> float:
        """Block until `key` may be called again. Returns the seconds waited."""
        with self._lock:
            now = self._clock()
            last = self._last_call.get(key)
            slot = now if last is None else max(now, last + self.min_interval)
            self._last_call[key] = slot
        delay = slot - now
        if delay > 0:
            logger.debug("Rate limit: %s waits %.2fs", key, delay)
            self._sleep(delay)
        return delay

    def reset(self):
        with self._lock:
            self._last_call.clear()


# ── Retry + deadline wrappers ────────────────────────────────────────────────

def call_with_retry(func: Callable, attempts: int = SCRAPE_RETRY_ATTEMPTS,
                    backoff: float = SCRAPE_RETRY_BACKOFF_MS / 1000.0,
                    cancelled: Optional[threading.Event] = None, name: str = ''):
    """
    Call func() up to `attempts` times, sleeping backoff × attempt between tries.

    Re-raises the last error when every attempt fails. Once `cancelled` is set
    no further attempt is started.
    """
    cancelled = cancelled or threading.Event()
    last_error = None
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except Exception as e:
            last_error = e
            if attempt == attempts:
                break
            delay = backoff * attempt
            logger.info("%s attempt %d/%d failed (%s), retrying in %.2fs",
                        name or 'call', attempt, attempts, e, delay,
                        extra={'platform': name or None, 'attempt': attempt})
            if cancelled.wait(delay):
                logger.info("%s retries abandoned after timeout", name or 'call')
                break
    raise last_error


def call_with_timeout(func: Callable, timeout: float, platform: str,
                      on_timeout: Optional[Callable[[], None]] = None):
    """
    Race func() against a deadline. Raises ScrapeTimeoutError if the deadline
    wins; the still-running call is abandoned and its late result discarded.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f'scrape-{platform}')
    future = executor.submit(func)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeoutError:
        future.cancel()
        if on_timeout:
            on_timeout()
        raise ScrapeTimeoutError(platform, timeout) from None
    finally:
        executor.shutdown(wait=False)


# ── Coordinator ───────────────────────────────────────────────────────────────

# Process-wide: concurrent verifications share the per-platform interval
_rate_limiter = RateLimiter(SCRAPE_MIN_INTERVAL_MS / 1000.0)


def get_rate_limiter() -> RateLimiter:
    return _rate_limiter


def default_registry() -> Dict[str, Type[PlatformAdapter]]:
    if MOCK_SCRAPING:
        from verifyit.scraping.mock_adapters import MOCK_ADAPTERS
        return MOCK_ADAPTERS
    from verifyit.scraping.adapters import ADAPTERS
    return ADAPTERS


class ScrapeCoordinator:
    """
    Runs all platform adapters for one lead and returns a complete signal map.

    Usage:
        coordinator = ScrapeCoordinator()
        signals = coordinator.run(lead, timeout=60)
    """

    def __init__(
        self,
        adapters: Optional[Dict[str, PlatformAdapter]] = None,
        rate_limiter: Optional[RateLimiter] = None,
        timeout: float = SCRAPE_TIMEOUT_SECONDS,
        attempts: int = SCRAPE_RETRY_ATTEMPTS,
        backoff: float = SCRAPE_RETRY_BACKOFF_MS / 1000.0,
    ):
        self.adapters = adapters if adapters is not None else build_adapters(default_registry(), PLATFORMS)
        self.rate_limiter = rate_limiter or get_rate_limiter()
        self.timeout = timeout
        self.attempts = attempts
        self.backoff = backoff

    def run(self, lead: LeadData, timeout: Optional[float] = None) -> Dict[str, PlatformSignals]:
        """Scrape every platform concurrently; never raises for platform failures."""
        timeout = self.timeout if timeout is None else timeout
        if not self.adapters:
            return {}

        started = time.monotonic()
        results: Dict[str, PlatformSignals] = {}
        with ThreadPoolExecutor(max_workers=len(self.adapters), thread_name_prefix='scrape-slot') as pool:
            futures = {
                pool.submit(self._scrape_platform, platform, adapter, lead, timeout): platform
                for platform, adapter in self.adapters.items()
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()

        with_data = sum(1 for s in results.values() if s.has_data)
        logger.info("Scraped %d/%d platforms with data for %s @ %s in %.1fs",
                    with_data, len(results), lead.name, lead.company, time.monotonic() - started)

        # Stable key order regardless of settle order
        return {platform: results[platform] for platform in self.adapters}

    def _scrape_platform(self, platform: str, adapter: PlatformAdapter,
                         lead: LeadData, timeout: float) -> PlatformSignals:
        """One platform slot: rate limit → timeout(retry(adapter)) → isolate."""
        cancelled = threading.Event()
        try:
            self.rate_limiter.wait(platform)
            result = call_with_timeout(
                lambda: call_with_retry(
                    lambda: adapter.scrape(lead),
                    attempts=self.attempts,
                    backoff=self.backoff,
                    cancelled=cancelled,
                    name=platform,
                ),
                timeout,
                platform,
                on_timeout=cancelled.set,
            )
            if not isinstance(result, PlatformSignals):
                raise TypeError(f"{platform} adapter returned {type(result).__name__}, expected PlatformSignals")
            return result
        except ScrapeTimeoutError as e:
            logger.warning("Platform %s timed out, using empty signals: %s", platform, e,
                           extra={'platform': platform})
        except Exception as e:
            logger.warning("Platform %s failed, using empty signals: %s: %s",
                           platform, type(e).__name__, e, extra={'platform': platform})
        return empty_signals(platform)


def scrape_all_platforms(lead: LeadData, timeout: Optional[float] = None) -> Dict[str, PlatformSignals]:
    """Scrape every configured platform for one lead with the default policies."""
    return ScrapeCoordinator().run(lead, timeout=timeout)

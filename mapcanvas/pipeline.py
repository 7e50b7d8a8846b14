"""
Viewport Pipeline

Turns a stream of viewport changes into map data updates:

  1. Debounce: bursts of viewport changes collapse into one fetch
  2. Generation: every fetch that goes out takes a token from a monotonic counter
  3. Skip: an identical bbox to the last one requested is not refetched
  4. Cool-down: after a rate-limit answer, no requests for a while
  5. Fetch: collector (cache, Overpass or country store)
  6. Apply: only results whose token is still the latest reach the callback
"""

import threading
import time
from typing import Callable, Optional
from loguru import logger

from .config import get_config, FetchConfig
from .collectors.osm.collector import MapDataCollector, FetchResult
from .geometry.bbox import BoundingBox
from .models import FetchOutcome


class RequestGeneration:
    """Monotonic request counter; only the newest token is current"""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def current(self) -> int:
        with self._lock:
            return self._value

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._value


class ViewportPipeline:
    """
    Fetch map data for the latest viewport

    Usage:
        pipeline = ViewportPipeline(MapDataCollector(), on_result=print)
        pipeline.request(bbox, zoom=12)    # debounced
        result = pipeline.fetch_now(bbox, zoom=12)
    """

    def __init__(
        self,
        collector: MapDataCollector,
        on_result: Optional[Callable[[FetchResult], None]] = None,
        fetch_config: Optional[FetchConfig] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.collector = collector
        self.on_result = on_result
        self.fetch_config = fetch_config or get_config().fetch
        self.generation = RequestGeneration()
        self._clock = clock
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._last_key: Optional[str] = None
        self._rate_limited_until = 0.0

    def request(self, bbox: BoundingBox, zoom: float):
        """Schedule a fetch after the debounce delay; a newer call replaces it"""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.fetch_config.debounce_s, self.fetch_now, args=(bbox, zoom))
            self._timer.daemon = True
            self._timer.start()

    def cancel(self):
        """Drop a pending debounced fetch"""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def fetch_now(self, bbox: BoundingBox, zoom: float) -> FetchResult:
        """
        Fetch immediately and apply the result if it is still the latest

        Returns:
            FetchResult; outcome is STALE when a newer request superseded it
        """
        key = bbox.cache_key()

        with self._state_lock:
            if key == self._last_key:
                logger.debug(f"Bbox {key} already requested, skipping")
                return FetchResult(FetchOutcome.SKIPPED, bbox_key=key)

            remaining = self._rate_limited_until - self._clock()
            if remaining > 0:
                logger.warning(f"Rate limited. Try again in {int(remaining) + 1}s")
                return FetchResult(FetchOutcome.RATE_LIMITED, bbox_key=key, detail="cool-down")

            # Requests that never reach the collector do not supersede one in flight
            token = self.generation.next()
            self._last_key = key

        result = self.collector.fetch(bbox, zoom)

        with self._state_lock:
            if result.outcome == FetchOutcome.RATE_LIMITED:
                self._rate_limited_until = self._clock() + self.fetch_config.rate_limit_cooldown_s
                logger.warning(
                    f"Rate limited by Overpass API. Blocked for {self.fetch_config.rate_limit_cooldown_s:.0f} seconds."
                )
            if not result.ok and self._last_key == key:
                # Let the same viewport be retried once the provider recovers
                self._last_key = None

        if not self.generation.is_current(token):
            logger.info(f"Ignoring stale response for bbox {key}")
            return FetchResult(FetchOutcome.STALE, data=result.data, bbox_key=key, mode=result.mode)

        if result.data is not None and self.on_result is not None:
            self.on_result(result)
        return result

"""
Overpass API client

Handles communication with Overpass API including:
- Rate limiting
- Retry logic
- Error handling, with a distinct error per failure outcome
"""

import time
import requests
from typing import Dict, Any, Optional
from loguru import logger

from ...config import get_config, APIConfig
from ...models import FetchOutcome


class OverpassError(RuntimeError):
    """Overpass request failed"""
    outcome = FetchOutcome.TRANSPORT_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(OverpassError):
    """HTTP 429: the server asks us to back off"""
    outcome = FetchOutcome.RATE_LIMITED


class OverpassTimeoutError(OverpassError):
    """Client timeout or HTTP 504 after all retries"""
    outcome = FetchOutcome.TIMEOUT


class QueryTooLargeError(OverpassError):
    """HTTP 400: Overpass rejected the query, usually an area too large"""
    outcome = FetchOutcome.QUERY_TOO_LARGE


class OverpassTransportError(OverpassError):
    """Any other network, HTTP or decoding failure"""
    outcome = FetchOutcome.TRANSPORT_ERROR


class OverpassAPIClient:
    """Client for interacting with Overpass API"""

    def __init__(self, api_config: Optional[APIConfig] = None, session: Optional[requests.Session] = None):
        self.config = api_config or get_config().api
        self.overpass_url = self.config.overpass_url
        self.timeout = self.config.request_timeout
        self.session = session or requests.Session()
        self._last_request_time = 0.0
        self._min_request_interval = self.config.min_request_interval

    def _rate_limit(self):
        """Ensure we don't exceed rate limits"""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()

    def query(self, query: str, retry_delay: Optional[float] = None) -> Dict[str, Any]:
        """
        Execute Overpass API query with retry logic

        Timeouts, HTTP 504 and connection errors are retried with a delay
        that grows with each attempt. HTTP 429 and 400 are not retried.

        Args:
            query: Overpass QL query string
            retry_delay: Initial delay between retries (increases with attempts)

        Returns:
            JSON response from Overpass API

        Raises:
            OverpassError: subclass matching the failure outcome
        """
        delay = self.config.retry_delay if retry_delay is None else retry_delay
        max_retries = self.config.max_retries

        headers = {
            "User-Agent": self.config.user_agent,
            "Content-Type": "application/x-www-form-urlencoded"
        }

        for attempt in range(max_retries):
            last_attempt = attempt == max_retries - 1
            self._rate_limit()
            try:
                response = self.session.post(
                    self.overpass_url,
                    data={"data": query},
                    headers=headers,
                    timeout=self.timeout
                )
                response.raise_for_status()
                return response.json()
            except requests.exceptions.Timeout as e:
                if last_attempt:
                    logger.error(f"Overpass timeout after {max_retries} attempts")
                    raise OverpassTimeoutError(f"Overpass API timeout after {max_retries} attempts") from e
                wait_time = delay * (attempt + 1)
                logger.warning(f"Overpass timeout (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                time.sleep(wait_time)
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status == 429:
                    logger.warning("Rate limited by Overpass API")
                    raise RateLimitedError("Overpass API rate limit exceeded", status) from e
                if status == 400:
                    logger.warning("Overpass API rejected query (area too large)")
                    raise QueryTooLargeError("Overpass API rejected the query", status) from e
                if status == 504:
                    if last_attempt:
                        logger.error(f"Overpass gateway timeout after {max_retries} attempts")
                        raise OverpassTimeoutError(
                            f"Overpass API gateway timeout after {max_retries} attempts", status
                        ) from e
                    wait_time = delay * (attempt + 1)
                    logger.warning(f"Overpass 504 (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                    time.sleep(wait_time)
                else:
                    logger.error(f"Overpass API failed: HTTP {status}")
                    raise OverpassTransportError(f"Overpass API HTTP error {status}", status) from e
            except ValueError as e:
                # Body was not JSON (Overpass reports some errors as HTML)
                logger.error(f"Overpass returned an undecodable response: {e}")
                raise OverpassTransportError(f"Overpass API returned invalid JSON: {e}") from e
            except requests.exceptions.RequestException as e:
                if last_attempt:
                    logger.error(f"Overpass request failed after {max_retries} attempts: {e}")
                    raise OverpassTransportError(
                        f"Overpass API request failed after {max_retries} attempts: {e}"
                    ) from e
                logger.warning(f"Overpass request failed (attempt {attempt + 1}): {e}")
                time.sleep(delay * (attempt + 1))

        raise OverpassTransportError("Overpass API query was not attempted (max_retries < 1)")

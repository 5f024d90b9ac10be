"""
Transaction Source Client - fetches the seed payload

The seed source is a static JSON document: a top-level array of
transaction-shaped objects.

Retry policy:
- Connection errors, timeouts and 5xx responses are retried with
  exponential backoff (1s, 2s, 4s, ...) up to max_retries attempts
- 4xx responses and malformed bodies fail immediately

Usage:
    from services.transaction_source_client import TransactionSourceClient

    client = TransactionSourceClient()
    response = client.fetch()
    for item in response.data:
        print(item['title'])
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger('transaction_source')


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
INITIAL_BACKOFF_SECONDS = 1.0
BACKOFF_MULTIPLIER = 2.0

USER_AGENT = "SalesDashboardAPI/1.0 (seed loader)"


@dataclass
class SourceResponse:
    """Wrapper for a successful source fetch."""
    data: List[Dict[str, Any]]
    url: str
    status_code: int
    duration_seconds: float
    retry_count: int = 0


class SeedFetchError(Exception):
    """The seed source could not be fetched or did not return a JSON array."""

    def __init__(self, message: str, url: str = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class TransactionSourceClient:
    """
    HTTP client for the seed source.

    Example:
        client = TransactionSourceClient(url="https://example.com/tx.json", timeout=10)
        items = client.fetch().data
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        if url is None or timeout is None or max_retries is None:
            config = _app_config()
            url = url or config.get('SEED_SOURCE_URL')
            timeout = timeout if timeout is not None else config.get('SEED_TIMEOUT_SECONDS', DEFAULT_TIMEOUT_SECONDS)
            max_retries = max_retries if max_retries is not None else config.get('SEED_MAX_RETRIES', DEFAULT_MAX_RETRIES)

        if not url:
            raise SeedFetchError("SEED_SOURCE_URL is not configured")

        self.url = url
        self.timeout = float(timeout)
        self.max_retries = max(1, int(max_retries))
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})

    def fetch(self) -> SourceResponse:
        """
        Fetch and decode the seed payload.

        Returns:
            SourceResponse whose `data` is the decoded JSON array.

        Raises:
            SeedFetchError: after the last failed attempt, or immediately for
                4xx responses and non-array bodies.
        """
        start_time = time.time()

        for attempt in range(self.max_retries):
            try:
                response = self._session.get(self.url, timeout=self.timeout)
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                self._backoff_or_raise(attempt, f"request failed: {e}")
                continue
            except requests.exceptions.RequestException as e:
                raise SeedFetchError(f"Seed source request failed: {e}", url=self.url)

            if response.status_code >= 500:
                self._backoff_or_raise(
                    attempt,
                    f"server error {response.status_code}",
                    status_code=response.status_code,
                )
                continue

            if response.status_code >= 400:
                raise SeedFetchError(
                    f"Seed source returned HTTP {response.status_code}",
                    url=self.url,
                    status_code=response.status_code,
                )

            try:
                data = response.json()
            except ValueError as e:
                raise SeedFetchError(
                    f"Seed source returned invalid JSON: {e}",
                    url=self.url,
                    status_code=response.status_code,
                )

            if not isinstance(data, list):
                raise SeedFetchError(
                    f"Seed source returned {type(data).__name__}, expected a JSON array",
                    url=self.url,
                    status_code=response.status_code,
                )

            duration = time.time() - start_time
            logger.info(
                f"Fetched {len(data)} records from {self.url} in {duration:.2f}s "
                f"(attempts={attempt + 1})"
            )
            return SourceResponse(
                data=data,
                url=self.url,
                status_code=response.status_code,
                duration_seconds=duration,
                retry_count=attempt,
            )

        # Unreachable: the last attempt either returns or raises
        raise SeedFetchError("Seed source fetch exhausted retries", url=self.url)

    def _backoff_or_raise(self, attempt: int, reason: str, status_code: Optional[int] = None) -> None:
        if attempt >= self.max_retries - 1:
            raise SeedFetchError(
                f"Seed source fetch failed after {self.max_retries} attempts: {reason}",
                url=self.url,
                status_code=status_code,
            )
        backoff = INITIAL_BACKOFF_SECONDS * (BACKOFF_MULTIPLIER ** attempt)
        logger.warning(
            f"Seed fetch attempt {attempt + 1}/{self.max_retries} failed: {reason}. "
            f"Retrying in {backoff}s"
        )
        time.sleep(backoff)


def _app_config() -> Dict[str, Any]:
    from flask import current_app, has_app_context
    from config import Config

    if has_app_context():
        return current_app.config
    return {
        'SEED_SOURCE_URL': Config.SEED_SOURCE_URL,
        'SEED_TIMEOUT_SECONDS': Config.SEED_TIMEOUT_SECONDS,
        'SEED_MAX_RETRIES': Config.SEED_MAX_RETRIES,
    }

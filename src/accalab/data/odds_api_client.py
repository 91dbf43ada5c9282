"""Thin client for The Odds API with request pacing."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Dict, List, Optional

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from accalab.accumulators.types import Selection
from accalab.config import get_settings
from accalab.data.ingestion import mock_selections, parse_odds_response

logger = logging.getLogger(__name__)

MOCK_SPORTS = ["soccer_epl", "basketball_nba"]


def _retry_log(retry_state: RetryCallState) -> None:  # pragma: no cover - logging helper
    attempt = retry_state.attempt_number
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("Odds API retry attempt %d due to %s", attempt, exception)


class RateLimiter:
    """Minimum spacing between requests plus a monthly request budget.

    A ``monthly_limit`` of 0 disables the budget.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        monthly_limit: int = 500,
        *,
        time_fn: Optional[Callable[[], float]] = None,
        sleep_fn: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.min_interval = min_interval
        self.monthly_limit = monthly_limit
        self.request_count = 0
        self._last_request: Optional[float] = None
        self._time = time_fn or time.monotonic
        self._sleep = sleep_fn or time.sleep

    def wait_for_slot(self) -> None:
        if self.monthly_limit > 0 and self.request_count >= self.monthly_limit:
            raise RuntimeError("Monthly API limit reached")
        if self._last_request is not None:
            elapsed = self._time() - self._last_request
            if elapsed < self.min_interval:
                self._sleep(self.min_interval - elapsed)
        self._last_request = self._time()

    def record_request(self) -> None:
        self.request_count += 1


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    """Return the process-wide limiter shared by every client."""

    settings = get_settings()
    return RateLimiter(settings.odds_api_min_interval_seconds, settings.odds_api_monthly_limit)


class OddsApiClient:
    """Fetch head-to-head prices and turn them into selections.

    Without an API key the client serves the bundled mock slate instead of
    calling the network.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.settings = get_settings()
        self.api_key = api_key if api_key is not None else self.settings.odds_api_key
        if not self.api_key:
            logger.warning("ODDS_API_KEY not set. Using mock data mode.")
        self.base_url = (base_url or self.settings.odds_api_base_url).rstrip("/")
        self.rate_limiter = rate_limiter or get_rate_limiter()
        self._client = client or httpx.Client(timeout=30.0)

    @property
    def mock_mode(self) -> bool:
        return not self.api_key

    def __enter__(self) -> "OddsApiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @retry(
        retry=retry_if_exception_type(httpx.HTTPError),
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        after=_retry_log,
        reraise=True,
    )
    def _request(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        self.rate_limiter.wait_for_slot()
        query = {"apiKey": self.api_key, **(params or {})}
        response = self._client.get(f"{self.base_url}{path}", params=query)
        self.rate_limiter.record_request()
        response.raise_for_status()
        return response.json()

    def fetch_odds(self, sport: Optional[str] = None) -> List[Selection]:
        """Return selections for every listed game of ``sport``."""

        if self.mock_mode:
            return mock_selections()
        sport = sport or self.settings.default_sport
        payload = self._request(
            f"/sports/{sport}/odds",
            {
                "regions": self.settings.odds_api_regions,
                "markets": self.settings.odds_api_markets,
                "oddsFormat": "american",
            },
        )
        selections = parse_odds_response(payload)
        logger.info("Fetched %d selections for %s", len(selections), sport)
        return selections

    def get_available_sports(self) -> List[str]:
        if self.mock_mode:
            return list(MOCK_SPORTS)
        payload = self._request("/sports")
        return [sport["key"] for sport in payload]

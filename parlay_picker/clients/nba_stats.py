from __future__ import annotations

import logging
import time
from datetime import date, datetime
from typing import Any

from curl_cffi import requests as curl_requests

from parlay_picker.clients.logging import log_request_end, log_request_error, log_request_start
from parlay_picker.core.config import settings
from parlay_picker.core.errors import StatsUnavailableError

logger = logging.getLogger(__name__)

SOURCE_NAME = "nba_stats"
GAMELOGS_ENDPOINT = "playergamelogs"


def _browser_headers() -> dict[str, str]:
    # stats.nba.com drops requests that don't look like they came from nba.com
    return {
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-US,en;q=0.9",
        "Origin": settings.nba_stats_origin,
        "Referer": settings.nba_stats_referer,
        "User-Agent": settings.nba_stats_user_agent,
    }


def _get_json(url: str, params: dict[str, Any], attempt: int) -> dict[str, Any]:
    log_request_start(SOURCE_NAME, url, attempt=attempt)
    started = time.monotonic()
    response = curl_requests.get(
        url,
        params=params,
        headers=_browser_headers(),
        timeout=settings.nba_stats_timeout_seconds,
        impersonate=settings.nba_stats_impersonate,
        proxy=settings.nba_stats_proxy or None,
    )
    response.raise_for_status()
    payload = response.json()
    log_request_end(
        SOURCE_NAME,
        url,
        status_code=response.status_code,
        elapsed_ms=(time.monotonic() - started) * 1000.0,
        attempt=attempt,
    )
    return payload


def get_stats_endpoint(endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
    """GET one stats.nba.com endpoint, retrying with a linearly growing pause.

    Raises ``StatsUnavailableError`` once every attempt has failed.
    """
    url = f"{settings.nba_stats_api_url.rstrip('/')}/{endpoint}"
    attempts = max(1, settings.nba_stats_max_retries)
    failure: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            return _get_json(url, params, attempt)
        except Exception as exc:  # noqa: BLE001
            failure = exc
            log_request_error(SOURCE_NAME, url, error=str(exc), attempt=attempt)
            logger.warning("%s attempt %d/%d failed: %s", endpoint, attempt, attempts, exc)
            if attempt < attempts:
                time.sleep(settings.nba_stats_backoff_seconds * attempt)
    raise StatsUnavailableError(f"NBA stats request failed: {failure}") from failure


def _api_date(value: str | date | None) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.strftime("%m/%d/%Y")
    try:
        return datetime.strptime(value, "%Y-%m-%d").strftime("%m/%d/%Y")
    except ValueError:
        return value


def fetch_player_gamelogs(
    *,
    season: str,
    season_type: str = "Regular Season",
    date_from: str | date | None = None,
    date_to: str | date | None = None,
    last_n_games: int | None = None,
) -> dict[str, Any]:
    """Box-score rows for every player game in ``season`` (result set ``PlayerGameLogs``)."""
    params: dict[str, Any] = {
        "Season": season,
        "SeasonType": season_type,
        "LeagueID": "00",
        "PerMode": "Totals",
        "MeasureType": "Base",
    }
    optional = {
        "DateFrom": _api_date(date_from),
        "DateTo": _api_date(date_to),
        "LastNGames": int(last_n_games) if last_n_games is not None else None,
    }
    params.update({key: value for key, value in optional.items() if value is not None})
    return get_stats_endpoint(GAMELOGS_ENDPOINT, params)

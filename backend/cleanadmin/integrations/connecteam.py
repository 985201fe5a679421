"""Client for the Connecteam time-clock API (the workforce-scheduling provider)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

import httpx

from cleanadmin.core.config import ConnecteamConfig
from cleanadmin.core.errors import ConfigurationError, IntegrationError
from cleanadmin.core.logging import get_logger
from cleanadmin.core.numbers import ZERO, quantize

logger = get_logger(__name__)


@dataclass
class UserHours:
    total_hours: Decimal = ZERO
    daily_hours: dict[date, Decimal] = field(default_factory=dict)


class ConnecteamClient:
    def __init__(self, config: ConnecteamConfig, transport: httpx.BaseTransport | None = None):
        if not config.api_key:
            raise ConfigurationError("Connecteam API key is not configured")
        self.config = config
        self._http = httpx.Client(
            base_url=config.base_url,
            headers={"X-API-Key": config.api_key, "Content-Type": "application/json"},
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def __enter__(self) -> ConnecteamClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = self._http.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.error("connecteam_request_failed", path=path, error=str(exc))
            raise IntegrationError("Connecteam request failed", str(exc)) from exc

        if response.is_error:
            logger.error("connecteam_api_error", path=path, status=response.status_code)
            raise IntegrationError(
                f"Connecteam API error ({response.status_code})", response.text[:200]
            )
        try:
            return response.json()
        except ValueError:
            raise IntegrationError(
                "Connecteam API returned non-JSON response", response.text[:200]
            ) from None

    def get_time_clocks(self) -> list[dict[str, Any]]:
        payload = self._get("/time-clock/v1/time-clocks")
        return (payload.get("data") or {}).get("timeClocks") or []

    def get_timesheet_totals(self, time_clock_id: int, start: date, end: date) -> dict[str, UserHours]:
        """Hours per provider user id, with the per-day breakdown."""
        payload = self._get(
            f"/time-clock/v1/time-clocks/{time_clock_id}/timesheet",
            params={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
        totals: dict[str, UserHours] = {}
        for user in (payload.get("data") or {}).get("users") or []:
            hours = UserHours()
            for record in user.get("dailyRecords") or []:
                day_hours = quantize(record.get("dailyTotalHours") or 0)
                day = date.fromisoformat(record["date"])
                hours.daily_hours[day] = hours.daily_hours.get(day, ZERO) + day_hours
                hours.total_hours += day_hours
            totals[str(user["userId"])] = hours
        return totals

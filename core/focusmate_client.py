"""
FocusMate sessions API client.

Fetches the user's logged FocusMate sessions for a date range so the
frontend can fold them into the weekly tracker.
"""
import os
from typing import Any, Optional

import httpx

from core.config_manager import config
from core.exceptions import FocusMateAPIError, FocusMateConfigError
from core.logger import get_logger

logger = get_logger("focusmate_api")


class FocusMateClient:
    """Thin wrapper over GET /sessions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else os.getenv("FOCUSMATE_API_KEY", "")
        self.base_url = (base_url or config.FOCUSMATE_API_BASE).rstrip("/")
        self._transport = transport

    def fetch_sessions(self, start: str, end: str) -> Any:
        """
        Fetch sessions between `start` and `end` (passed through verbatim).

        Raises:
            FocusMateConfigError: no API key configured.
            FocusMateAPIError: upstream error status or network failure.
        """
        if not self.api_key:
            raise FocusMateConfigError()

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            with httpx.Client(timeout=config.HTTP_TIMEOUT, transport=self._transport) as client:
                response = client.get(
                    f"{self.base_url}/sessions",
                    params={"start": start, "end": end},
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error("FocusMate request failed: %s", e)
            raise FocusMateAPIError("Failed to fetch from FocusMate API", 500, str(e))

        if response.is_error:
            logger.warning("FocusMate API returned %s", response.status_code)
            raise FocusMateAPIError(
                f"FocusMate API returned {response.status_code}",
                response.status_code,
                response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise FocusMateAPIError("Failed to fetch from FocusMate API", 500, f"Invalid JSON: {e}")

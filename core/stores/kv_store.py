"""
Key-value state store over a Redis-compatible REST API.

Works with Vercel KV / Upstash: `GET {url}/get/{key}` answers
`{"result": <string or null>}` and `POST {url}/set/{key}` stores the request
body as the value.
"""
import json
from typing import Any, Dict, Optional

import httpx

from core.config_manager import config as system_config
from core.exceptions import ConfigError, StoreUnavailableError, StoreWriteError
from core.logger import get_logger, log_corruption
from core.stores.base import StateStore, parse_snapshot_json

logger = get_logger("stores.kv")


class RestKVStateStore(StateStore):
    """Snapshot stored as a JSON string under a single key."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(config)
        self.url = (self.config.get("url") or "").rstrip("/")
        self.token = self.config.get("token", "")
        self.key = self.config.get("key") or system_config.STATE_KEY
        self.timeout = float(self.config.get("timeout", system_config.HTTP_TIMEOUT))
        self._transport = transport

        if not self.url:
            raise ConfigError("KV store requires 'url' (e.g. KV_REST_API_URL)", "config/store.yaml")

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(f"{self.url}/get/{self.key}", headers=self._headers())
                response.raise_for_status()
                body = parse_snapshot_json(response.text)
        except httpx.HTTPStatusError as e:
            raise StoreUnavailableError(f"KV returned {e.response.status_code}", self.get_name())
        except httpx.HTTPError as e:
            raise StoreUnavailableError(f"KV request failed: {e}", self.get_name())
        except ValueError as e:
            raise StoreUnavailableError(f"KV response is not JSON: {e}", self.get_name())

        if not isinstance(body, dict):
            raise StoreUnavailableError("KV response is not a JSON object", self.get_name())
        result = body.get("result")

        if result is None:
            logger.info("Key %s not set", self.key)
            return None

        # Some clients store the object directly rather than a JSON string
        if isinstance(result, dict):
            return result

        try:
            data = parse_snapshot_json(result)
        except (TypeError, ValueError) as e:
            log_corruption(f"kv:{self.key}", str(result), str(e))
            raise StoreUnavailableError(f"Stored value is not valid JSON: {e}", self.get_name())

        if not isinstance(data, dict):
            raise StoreUnavailableError("Stored value is not a JSON object", self.get_name())
        return data

    def save(self, snapshot: Dict[str, Any]) -> None:
        try:
            body = json.dumps(snapshot, ensure_ascii=False)
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    f"{self.url}/set/{self.key}",
                    headers=self._headers(),
                    content=body.encode("utf-8"),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Failed to save to KV: %s", e.response.status_code)
            raise StoreWriteError(f"KV returned {e.response.status_code}", self.get_name())
        except httpx.HTTPError as e:
            logger.error("Failed to save to KV: %s", e)
            raise StoreWriteError(f"KV request failed: {e}", self.get_name())
        logger.info("Saved state to KV key %s", self.key)

    def get_name(self) -> str:
        return "kv"

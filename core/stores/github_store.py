"""
GitHub-backed state store.

Keeps the snapshot as one JSON file in a repository, read and written through
the GitHub REST contents API. Every save is a commit.
"""
import base64
import json
from typing import Any, Dict, Optional

import httpx

from core.config_manager import config as system_config
from core.exceptions import ConfigError, StoreUnavailableError, StoreWriteError
from core.logger import get_logger, log_corruption
from core.stores.base import StateStore, parse_snapshot_json

logger = get_logger("stores.github")

DEFAULT_API_BASE = "https://api.github.com"
COMMIT_MESSAGE = "Auto-save: FocusMate state updated"


class GitHubStateStore(StateStore):
    """State file in a GitHub repository."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(config)
        self.owner = self.config.get("owner", "")
        self.repo = self.config.get("repo", "")
        self.path = self.config.get("path") or system_config.STATE_FILE_NAME
        self.token = self.config.get("token", "")
        self.branch = self.config.get("branch") or None
        self.api_base = (self.config.get("api_base") or DEFAULT_API_BASE).rstrip("/")
        self.timeout = float(self.config.get("timeout", system_config.HTTP_TIMEOUT))
        self._transport = transport

        if not self.owner or not self.repo:
            raise ConfigError("GitHub store requires 'owner' and 'repo'", "config/store.yaml")

    @property
    def contents_url(self) -> str:
        return f"{self.api_base}/repos/{self.owner}/{self.repo}/contents/{self.path}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def _get_contents(self, client: httpx.Client) -> Optional[Dict[str, Any]]:
        """Contents API payload, or None when the file does not exist."""
        params = {"ref": self.branch} if self.branch else None
        response = client.get(self.contents_url, headers=self._headers(), params=params)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            with self._client() as client:
                payload = self._get_contents(client)
        except httpx.HTTPStatusError as e:
            raise StoreUnavailableError(
                f"GitHub returned {e.response.status_code} for {self.path}", self.get_name()
            )
        except httpx.HTTPError as e:
            raise StoreUnavailableError(f"GitHub request failed: {e}", self.get_name())
        except ValueError as e:
            raise StoreUnavailableError(f"GitHub response is not JSON: {e}", self.get_name())

        if payload is None:
            logger.info("State file %s not found in %s/%s", self.path, self.owner, self.repo)
            return None

        if not isinstance(payload, dict):
            raise StoreUnavailableError(f"{self.path} is not a file", self.get_name())

        raw = ""
        try:
            raw = base64.b64decode(payload.get("content", "")).decode("utf-8")
            data = parse_snapshot_json(raw)
        except (ValueError, UnicodeDecodeError) as e:
            log_corruption(f"github:{self.owner}/{self.repo}/{self.path}", raw, str(e))
            raise StoreUnavailableError(f"State file is not valid JSON: {e}", self.get_name())

        if not isinstance(data, dict):
            raise StoreUnavailableError("State file does not hold a JSON object", self.get_name())
        return data

    def save(self, snapshot: Dict[str, Any]) -> None:
        content = json.dumps(snapshot, ensure_ascii=False, indent=2)
        body: Dict[str, Any] = {
            "message": COMMIT_MESSAGE,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if self.branch:
            body["branch"] = self.branch

        try:
            with self._client() as client:
                existing = self._get_contents(client)
                if isinstance(existing, dict) and existing.get("sha"):
                    body["sha"] = existing["sha"]
                response = client.put(self.contents_url, headers=self._headers(), json=body)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Failed to save to GitHub: %s", e.response.status_code)
            raise StoreWriteError(
                f"GitHub returned {e.response.status_code} while saving {self.path}", self.get_name()
            )
        except httpx.HTTPError as e:
            logger.error("Failed to save to GitHub: %s", e)
            raise StoreWriteError(f"GitHub request failed: {e}", self.get_name())
        except ValueError as e:
            raise StoreWriteError(f"GitHub response is not JSON: {e}", self.get_name())

        logger.info("Saved state to GitHub %s/%s/%s", self.owner, self.repo, self.path)

    def get_name(self) -> str:
        return "github"

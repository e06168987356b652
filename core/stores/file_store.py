"""
Local filesystem state store.

Path: data/focusmate-state.json unless configured otherwise.
"""
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from core.config_manager import config as system_config
from core.exceptions import StoreUnavailableError, StoreWriteError
from core.logger import get_logger, log_corruption
from core.paths import DATA_DIR
from core.stores.base import StateStore, parse_snapshot_json

logger = get_logger("stores.file")


class FileStateStore(StateStore):
    """Single JSON file, replaced atomically on every save."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, path: Optional[Path] = None):
        super().__init__(config)
        if path is None:
            raw_path = self.config.get("path")
            path = Path(raw_path).expanduser() if raw_path else DATA_DIR / system_config.STATE_FILE_NAME
        self.path = path

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            logger.info("State file not found at %s", self.path)
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreUnavailableError(f"Cannot read {self.path}: {e}", self.get_name())

        try:
            data = parse_snapshot_json(raw)
        except ValueError as e:
            log_corruption(str(self.path), raw, str(e))
            raise StoreUnavailableError(f"State file is not valid JSON: {e}", self.get_name())

        if not isinstance(data, dict):
            log_corruption(str(self.path), raw, "top-level value is not an object")
            raise StoreUnavailableError("State file does not hold a JSON object", self.get_name())
        return data

    def save(self, snapshot: Dict[str, Any]) -> None:
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(snapshot, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StoreWriteError(f"Cannot write {self.path}: {e}", self.get_name())
        logger.info("Saved state to %s", self.path)

    def get_name(self) -> str:
        return "file"

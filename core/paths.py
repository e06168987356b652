"""
Centralized filesystem paths for runtime data.
"""
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"


def get_data_dir() -> Path:
    """
    Return runtime data directory.

    Priority:
    1. FOCUSMATE_DATA_DIR env var
    2. <project_root>/data
    """
    raw = os.getenv("FOCUSMATE_DATA_DIR", "").strip()
    if raw:
        return Path(raw).expanduser()
    return PROJECT_ROOT / "data"


def get_logs_dir() -> Path:
    """Return log directory (FOCUSMATE_LOG_DIR or <project_root>/logs)."""
    raw = os.getenv("FOCUSMATE_LOG_DIR", "").strip()
    if raw:
        return Path(raw).expanduser()
    return PROJECT_ROOT / "logs"


DATA_DIR = get_data_dir()

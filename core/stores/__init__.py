# State stores: one snapshot per backend, selected by config/store.yaml.

from typing import Any, Dict, Optional

from core.exceptions import ConfigError
from core.logger import get_logger
from core.stores.base import StateStore
from core.stores.file_store import FileStateStore
from core.stores.github_store import GitHubStateStore
from core.stores.kv_store import RestKVStateStore
from core.stores.memory_store import InMemoryStateStore

logger = get_logger("stores")

_BACKENDS = {
    "file": FileStateStore,
    "memory": InMemoryStateStore,
    "github": GitHubStateStore,
    "kv": RestKVStateStore,
}


def create_state_store(config: Optional[Dict[str, Any]] = None) -> StateStore:
    """
    Factory function to create the configured state store.

    Args:
        config: Store config (`backend` plus per-backend sections).
            If None, loads config/store.yaml.
    """
    if config is None:
        from core.config_manager import load_store_config
        config = load_store_config()

    backend = str(config.get("backend", "file")).lower()
    store_cls = _BACKENDS.get(backend)
    if store_cls is None:
        raise ConfigError(
            f"Unknown store backend: '{backend}' (expected one of {', '.join(sorted(_BACKENDS))})",
            "config/store.yaml",
        )

    section = config.get(backend) or {}
    logger.info("Using %s state store", backend)
    return store_cls(section)


_store: Optional[StateStore] = None


def get_state_store() -> StateStore:
    """Return the process-wide store, creating it on first use."""
    global _store
    if _store is None:
        _store = create_state_store()
    return _store


def reset_state_store() -> None:
    """Drop the cached store (tests, config changes)."""
    global _store
    _store = None


__all__ = [
    "StateStore",
    "FileStateStore",
    "InMemoryStateStore",
    "GitHubStateStore",
    "RestKVStateStore",
    "create_state_store",
    "get_state_store",
    "reset_state_store",
]

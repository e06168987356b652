"""
In-process state store. Nothing survives a restart.
"""
import copy
from typing import Any, Dict, Optional

from core.stores.base import StateStore


class InMemoryStateStore(StateStore):
    """Keep the snapshot in a dict; copies on the way in and out."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, initial: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self._snapshot: Optional[Dict[str, Any]] = copy.deepcopy(initial)

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._snapshot)

    def save(self, snapshot: Dict[str, Any]) -> None:
        self._snapshot = copy.deepcopy(snapshot)

    def get_name(self) -> str:
        return "memory"

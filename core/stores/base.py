"""
Base StateStore for FocusMate State.

Defines the interface every backend implements. A store holds exactly one
JSON snapshot; there is no compare-and-swap, the last writer wins.
"""
import json
import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union


class StateStore(ABC):
    """Base class for all state stores."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """
        Load the stored snapshot.

        Returns:
            The raw snapshot dict, or None if nothing was ever saved.

        Raises:
            StoreUnavailableError: backend unreachable or data unreadable.
        """
        pass

    @abstractmethod
    def save(self, snapshot: Dict[str, Any]) -> None:
        """
        Replace the stored snapshot.

        Raises:
            StoreWriteError: the write did not succeed.
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return the backend name."""
        pass


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid JSON number")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} overflows a JSON number")
    return value


def parse_snapshot_json(raw: Union[str, bytes]) -> Any:
    """json.loads that rejects NaN / Infinity, which cannot be served back as JSON."""
    return json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)

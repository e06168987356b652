"""
State application service.

Read path: load -> recalculate banking -> return (seed state on failure).
Write path: accept raw state -> recalculate banking -> persist.
"""
from typing import Any, Dict, Optional

from core.banking import recalculate_banking
from core.config_manager import config
from core.exceptions import StoreError
from core.logger import get_logger
from core.models import StateSnapshot, build_default_state, now_iso
from core.stores import StateStore, get_state_store

logger = get_logger("state")


class StateService:
    """Application service around a single StateStore."""

    def __init__(self, store: Optional[StateStore] = None):
        self.store = store or get_state_store()

    @staticmethod
    def recalculate(snapshot: StateSnapshot) -> StateSnapshot:
        snapshot.allWeeksData = recalculate_banking(
            snapshot.allWeeksData, default_target=config.DEFAULT_WEEK_TARGET
        )
        return snapshot

    def get_state(self) -> Dict[str, Any]:
        """
        Current snapshot with banking recalculated.

        Never raises for store problems: an unreachable backend or an empty
        store yields the default seed snapshot.
        """
        try:
            raw = self.store.load()
        except StoreError as e:
            logger.error("Store read failed, serving default state: %s", e.message)
            return build_default_state().to_dict()

        if raw is None:
            logger.info("Store %s is empty, serving default state", self.store.get_name())
            return build_default_state().to_dict()

        snapshot = self.recalculate(StateSnapshot.from_dict(raw))
        logger.info(
            "Loaded state with %d weeks and %d sessions",
            len(snapshot.allWeeksData),
            len(snapshot.sessions),
        )
        return snapshot.to_dict()

    def save_state(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Recalculate and persist a full snapshot.

        Raises:
            StoreWriteError: propagated from the store, no retry.
        """
        snapshot = StateSnapshot.from_dict(payload)
        snapshot.lastModified = now_iso()
        snapshot = self.recalculate(snapshot)

        state = snapshot.to_dict()
        self.store.save(state)
        logger.info(
            "Saved state with %d weeks to %s", len(snapshot.allWeeksData), self.store.get_name()
        )
        return state

    def recalculate_stored(self) -> Optional[Dict[str, Any]]:
        """Rewrite the stored snapshot with fresh banking; None if the store is empty."""
        raw = self.store.load()
        if raw is None:
            return None
        snapshot = self.recalculate(StateSnapshot.from_dict(raw))
        state = snapshot.to_dict()
        self.store.save(state)
        return state

    def initialize(self, force: bool = False) -> bool:
        """Write the default seed state. Returns False if state already exists and not forced."""
        if not force and self.store.load() is not None:
            return False
        self.store.save(build_default_state().to_dict())
        return True

"""
Core Data Models for FocusMate State.
Defines the persisted snapshot and the default seed state.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from core.config_manager import config

WEEK_KEY_PREFIX = "week_"

# Derived banking fields, recomputed on every read and write
DERIVED_FIELDS = ("bankedFromPrevious", "surplus", "bankedForNextWeek")


def week_key(week_num: int) -> str:
    return f"{WEEK_KEY_PREFIX}{week_num}"


def now_iso() -> str:
    return datetime.now().isoformat()


def current_week_start(today: Optional[datetime] = None) -> str:
    """Monday 00:00 of the week containing `today`, as ISO string."""
    today = today or datetime.now()
    monday = today - timedelta(days=today.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0).isoformat()


@dataclass
class StateSnapshot:
    """整个持久化状态，一次读写一个整体"""
    allWeeksData: Dict[str, Any] = field(default_factory=dict)
    allWeeklyGoals: Dict[str, Any] = field(default_factory=dict)
    sessions: List[Any] = field(default_factory=list)
    lastModified: str = field(default_factory=now_iso)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "StateSnapshot":
        """Build from a stored/posted blob; missing or null sections get empty defaults."""
        data = data or {}
        weeks = data.get("allWeeksData")
        goals = data.get("allWeeklyGoals")
        sessions = data.get("sessions")
        return cls(
            allWeeksData=weeks if isinstance(weeks, dict) else {},
            allWeeklyGoals=goals if isinstance(goals, dict) else {},
            sessions=sessions if isinstance(sessions, list) else [],
            lastModified=data.get("lastModified") or now_iso(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allWeeksData": self.allWeeksData,
            "allWeeklyGoals": self.allWeeklyGoals,
            "sessions": self.sessions,
            "lastModified": self.lastModified,
        }


def build_default_state() -> StateSnapshot:
    """
    Fresh seed snapshot for a store that has never been written.

    Every call builds new objects; callers may mutate the result freely.
    """
    target = config.DEFAULT_WEEK_TARGET
    completed = config.SEED_COMPLETED
    surplus = max(0, completed - target)
    first_week = week_key(1)

    return StateSnapshot(
        allWeeksData={
            first_week: {
                "weekNum": 1,
                "weekStart": current_week_start(),
                "target": target,
                "completed": completed,
                "dailyUnits": {},
                "bankedFromPrevious": 0,
                "surplus": surplus,
                "bankedForNextWeek": surplus,
            }
        },
        allWeeklyGoals={
            first_week: [{"text": "", "done": False} for _ in range(config.SEED_GOAL_SLOTS)]
        },
        sessions=[],
        lastModified=now_iso(),
    )

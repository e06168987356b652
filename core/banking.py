"""
Banking chain recalculation for FocusMate State.

Each week banks the units completed beyond its target. The bank carries into
the next week:

    bankedFromPrevious = bankedForNextWeek of week n-1 (0 if week n-1 is absent)
    surplus            = max(0, completed - target)
    bankedForNextWeek  = bankedFromPrevious + surplus

The derived fields are never trusted from input; they are recomputed from
`target` / `completed` every time state is read or written.
"""
import re
from typing import Any, Dict, List, Optional, Tuple

from core.config_manager import config
from core.logger import get_logger
from core.models import WEEK_KEY_PREFIX

logger = get_logger("banking")

WEEK_KEY_PATTERN = re.compile(r"^week_(\d+)$", re.ASCII)

DEFAULT_COMPLETED = 0


def _as_int(value: Any) -> Optional[int]:
    """Integer value of `value`, or None for anything that is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] in "+-" else text
        if digits.isascii() and digits.isdigit():
            return int(text)
        return None
    return None


def parse_week_number(key: str, record: Dict[str, Any]) -> Optional[int]:
    """
    Effective week number: the record's own weekNum, else the key suffix.

    Returns None when the key does not follow `week_<n>`.
    """
    match = WEEK_KEY_PATTERN.match(key)
    if not match:
        return None
    week_num = _as_int(record.get("weekNum"))
    if week_num is None:
        week_num = int(match.group(1))
    return week_num


def _collect_weeks(all_weeks_data: Dict[str, Any]) -> List[Tuple[int, str]]:
    weeks = []
    for key, record in all_weeks_data.items():
        if not isinstance(key, str) or not key.startswith(WEEK_KEY_PREFIX):
            continue
        if not isinstance(record, dict):
            logger.warning("Skipping %s: week record is not an object", key)
            continue
        week_num = parse_week_number(key, record)
        if week_num is None:
            logger.warning("Skipping %s: key does not match week_<n>", key)
            continue
        weeks.append((week_num, key))
    # list.sort is stable; duplicate week numbers keep insertion order
    weeks.sort(key=lambda item: item[0])
    return weeks


def recalculate_banking(
    all_weeks_data: Any,
    default_target: Optional[int] = None,
) -> Any:
    """
    Pure function: recompute banking fields for every week record.

    Args:
        all_weeks_data: Mapping of week key -> week record.
        default_target: Target used when a record has none (config default).

    Returns:
        New mapping with bankedFromPrevious / surplus / bankedForNextWeek
        overwritten on every `week_<n>` entry. Other entries are returned
        unchanged. Non-mapping input is returned as-is.
    """
    if not isinstance(all_weeks_data, dict):
        return all_weeks_data

    if default_target is None:
        default_target = config.DEFAULT_WEEK_TARGET

    result = dict(all_weeks_data)
    banked_by_week: Dict[int, int] = {}

    for week_num, key in _collect_weeks(all_weeks_data):
        record = all_weeks_data[key]

        target = _as_int(record.get("target"))
        if target is None:
            target = default_target
        completed = _as_int(record.get("completed"))
        if completed is None:
            completed = DEFAULT_COMPLETED

        banked_from_previous = banked_by_week.get(week_num - 1, 0)
        surplus = max(0, completed - target)
        banked_for_next = banked_from_previous + surplus
        banked_by_week[week_num] = banked_for_next

        updated = dict(record)
        updated["bankedFromPrevious"] = banked_from_previous
        updated["surplus"] = surplus
        updated["bankedForNextWeek"] = banked_for_next
        result[key] = updated

    return result

import copy

from core.banking import parse_week_number, recalculate_banking


def _week(week_num: int, completed=None, target=None, **extra) -> dict:
    record = {"weekNum": week_num, "weekStart": "2026-01-05T00:00:00", "dailyUnits": {}}
    if completed is not None:
        record["completed"] = completed
    if target is not None:
        record["target"] = target
    record.update(extra)
    return record


def test_chain_carries_bank_into_next_week():
    data = {
        "week_1": _week(1, completed=42, target=40),
        "week_2": _week(2, completed=30, target=40),
    }

    result = recalculate_banking(data)

    assert result["week_1"]["bankedFromPrevious"] == 0
    assert result["week_1"]["surplus"] == 2
    assert result["week_1"]["bankedForNextWeek"] == 2
    assert result["week_2"]["bankedFromPrevious"] == 2
    assert result["week_2"]["surplus"] == 0
    assert result["week_2"]["bankedForNextWeek"] == 2


def test_bank_accumulates_over_several_weeks():
    data = {
        "week_3": _week(3, completed=41, target=40),
        "week_1": _week(1, completed=45, target=40),
        "week_2": _week(2, completed=43, target=40),
    }

    result = recalculate_banking(data)

    assert [result[k]["bankedForNextWeek"] for k in ("week_1", "week_2", "week_3")] == [5, 8, 9]
    assert result["week_3"]["bankedFromPrevious"] == 8


def test_gap_resets_bank_to_zero():
    data = {
        "week_1": _week(1, completed=42, target=40),
        "week_3": _week(3, completed=10, target=40),
    }

    result = recalculate_banking(data)

    assert result["week_1"]["bankedForNextWeek"] == 2
    assert result["week_3"]["bankedFromPrevious"] == 0
    assert result["week_3"]["surplus"] == 0
    assert result["week_3"]["bankedForNextWeek"] == 0


def test_missing_target_and_completed_use_defaults():
    data = {
        "week_1": {"weekNum": 1, "completed": 45},
        "week_2": {"weekNum": 2, "target": 30},
    }

    result = recalculate_banking(data)

    assert result["week_1"]["surplus"] == 5
    assert result["week_2"]["bankedFromPrevious"] == 5
    assert result["week_2"]["surplus"] == 0
    assert result["week_2"]["bankedForNextWeek"] == 5


def test_malformed_numbers_fall_back_to_defaults():
    data = {
        "week_1": {"target": "lots", "completed": None},
        "week_2": {"target": True, "completed": "44"},
    }

    result = recalculate_banking(data)

    assert result["week_1"]["surplus"] == 0
    assert result["week_2"]["surplus"] == 4
    assert result["week_2"]["bankedForNextWeek"] == 4


def test_numeric_strings_must_be_plain_ascii_integers():
    data = {
        "week_1": {"target": "4_0", "completed": "\uff14\uff14"},
        "week_2": {"target": " 40 ", "completed": "+45"},
        "week_3": {"target": "40.0", "completed": float("nan")},
    }

    result = recalculate_banking(data)

    assert result["week_1"]["surplus"] == 0
    assert result["week_2"]["surplus"] == 5
    assert result["week_2"]["bankedFromPrevious"] == 0
    assert result["week_3"]["surplus"] == 0
    assert result["week_3"]["bankedFromPrevious"] == 5


def test_custom_default_target():
    result = recalculate_banking({"week_1": {"completed": 12}}, default_target=10)
    assert result["week_1"]["surplus"] == 2


def test_stale_derived_fields_are_overwritten():
    data = {
        "week_1": _week(
            1,
            completed=40,
            target=40,
            bankedFromPrevious=99,
            surplus=99,
            bankedForNextWeek=99,
        )
    }

    result = recalculate_banking(data)

    assert result["week_1"]["bankedFromPrevious"] == 0
    assert result["week_1"]["surplus"] == 0
    assert result["week_1"]["bankedForNextWeek"] == 0


def test_non_week_keys_pass_through_and_do_not_chain():
    notes = {"text": "remember to stretch"}
    data = {
        "notes": notes,
        "week_1": _week(1, completed=50, target=40),
    }

    result = recalculate_banking(data)

    assert result["notes"] is notes
    assert "bankedForNextWeek" not in result["notes"]
    assert result["week_1"]["bankedForNextWeek"] == 10


def test_unparseable_week_keys_are_skipped_without_raising(caplog):
    bad = {"completed": 99}
    data = {
        "week_abc": bad,
        "week_1": _week(1, completed=41, target=40),
        "week_2": "not a record",
    }

    result = recalculate_banking(data)

    assert result["week_abc"] is bad
    assert result["week_2"] == "not a record"
    assert result["week_1"]["bankedForNextWeek"] == 1
    assert "week_abc" in caplog.text


def test_week_num_field_takes_precedence_over_key_suffix():
    assert parse_week_number("week_7", {"weekNum": 3}) == 3
    assert parse_week_number("week_7", {"weekNum": "x"}) == 7
    assert parse_week_number("week_7", {}) == 7
    assert parse_week_number("notes", {"weekNum": 1}) is None


def test_input_is_not_mutated():
    data = {"week_1": _week(1, completed=42, target=40)}
    before = copy.deepcopy(data)

    result = recalculate_banking(data)

    assert data == before
    assert result is not data
    assert result["week_1"]["weekStart"] == data["week_1"]["weekStart"]


def test_recalculation_is_idempotent():
    data = {
        "week_1": _week(1, completed=42, target=40),
        "week_2": _week(2, completed=50),
        "week_4": _week(4, completed=3, target=5),
        "notes": "free text",
    }

    once = recalculate_banking(data)
    twice = recalculate_banking(once)

    assert twice == once


def test_bank_identity_holds_for_every_week():
    data = {f"week_{n}": _week(n, completed=n * 7, target=40) for n in range(1, 9)}

    result = recalculate_banking(data)

    for record in result.values():
        assert record["surplus"] >= 0
        assert record["bankedForNextWeek"] == record["bankedFromPrevious"] + record["surplus"]


def test_empty_and_non_mapping_inputs():
    assert recalculate_banking({}) == {}
    assert recalculate_banking(None) is None
    items = [1, 2, 3]
    assert recalculate_banking(items) is items

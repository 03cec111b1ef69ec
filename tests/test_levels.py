"""Tests for the difficulty level catalog."""

from kidlearn.engine.levels import (
    DIFFICULTY_LEVELS,
    FALLBACK_MILESTONE,
    get_level,
    list_levels,
    next_milestone,
)


def test_one_entry_per_level():
    assert [lvl.level for lvl in list_levels()] == [1, 2, 3, 4, 5]
    for number, entry in DIFFICULTY_LEVELS.items():
        assert entry.level == number


def test_budgets_tighten_as_level_rises():
    levels = list_levels()
    for easier, harder in zip(levels, levels[1:]):
        assert harder.modifiers.complexity > easier.modifiers.complexity
        assert harder.modifiers.attempts < easier.modifiers.attempts
        assert harder.modifiers.hints < easier.modifiers.hints


def test_level_one_has_no_time_limit():
    assert get_level(1).modifiers.time_limit == 0
    assert get_level(5).modifiers.time_limit == 20


def test_unknown_level_falls_back_to_easy():
    assert get_level(0).name == "Easy"
    assert get_level(9).level == 2


def test_milestones():
    assert next_milestone(3) == "Challenge yourself with Hard level content"
    assert "mastered all levels" in next_milestone(5)
    assert next_milestone(42) == FALLBACK_MILESTONE


def test_to_dict_uses_client_names():
    d = get_level(2).to_dict()
    assert d["name"] == "Easy"
    assert d["contentModifiers"] == {
        "timeLimit": 60, "hints": 3, "attempts": 5, "complexity": 0.5,
    }
    assert "moderate pace" in d["characteristics"]

from __future__ import annotations

import json
from pathlib import Path

import pytest

from healthjourney.plan.parser import parse_workout_plan
from healthjourney.profile.model import build_profile
from healthjourney.tracking.plan_store import (
    PlanStoreError,
    delete_plan,
    load_plan,
    plan_path,
    save_plan,
)
from healthjourney.tracking.saved_plan import SavedPlan

PLAN_MD = """\
# Weekly Kickstarter
## Day 1: Full Body
### Push-ups
- Sets: 3
- Reps: 10-12
### Plank
- Tips: Keep hips level
## Day 2: Cardio
### Running
- Reps: 20 minutes
"""


def test_save_and_load_saved_plan(tmp_path: Path) -> None:
    profile = build_profile(
        age=40,
        sex="male",
        height_cm=180,
        weight_kg=82,
        has_medical_history="yes",
        medical_history_text="Lower back pain",
        fitness_level="beginner",
        workout_history="Walks the dog every day.",
    )
    saved = SavedPlan.new(parse_workout_plan(PLAN_MD), profile)
    saved.set_completed(0, 1, True)

    out = save_plan(saved, "user@example.com", base_dir=tmp_path)
    assert out.exists()
    assert out.parent == tmp_path

    loaded = load_plan("user@example.com", base_dir=tmp_path)

    assert loaded == saved
    assert loaded is not None
    assert loaded.is_completed(0, 1) is True
    assert loaded.plan.days[0].exercises[1].sets is None


def test_stored_document_omits_unset_fields(tmp_path: Path) -> None:
    saved = SavedPlan.new(parse_workout_plan(PLAN_MD))
    saved.set_completed(1, 0, True)
    out = save_plan(saved, "u1", base_dir=tmp_path)

    payload = json.loads(out.read_text(encoding="utf-8"))

    assert payload["plan"]["days"][0]["exercises"][1] == {
        "name": "Plank",
        "tips": "Keep hips level",
    }
    assert payload["profile"] is None
    assert payload["completed_exercises"] == {"1": {"0": True}}


def test_load_missing_plan_returns_none(tmp_path: Path) -> None:
    assert load_plan("nobody", base_dir=tmp_path) is None


def test_load_corrupt_plan_raises(tmp_path: Path) -> None:
    plan_path("u1", tmp_path).write_text("{not json", encoding="utf-8")
    with pytest.raises(PlanStoreError):
        load_plan("u1", base_dir=tmp_path)

    plan_path("u2", tmp_path).write_text('{"plan": {}}', encoding="utf-8")
    with pytest.raises(PlanStoreError):
        load_plan("u2", base_dir=tmp_path)


def test_delete_plan(tmp_path: Path) -> None:
    save_plan(SavedPlan.new(parse_workout_plan(PLAN_MD)), "u1", base_dir=tmp_path)

    assert delete_plan("u1", base_dir=tmp_path) is True
    assert delete_plan("u1", base_dir=tmp_path) is False
    assert load_plan("u1", base_dir=tmp_path) is None


def test_plan_path_slug_and_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HEALTH_JOURNEY_HOME", str(tmp_path))

    path = plan_path("Jane Doe!")
    assert path.parent == tmp_path / "plans"
    assert path.name.startswith("jane-doe-")
    assert path.suffix == ".json"
    assert plan_path("???").name.startswith("anonymous-")


@pytest.mark.parametrize("first,second", [("AbC123", "abc123"), ("a.b", "a-b"), ("???", "!!!")])
def test_distinct_users_never_share_a_plan(tmp_path: Path, first: str, second: str) -> None:
    assert plan_path(first, tmp_path) != plan_path(second, tmp_path)

    save_plan(SavedPlan.new(parse_workout_plan("# Alice Plan\n")), first, base_dir=tmp_path)

    assert load_plan(second, base_dir=tmp_path) is None
    loaded = load_plan(first, base_dir=tmp_path)
    assert loaded is not None
    assert loaded.plan.title == "Alice Plan"


def test_load_non_utf8_plan_raises(tmp_path: Path) -> None:
    plan_path("bob", tmp_path).write_bytes(b"\xff\xfe{}")
    with pytest.raises(PlanStoreError):
        load_plan("bob", base_dir=tmp_path)


def test_load_rejects_non_boolean_completion_flags(tmp_path: Path) -> None:
    out = save_plan(SavedPlan.new(parse_workout_plan(PLAN_MD)), "u1", base_dir=tmp_path)
    payload = json.loads(out.read_text(encoding="utf-8"))
    payload["completed_exercises"] = {"0": {"0": "false"}}
    out.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(PlanStoreError, match="boolean"):
        load_plan("u1", base_dir=tmp_path)


def test_load_revalidates_stored_profile(tmp_path: Path) -> None:
    out = save_plan(SavedPlan.new(parse_workout_plan(PLAN_MD)), "u1", base_dir=tmp_path)
    payload = json.loads(out.read_text(encoding="utf-8"))
    payload["profile"] = {
        "age": 7,
        "sex": "male",
        "height_cm": 180.0,
        "weight_kg": 82.0,
        "has_medical_history": False,
        "fitness_level": "beginner",
        "workout_history": "Walks the dog every day.",
        "medical_history_text": None,
    }
    out.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(PlanStoreError):
        load_plan("u1", base_dir=tmp_path)

"""Local JSON persistence for saved plans, one document per user."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
from dataclasses import asdict
from pathlib import Path
from typing import Any

from healthjourney.plan.model import Exercise, WorkoutDay, WorkoutPlan
from healthjourney.profile.model import build_profile
from healthjourney.tracking.saved_plan import CompletionMap, SavedPlan

logger = logging.getLogger(__name__)

_EXERCISE_DETAILS = ("sets", "reps", "rest", "tips")


class PlanStoreError(ValueError):
    """Raised when a stored plan document cannot be read."""


def _default_plans_dir() -> Path:
    home = os.getenv("HEALTH_JOURNEY_HOME")
    root = Path(home) if home else Path.home() / ".health-journey"
    return root / "plans"


def _slugify(user_id: str) -> str:
    s = re.sub(r"[^a-zA-Z0-9]+", "-", user_id.strip().lower()).strip("-")
    return s or "anonymous"


def plan_path(user_id: str, base_dir: Path | None = None) -> Path:
    root = base_dir or _default_plans_dir()
    # The slug is lossy; the digest keeps distinct identities in distinct files.
    digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()[:12]
    return root / f"{_slugify(user_id)}-{digest}.json"


def plan_to_dict(plan: WorkoutPlan) -> dict[str, Any]:
    return {
        "title": plan.title,
        "days": [
            {
                "day": day.day,
                "title": day.title,
                "exercises": [
                    {key: value for key, value in asdict(ex).items() if value is not None}
                    for ex in day.exercises
                ],
            }
            for day in plan.days
        ],
    }


def plan_from_dict(payload: dict[str, Any]) -> WorkoutPlan:
    days: list[WorkoutDay] = []
    for raw_day in payload.get("days", []):
        exercises = tuple(
            Exercise(
                name=str(raw["name"]),
                **{
                    key: str(raw[key])
                    for key in _EXERCISE_DETAILS
                    if raw.get(key) is not None
                },
            )
            for raw in raw_day.get("exercises", [])
        )
        days.append(
            WorkoutDay(
                day=str(raw_day["day"]),
                title=str(raw_day.get("title", "")),
                exercises=exercises,
            )
        )
    return WorkoutPlan(title=str(payload["title"]), days=tuple(days))


def saved_plan_to_dict(saved: SavedPlan) -> dict[str, Any]:
    return {
        "plan": plan_to_dict(saved.plan),
        "profile": asdict(saved.profile) if saved.profile is not None else None,
        "completed_exercises": {
            str(day_index): {str(ex_index): done for ex_index, done in flags.items()}
            for day_index, flags in saved.completed_exercises.items()
        },
    }


def saved_plan_from_dict(payload: dict[str, Any]) -> SavedPlan:
    raw_profile = payload.get("profile")
    profile = build_profile(**raw_profile) if raw_profile is not None else None
    completed: CompletionMap = {}
    for day_index, flags in payload.get("completed_exercises", {}).items():
        day_flags = completed.setdefault(int(day_index), {})
        for ex_index, done in flags.items():
            if not isinstance(done, bool):
                raise PlanStoreError(
                    f"Completion flag for day {day_index} exercise {ex_index} must be a boolean"
                )
            day_flags[int(ex_index)] = done
    return SavedPlan(
        plan=plan_from_dict(payload["plan"]),
        profile=profile,
        completed_exercises=completed,
    )


def save_plan(saved: SavedPlan, user_id: str, base_dir: Path | None = None) -> Path:
    out = plan_path(user_id, base_dir)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(
        json.dumps(saved_plan_to_dict(saved), ensure_ascii=True, indent=2),
        encoding="utf-8",
    )
    logger.info("Saved plan '%s' for user %s to %s", saved.plan.title, user_id, out)
    return out


def load_plan(user_id: str, base_dir: Path | None = None) -> SavedPlan | None:
    target = plan_path(user_id, base_dir)
    if not target.exists():
        return None
    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise PlanStoreError(f"Invalid JSON in {target}: {exc}") from exc
    if not isinstance(payload, dict):
        raise PlanStoreError(f"Stored plan {target} must be an object")
    try:
        return saved_plan_from_dict(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise PlanStoreError(f"Malformed stored plan {target}: {exc}") from exc


def delete_plan(user_id: str, base_dir: Path | None = None) -> bool:
    target = plan_path(user_id, base_dir)
    if not target.exists():
        return False
    target.unlink()
    logger.info("Deleted stored plan for user %s", user_id)
    return True

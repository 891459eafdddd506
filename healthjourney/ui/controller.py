"""Application flow controller shared by the web UI and the CLI."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from healthjourney.plan.model import WorkoutPlan
from healthjourney.plan.parser import ParseWarning, parse_workout_plan_with_diagnostics
from healthjourney.profile.model import UserProfile, build_profile
from healthjourney.tracking.plan_store import delete_plan, load_plan, save_plan
from healthjourney.tracking.saved_plan import PlanProgress, SavedPlan

logger = logging.getLogger(__name__)

AppStatus = Literal["onboarding", "reviewing", "tracking"]


class PlanUploadError(ValueError):
    """Raised when an uploaded plan file is not UTF-8 text."""


def decode_plan_upload(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise PlanUploadError("Uploaded plan must be a UTF-8 markdown file") from exc


class JourneyController:
    def __init__(self, user_id: str, store_dir: Path | None = None) -> None:
        self._user_id = user_id
        self._store_dir = store_dir
        self._profile: UserProfile | None = None
        self._pending_plan: WorkoutPlan | None = None
        self._warnings: tuple[ParseWarning, ...] = ()
        self._saved = load_plan(user_id, store_dir)
        self._status: AppStatus = "tracking" if self._saved is not None else "onboarding"

    @property
    def status(self) -> AppStatus:
        return self._status

    @property
    def profile(self) -> UserProfile | None:
        return self._profile

    @property
    def pending_plan(self) -> WorkoutPlan | None:
        return self._pending_plan

    @property
    def warnings(self) -> tuple[ParseWarning, ...]:
        return self._warnings

    @property
    def saved_plan(self) -> SavedPlan | None:
        return self._saved

    def submit_profile(self, **raw: object) -> UserProfile:
        self._profile = build_profile(**raw)
        return self._profile

    def review_markdown(self, markdown: str) -> WorkoutPlan:
        result = parse_workout_plan_with_diagnostics(markdown)
        if result.warnings:
            logger.info("Plan parsed with %d dropped line(s)", len(result.warnings))
        self._pending_plan = result.plan
        self._warnings = result.warnings
        self._status = "reviewing"
        return result.plan

    def save_plan(self) -> SavedPlan:
        if self._pending_plan is None:
            raise RuntimeError("No plan under review")
        saved = SavedPlan.new(self._pending_plan, self._profile)
        save_plan(saved, self._user_id, self._store_dir)
        self._saved = saved
        self._pending_plan = None
        self._warnings = ()
        self._status = "tracking"
        return saved

    def discard_plan(self) -> None:
        self._pending_plan = None
        self._warnings = ()
        self._profile = None
        self._status = "onboarding"

    def update_progress(self, day_index: int, exercise_index: int, completed: bool) -> PlanProgress:
        if self._saved is None:
            raise RuntimeError("No saved plan to track")
        before = {d: dict(flags) for d, flags in self._saved.completed_exercises.items()}
        self._saved.set_completed(day_index, exercise_index, completed)
        try:
            save_plan(self._saved, self._user_id, self._store_dir)
        except OSError:
            # Keep memory in step with what is on disk.
            self._saved.completed_exercises = before
            raise
        return self._saved.progress()

    def generate_new(self) -> None:
        delete_plan(self._user_id, self._store_dir)
        self._saved = None
        self.discard_plan()

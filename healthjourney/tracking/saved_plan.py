"""Saved plan with per-exercise completion tracking."""

from __future__ import annotations

from dataclasses import dataclass, field

from healthjourney.plan.model import WorkoutPlan
from healthjourney.profile.model import UserProfile

CompletionMap = dict[int, dict[int, bool]]


@dataclass(frozen=True)
class PlanProgress:
    completed: int
    total: int

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.completed / self.total * 100.0


@dataclass
class SavedPlan:
    plan: WorkoutPlan
    profile: UserProfile | None = None
    completed_exercises: CompletionMap = field(default_factory=dict)

    @classmethod
    def new(cls, plan: WorkoutPlan, profile: UserProfile | None = None) -> SavedPlan:
        return cls(plan=plan, profile=profile, completed_exercises={})

    def set_completed(self, day_index: int, exercise_index: int, completed: bool) -> None:
        self._check_indices(day_index, exercise_index)
        self.completed_exercises.setdefault(day_index, {})[exercise_index] = completed

    def is_completed(self, day_index: int, exercise_index: int) -> bool:
        return self.completed_exercises.get(day_index, {}).get(exercise_index, False)

    def day_progress(self, day_index: int) -> PlanProgress:
        if not 0 <= day_index < len(self.plan.days):
            raise IndexError(f"Day {day_index + 1} is not part of the plan")
        day = self.plan.days[day_index]
        done = sum(
            1 for i in range(len(day.exercises)) if self.is_completed(day_index, i)
        )
        return PlanProgress(completed=done, total=len(day.exercises))

    def progress(self) -> PlanProgress:
        # Flags left over for indices outside the plan are not counted.
        done = 0
        total = 0
        for day_index in range(len(self.plan.days)):
            day = self.day_progress(day_index)
            done += day.completed
            total += day.total
        return PlanProgress(completed=done, total=total)

    def _check_indices(self, day_index: int, exercise_index: int) -> None:
        if not 0 <= day_index < len(self.plan.days):
            raise IndexError(f"Day {day_index + 1} is not part of the plan")
        exercises = self.plan.days[day_index].exercises
        if not 0 <= exercise_index < len(exercises):
            raise IndexError(
                f"Exercise {exercise_index + 1} is not part of "
                f"{self.plan.days[day_index].day}"
            )

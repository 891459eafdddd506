"""Workout plan domain models."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PLAN_TITLE = "Your Personalized Workout Plan"


@dataclass(frozen=True)
class Exercise:
    name: str
    sets: str | None = None
    reps: str | None = None
    rest: str | None = None
    tips: str | None = None


@dataclass(frozen=True)
class WorkoutDay:
    day: str
    title: str
    exercises: tuple[Exercise, ...] = ()

    @property
    def heading(self) -> str:
        return f"{self.day}: {self.title}" if self.title else self.day


@dataclass(frozen=True)
class WorkoutPlan:
    title: str = DEFAULT_PLAN_TITLE
    days: tuple[WorkoutDay, ...] = ()

    @property
    def total_exercises(self) -> int:
        return sum(len(day.exercises) for day in self.days)

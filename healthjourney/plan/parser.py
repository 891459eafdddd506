"""Markdown workout plan parser.

The generator is asked for a plan laid out as::

    # Plan title
    ## Day 1: Full Body
    ### Push-ups
    - Sets: 3
    - Reps: 10-12

Its output is not guaranteed to follow that layout, so parsing never fails:
lines that do not fit are dropped and, on request, reported as warnings.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from healthjourney.plan.model import DEFAULT_PLAN_TITLE, Exercise, WorkoutDay, WorkoutPlan

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_DAY_HEADING = re.compile(r"(Day \d+):?\s*(.*)")

_DETAIL_FIELDS = {
    "sets": "sets",
    "reps": "reps",
    "repetitions": "reps",
    "rest": "rest",
    "tips": "tips",
    "note": "tips",
}


@dataclass(frozen=True)
class ParseWarning:
    line_no: int
    line: str
    reason: str


@dataclass(frozen=True)
class ParseResult:
    plan: WorkoutPlan
    warnings: tuple[ParseWarning, ...]


@dataclass
class _OpenExercise:
    name: str
    line_no: int
    details: dict[str, str] = field(default_factory=dict)

    def build(self) -> Exercise:
        return Exercise(name=self.name, **self.details)


@dataclass
class _OpenDay:
    day: str
    title: str
    exercises: list[Exercise] = field(default_factory=list)

    def build(self) -> WorkoutDay:
        return WorkoutDay(day=self.day, title=self.title, exercises=tuple(self.exercises))


@dataclass
class _ParseState:
    title: str = DEFAULT_PLAN_TITLE
    days: list[WorkoutDay] = field(default_factory=list)
    day: _OpenDay | None = None
    exercise: _OpenExercise | None = None
    warnings: list[ParseWarning] = field(default_factory=list)

    def warn(self, line_no: int, line: str, reason: str) -> None:
        logger.debug("Plan line %d dropped (%s): %r", line_no, reason, line)
        self.warnings.append(ParseWarning(line_no=line_no, line=line, reason=reason))

    def flush_exercise(self) -> None:
        if self.exercise is None:
            return
        if self.day is not None:
            self.day.exercises.append(self.exercise.build())
        else:
            self.warn(
                self.exercise.line_no,
                f"### {self.exercise.name}",
                "exercise outside of a day",
            )
        self.exercise = None

    def flush_day(self) -> None:
        if self.day is None:
            return
        self.flush_exercise()
        self.days.append(self.day.build())
        self.day = None


def parse_workout_plan(markdown: str) -> WorkoutPlan:
    """Parse generated markdown into a WorkoutPlan. Never raises."""
    return parse_workout_plan_with_diagnostics(markdown).plan


def parse_workout_plan_with_diagnostics(markdown: str) -> ParseResult:
    state = _ParseState()

    for line_no, raw in enumerate(_LINE_BREAK.split(markdown), start=1):
        line = raw.strip()
        if not line:
            continue

        if line.startswith("# "):
            state.title = line[2:].strip()
        elif line.startswith("## "):
            _open_day(state, line, line_no)
        elif line.startswith("### "):
            _open_exercise(state, line, line_no)
        elif line.startswith(("- ", "* ")) and state.exercise is not None:
            _apply_detail(state, line, line_no)

    state.flush_day()
    # An exercise still pending here never had a day to land in.
    state.flush_exercise()

    plan = WorkoutPlan(title=state.title, days=tuple(state.days))
    return ParseResult(plan=plan, warnings=tuple(state.warnings))


def load_workout_markdown(path: str | Path) -> WorkoutPlan:
    file_path = Path(path)
    return parse_workout_plan(file_path.read_text(encoding="utf-8"))


def _open_day(state: _ParseState, line: str, line_no: int) -> None:
    # With no day open, a pending exercise carries over to the next day.
    state.flush_day()

    match = _DAY_HEADING.match(line[3:].strip())
    if match is None:
        state.warn(line_no, line, "day heading without 'Day <number>'")
        return
    state.day = _OpenDay(day=match.group(1), title=match.group(2).strip())


def _open_exercise(state: _ParseState, line: str, line_no: int) -> None:
    state.flush_exercise()
    state.exercise = _OpenExercise(name=line[4:].strip(), line_no=line_no)


def _apply_detail(state: _ParseState, line: str, line_no: int) -> None:
    assert state.exercise is not None
    key, sep, value = line[2:].partition(":")
    key = key.strip().lower()
    value = value.strip()
    if not sep or not key or not value:
        state.warn(line_no, line, "detail is not 'key: value'")
        return

    field_name = _DETAIL_FIELDS.get(key)
    if field_name is None:
        state.warn(line_no, line, f"unknown detail '{key}'")
        return
    state.exercise.details[field_name] = value

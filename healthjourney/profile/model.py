"""User health/fitness profile collected during onboarding."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, cast

Sex = Literal["male", "female", "other"]
FitnessLevel = Literal["beginner", "intermediate", "advanced"]

SEXES: tuple[Sex, ...] = ("male", "female", "other")
FITNESS_LEVELS: tuple[FitnessLevel, ...] = ("beginner", "intermediate", "advanced")

NO_MEDICAL_HISTORY = "No specific conditions reported."


class ProfileValidationError(ValueError):
    """Raised when a profile field is missing or out of range."""


@dataclass(frozen=True)
class UserProfile:
    age: int
    sex: Sex
    height_cm: float
    weight_kg: float
    has_medical_history: bool
    fitness_level: FitnessLevel
    workout_history: str
    medical_history_text: str | None = None

    @property
    def medical_history_summary(self) -> str:
        return self.medical_history_text or NO_MEDICAL_HISTORY


def build_profile(
    *,
    age: object,
    sex: object,
    height_cm: object,
    weight_kg: object,
    has_medical_history: object,
    fitness_level: object,
    workout_history: object,
    medical_history_text: object = None,
) -> UserProfile:
    """Coerce raw form values into a validated UserProfile."""
    age_value = _parse_number(age, "age")
    if age_value != int(age_value):
        raise ProfileValidationError("age must be a whole number")
    _check_range(age_value, "age", 18, 100, "Must be at least 18")

    height_value = _parse_number(height_cm, "height_cm")
    _check_range(height_value, "height_cm", 100, 250, "Height must be in cm")
    weight_value = _parse_number(weight_kg, "weight_kg")
    _check_range(weight_value, "weight_kg", 30, 300, "Weight must be in kg")

    sex_value = _parse_choice(sex, "sex", SEXES)
    level_value = _parse_choice(fitness_level, "fitness_level", FITNESS_LEVELS)
    has_history = _parse_yes_no(has_medical_history)

    history = "" if workout_history is None else str(workout_history).strip()
    if len(history) < 10:
        raise ProfileValidationError(
            "workout_history: Please describe your workout history briefly."
        )
    if len(history) > 500:
        raise ProfileValidationError("workout_history must be at most 500 characters")

    medical_text: str | None = None
    if has_history and medical_history_text is not None:
        medical_text = str(medical_history_text).strip() or None

    return UserProfile(
        age=int(age_value),
        sex=cast(Sex, sex_value),
        height_cm=height_value,
        weight_kg=weight_value,
        has_medical_history=has_history,
        fitness_level=cast(FitnessLevel, level_value),
        workout_history=history,
        medical_history_text=medical_text,
    )


def _parse_number(raw: object, field_name: str) -> float:
    if raw is None or isinstance(raw, bool):
        raise ProfileValidationError(f"invalid {field_name}")
    try:
        value = float(str(raw).strip())
    except ValueError as exc:
        raise ProfileValidationError(f"invalid {field_name}") from exc
    if not math.isfinite(value):
        raise ProfileValidationError(f"invalid {field_name}")
    return value


def _check_range(
    value: float, field_name: str, low: float, high: float, low_message: str
) -> None:
    if value < low:
        raise ProfileValidationError(f"{field_name}: {low_message}")
    if value > high:
        raise ProfileValidationError(f"{field_name}: Please enter a valid value")


def _parse_choice(raw: object, field_name: str, choices: tuple[str, ...]) -> str:
    value = "" if raw is None else str(raw).strip().lower()
    if value not in choices:
        raise ProfileValidationError(
            f"{field_name} must be one of: {', '.join(choices)}"
        )
    return value


def _parse_yes_no(raw: object) -> bool:
    if isinstance(raw, bool):
        return raw
    value = "" if raw is None else str(raw).strip().lower()
    if value == "yes":
        return True
    if value == "no":
        return False
    raise ProfileValidationError("has_medical_history must be 'yes' or 'no'")

"""Terminal CLI entrypoint for Health Journey."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from healthjourney.plan.model import WorkoutPlan
from healthjourney.plan.parser import parse_workout_plan_with_diagnostics
from healthjourney.tracking.plan_store import (
    PlanStoreError,
    load_plan,
    plan_to_dict,
    save_plan,
)
from healthjourney.tracking.saved_plan import SavedPlan


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Health Journey workout plans")
    parser.add_argument(
        "--parse",
        metavar="FILE",
        default=None,
        help="Parse a markdown workout plan and print it as JSON",
    )
    parser.add_argument(
        "--warnings",
        action="store_true",
        help="With --parse/--save, list skipped plan lines on stderr",
    )
    parser.add_argument(
        "--save",
        metavar="FILE",
        default=None,
        help="Parse a markdown workout plan and store it for --user",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show completion of the stored plan for --user",
    )
    parser.add_argument(
        "--complete",
        nargs=2,
        type=int,
        metavar=("DAY", "EXERCISE"),
        default=None,
        help="Mark an exercise done (1-based day and exercise numbers)",
    )
    parser.add_argument(
        "--uncomplete",
        nargs=2,
        type=int,
        metavar=("DAY", "EXERCISE"),
        default=None,
        help="Mark an exercise not done (1-based day and exercise numbers)",
    )
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI) for onboarding, review and tracking",
    )
    parser.add_argument("--web-host", default="127.0.0.1", help="Host bind for --ui-web")
    parser.add_argument("--web-port", type=int, default=8090, help="Port for --ui-web")
    parser.add_argument("--user", default=None, help="User identity owning the stored plan")
    parser.add_argument(
        "--store-dir",
        type=Path,
        default=None,
        help="Directory for stored plans (default: ~/.health-journey/plans)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _read_markdown(path: str, show_warnings: bool) -> WorkoutPlan:
    text = Path(path).read_text(encoding="utf-8")
    result = parse_workout_plan_with_diagnostics(text)
    if show_warnings:
        for warning in result.warnings:
            print(
                f"line {warning.line_no}: {warning.reason}: {warning.line}",
                file=sys.stderr,
            )
    return result.plan


def run_parse(path: str, show_warnings: bool) -> int:
    plan = _read_markdown(path, show_warnings)
    print(json.dumps(plan_to_dict(plan), ensure_ascii=False, indent=2))
    return 0


def run_save(path: str, user_id: str, store_dir: Path | None, show_warnings: bool) -> int:
    plan = _read_markdown(path, show_warnings)
    out = save_plan(SavedPlan.new(plan), user_id, store_dir)
    print(f"Saved '{plan.title}' ({len(plan.days)} days, {plan.total_exercises} exercises) to {out}")
    return 0


def run_progress(user_id: str, store_dir: Path | None) -> int:
    saved = load_plan(user_id, store_dir)
    if saved is None:
        print(f"No stored plan for user '{user_id}'")
        return 1

    print(saved.plan.title)
    for day_index, day in enumerate(saved.plan.days):
        day_progress = saved.day_progress(day_index)
        print(f"  {day.heading:<32} {day_progress.completed}/{day_progress.total}")
        for exercise_index, exercise in enumerate(day.exercises):
            mark = "x" if saved.is_completed(day_index, exercise_index) else " "
            print(f"    [{mark}] {exercise.name}")
    overall = saved.progress()
    print(f"Overall: {overall.completed}/{overall.total} ({round(overall.percentage):d}%)")
    return 0


def run_mark(
    user_id: str,
    store_dir: Path | None,
    day_number: int,
    exercise_number: int,
    completed: bool,
) -> int:
    saved = load_plan(user_id, store_dir)
    if saved is None:
        print(f"No stored plan for user '{user_id}'")
        return 1

    saved.set_completed(day_number - 1, exercise_number - 1, completed)
    save_plan(saved, user_id, store_dir)
    overall = saved.progress()
    state = "done" if completed else "not done"
    print(
        f"Day {day_number} exercise {exercise_number} marked {state} "
        f"({overall.completed}/{overall.total})"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if args.parse:
        try:
            return run_parse(args.parse, args.warnings)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"Error: {exc}")
            return 1

    needs_user = args.save or args.progress or args.complete or args.uncomplete or args.ui_web
    if needs_user and not args.user:
        parser.error("--user is required for this command")

    if args.ui_web:
        from healthjourney.ui.web_app import run_web_ui

        return run_web_ui(
            user_id=args.user,
            store_dir=args.store_dir,
            host=args.web_host,
            port=args.web_port,
        )

    try:
        if args.save:
            return run_save(args.save, args.user, args.store_dir, args.warnings)
        if args.progress:
            return run_progress(args.user, args.store_dir)
        if args.complete:
            return run_mark(args.user, args.store_dir, *args.complete, completed=True)
        if args.uncomplete:
            return run_mark(args.user, args.store_dir, *args.uncomplete, completed=False)
    except (OSError, UnicodeDecodeError, PlanStoreError, IndexError) as exc:
        print(f"Error: {exc}")
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

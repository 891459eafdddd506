"""NiceGUI web UI for Health Journey."""

from __future__ import annotations

from pathlib import Path

from nicegui import events, ui

from healthjourney.plan.model import Exercise, WorkoutPlan
from healthjourney.profile.model import FITNESS_LEVELS, SEXES, ProfileValidationError
from healthjourney.tracking.saved_plan import PlanProgress
from healthjourney.ui.controller import (
    JourneyController,
    PlanUploadError,
    decode_plan_upload,
)


def _fmt_pct(progress: PlanProgress) -> str:
    return f"{round(progress.percentage):d}% complete"


def _exercise_details(exercise: Exercise) -> list[str]:
    lines: list[str] = []
    if exercise.sets:
        lines.append(f"Sets: {exercise.sets}")
    if exercise.reps:
        lines.append(f"Reps: {exercise.reps}")
    if exercise.rest:
        lines.append(f"Rest: {exercise.rest}")
    return lines


def run_web_ui(
    *,
    user_id: str,
    store_dir: Path | None = None,
    host: str = "127.0.0.1",
    port: int = 8090,
) -> int:
    controller = JourneyController(user_id, store_dir)
    ui.add_head_html(
        """
        <style>
          :root {
            --hj-bg: #f5f7f2;
            --hj-surface: #ffffff;
            --hj-text: #1f2937;
            --hj-muted: #6b7280;
            --hj-accent: #16a34a;
          }
          body {
            background: var(--hj-bg);
            color: var(--hj-text);
            font-family: Arial, "Segoe UI", sans-serif;
          }
          .hj-card {
            background: var(--hj-surface);
            border: 1px solid rgba(148, 163, 184, 0.35);
            border-radius: 14px;
            box-shadow: 0 8px 18px rgba(15, 23, 42, 0.08);
          }
          .hj-muted { color: var(--hj-muted); }
          .hj-done { background: rgba(22, 163, 74, 0.08); }
          .hj-tip {
            border-left: 4px solid var(--hj-accent);
            padding-left: 8px;
          }
        </style>
        """
    )

    with ui.row().classes("w-full items-center gap-2"):
        ui.icon("fitness_center").classes("text-3xl text-green-700")
        ui.label("Health Journey").classes("text-2xl font-bold")

    with ui.column().classes("w-full max-w-3xl mx-auto gap-4") as onboarding_view:
        with ui.card().classes("w-full hj-card"):
            ui.label("Tell us about yourself").classes("text-xl font-semibold")
            with ui.row().classes("w-full gap-2"):
                age_input = ui.number("Age", value=30, min=18, max=100)
                sex_select = ui.select(list(SEXES), value="other", label="Sex")
                height_input = ui.number("Height (cm)", value=170, min=100, max=250)
                weight_input = ui.number("Weight (kg)", value=70, min=30, max=300)
            medical_select = ui.select(
                {"no": "No", "yes": "Yes"}, value="no", label="Any medical history?"
            ).classes("w-64")
            medical_text = ui.textarea("Medical history details").classes("w-full")
            level_select = ui.select(
                list(FITNESS_LEVELS), value="beginner", label="Fitness level"
            ).classes("w-64")
            history_input = ui.textarea(
                "Workout history", placeholder="Types of exercise and how often"
            ).classes("w-full")
        with ui.card().classes("w-full hj-card"):
            ui.label("Generated plan").classes("text-xl font-semibold")
            ui.label(
                "Paste the markdown plan produced for this profile, or upload it as a file."
            ).classes("text-sm hj-muted")
            markdown_input = ui.textarea("Plan markdown").props("autogrow").classes("w-full")
            plan_upload = ui.upload(
                label="Upload plan (.md)", auto_upload=True, on_upload=lambda e: on_upload(e)
            ).props("accept=.md,.markdown,.txt").classes("w-full")
            review_btn = ui.button("Review plan").props("color=positive")

    with ui.column().classes("w-full max-w-3xl mx-auto gap-4") as review_view:
        review_title = ui.label("").classes("text-2xl font-semibold")
        ui.label("Review it and save it to start tracking.").classes("hj-muted")
        review_warnings = ui.label("").classes("text-sm text-orange-600")
        review_days = ui.column().classes("w-full gap-2")
        with ui.row().classes("w-full justify-center gap-2"):
            discard_btn = ui.button("Discard").props("outline color=negative")
            save_btn = ui.button("Save plan").props("color=positive")

    with ui.column().classes("w-full max-w-3xl mx-auto gap-4") as tracking_view:
        tracking_title = ui.label("").classes("text-2xl font-semibold")
        ui.label("Your saved plan. Keep up the great work!").classes("hj-muted")
        overall_bar = ui.linear_progress(value=0.0, show_value=False).props("color=positive")
        overall_label = ui.label("0% complete").classes("text-sm hj-muted")
        tracking_days = ui.column().classes("w-full gap-2")
        new_plan_btn = ui.button("Generate new plan").props("outline")

    def show_view(status: str) -> None:
        onboarding_view.set_visibility(status == "onboarding")
        review_view.set_visibility(status == "reviewing")
        tracking_view.set_visibility(status == "tracking")

    def render_exercise(exercise: Exercise) -> None:
        for line in _exercise_details(exercise):
            ui.label(line).classes("text-sm hj-muted")
        if exercise.tips:
            ui.label(f"Tip: {exercise.tips}").classes("text-xs hj-tip")

    def render_review(plan: WorkoutPlan) -> None:
        review_title.text = plan.title
        warnings = controller.warnings
        review_warnings.text = (
            f"{len(warnings)} line(s) could not be read and were skipped" if warnings else ""
        )
        review_days.clear()
        with review_days:
            if not plan.days:
                ui.label("No workout days were found in this plan.").classes("hj-muted")
            for index, day in enumerate(plan.days):
                with ui.expansion(day.heading, value=index == 0).classes("w-full hj-card"):
                    for exercise in day.exercises:
                        with ui.card().classes("w-full"):
                            ui.label(exercise.name).classes("text-lg font-semibold")
                            render_exercise(exercise)

    def refresh_progress() -> None:
        saved = controller.saved_plan
        if saved is None:
            return
        overall = saved.progress()
        overall_bar.value = overall.percentage / 100.0
        overall_label.text = _fmt_pct(overall)

    def render_tracking() -> None:
        saved = controller.saved_plan
        if saved is None:
            return
        tracking_title.text = saved.plan.title
        tracking_days.clear()
        with tracking_days:
            for day_index, day in enumerate(saved.plan.days):
                day_progress = saved.day_progress(day_index)
                with ui.expansion(
                    f"{day.heading} ({day_progress.completed}/{day_progress.total})",
                    value=day_index == 0,
                ).classes("w-full hj-card"):
                    for exercise_index, exercise in enumerate(day.exercises):
                        done = saved.is_completed(day_index, exercise_index)
                        with ui.card().classes("w-full" + (" hj-done" if done else "")):
                            ui.checkbox(
                                exercise.name,
                                value=done,
                                on_change=lambda e, d=day_index, x=exercise_index: on_toggle(
                                    d, x, bool(e.value)
                                ),
                            ).classes("text-lg font-semibold")
                            render_exercise(exercise)
        refresh_progress()

    def on_review() -> None:
        try:
            controller.submit_profile(
                age=age_input.value,
                sex=sex_select.value,
                height_cm=height_input.value,
                weight_kg=weight_input.value,
                has_medical_history=medical_select.value,
                medical_history_text=medical_text.value,
                fitness_level=level_select.value,
                workout_history=history_input.value,
            )
        except ProfileValidationError as exc:
            ui.notify(str(exc), color="negative")
            return
        markdown = str(markdown_input.value or "")
        if not markdown.strip():
            ui.notify("Paste a generated plan first", color="negative")
            return
        render_review(controller.review_markdown(markdown))
        show_view(controller.status)

    def on_upload(e: events.UploadEventArguments) -> None:
        try:
            markdown_input.value = decode_plan_upload(e.content.read())
        except PlanUploadError as exc:
            ui.notify(f"{e.name}: {exc}", color="negative")
        else:
            ui.notify(f"Loaded {e.name}")
        plan_upload.reset()

    def on_save() -> None:
        try:
            saved = controller.save_plan()
        except OSError as exc:
            ui.notify(f"Could not save plan: {exc}", color="negative")
            return
        ui.notify(f"Plan saved: {saved.plan.title}", color="positive")
        render_tracking()
        show_view(controller.status)

    def on_discard() -> None:
        controller.discard_plan()
        show_view(controller.status)

    def on_toggle(day_index: int, exercise_index: int, completed: bool) -> None:
        try:
            controller.update_progress(day_index, exercise_index, completed)
        except OSError as exc:
            ui.notify(f"Could not save progress: {exc}", color="negative")
        # Re-render either way so the checkbox reflects the stored state.
        render_tracking()

    def on_generate_new() -> None:
        controller.generate_new()
        markdown_input.value = ""
        show_view(controller.status)

    medical_select.on_value_change(
        lambda _: medical_text.set_visibility(medical_select.value == "yes")
    )
    review_btn.on_click(on_review)
    save_btn.on_click(on_save)
    discard_btn.on_click(on_discard)
    new_plan_btn.on_click(on_generate_new)

    medical_text.set_visibility(False)
    render_tracking()
    show_view(controller.status)
    ui.run(host=host, port=port, reload=False, title="Health Journey")
    return 0

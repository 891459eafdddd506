from __future__ import annotations

import json
from pathlib import Path

import pytest

from healthjourney.cli.main import main
from healthjourney.tracking.plan_store import load_plan, plan_path

PLAN_MD = """\
# Weekly Kickstarter
## Day 1: Full Body
### Push-ups
- Sets: 3
- Tempo: slow
## Day 2: Cardio
### Running
- Reps: 20 minutes
"""


@pytest.fixture
def plan_file(tmp_path: Path) -> Path:
    path = tmp_path / "plan.md"
    path.write_text(PLAN_MD, encoding="utf-8")
    return path


def test_parse_prints_json(plan_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--parse", str(plan_file), "--warnings"]) == 0

    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert payload["title"] == "Weekly Kickstarter"
    assert payload["days"][0]["exercises"] == [{"name": "Push-ups", "sets": "3"}]
    assert "unknown detail 'tempo'" in captured.err


def test_parse_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--parse", str(tmp_path / "missing.md")]) == 1
    assert "Error:" in capsys.readouterr().out


def test_save_complete_and_progress(
    plan_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    store = tmp_path / "store"
    common = ["--user", "alice", "--store-dir", str(store)]

    assert main(["--save", str(plan_file), *common]) == 0
    assert main(["--complete", "2", "1", *common]) == 0
    capsys.readouterr()

    assert main(["--progress", *common]) == 0
    out = capsys.readouterr().out
    assert "Weekly Kickstarter" in out
    assert "[x] Running" in out
    assert "[ ] Push-ups" in out
    assert "Overall: 1/2 (50%)" in out

    assert main(["--uncomplete", "2", "1", *common]) == 0
    stored = load_plan("alice", base_dir=store)
    assert stored is not None
    assert stored.is_completed(1, 0) is False


def test_complete_out_of_range(plan_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    common = ["--user", "bob", "--store-dir", str(tmp_path)]
    main(["--save", str(plan_file), *common])

    assert main(["--complete", "5", "1", *common]) == 1
    assert "Error:" in capsys.readouterr().out


def test_progress_without_stored_plan(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--progress", "--user", "nobody", "--store-dir", str(tmp_path)]) == 1
    assert "No stored plan" in capsys.readouterr().out


def test_user_required(plan_file: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--save", str(plan_file)])
    assert exc_info.value.code == 2


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "usage:" in capsys.readouterr().out


def test_non_utf8_markdown_reports_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "latin1.md"
    path.write_bytes(b"# Plan\xff\n")

    assert main(["--parse", str(path)]) == 1
    assert "Error:" in capsys.readouterr().out

    assert main(["--save", str(path), "--user", "alice", "--store-dir", str(tmp_path)]) == 1
    assert "Error:" in capsys.readouterr().out


def test_unreadable_stored_plan_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    plan_path("bob", tmp_path).write_bytes(b"\xff\xfe{}")

    assert main(["--progress", "--user", "bob", "--store-dir", str(tmp_path)]) == 1
    assert "Error:" in capsys.readouterr().out

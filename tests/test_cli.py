"""
Test the one-shot CLI end to end by running `python -m pcrm`.

Each test gets its own PCRM_HOME so the database starts fresh.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def run_cli(tmp_path):
    """Run pcrm with an empty board in tmp_path; returns the CompletedProcess."""
    env = os.environ.copy()
    env["PCRM_HOME"] = str(tmp_path / "home")
    env["PCRM_SEED"] = "0"
    env.pop("PCRM_DUE_SOON_DAYS", None)

    def run(*args, input=None):
        return subprocess.run(
            [sys.executable, "-m", "pcrm", *args],
            input=input,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
            cwd=PROJECT_ROOT,
            env=env,
        )

    return run


def _add(run_cli, *args):
    result = run_cli("add", *args, "--json")
    assert result.returncode == 0, result.stderr
    return json.loads(result.stdout)


def test_version(run_cli):
    """version prints the program name and version."""
    result = run_cli("version")
    assert result.returncode == 0
    assert "pcrm v" in result.stdout
    print("✓ version works")


def test_data_files_live_in_pcrm_home(run_cli, tmp_path):
    """Database and log file are written under PCRM_HOME."""
    _add(run_cli, "Call Mike")

    home = tmp_path / "home"
    assert (home / "pcrm.db").exists()
    assert (home / "pcrm.log").exists()


def test_no_command_launches_repl(run_cli):
    """Running pcrm alone opens the REPL; 'exit' quits cleanly."""
    result = run_cli(input="exit\n")
    assert "pcrm REPL" in result.stdout, result.stdout
    assert "Goodbye!" in result.stdout
    assert result.returncode == 0


def test_add_and_list(run_cli):
    """Tasks created via add show up in ls --json."""
    task = _add(run_cli, "Call Mike", "--category", "dealership", "--due", "2024-06-03")
    assert task["title"] == "Call Mike"
    assert task["category"] == "Dealership"
    assert task["status"] == "Active"
    assert task["dueDate"] == "2024-06-03"

    result = run_cli("ls", "--json")
    assert result.returncode == 0
    assert [t["id"] for t in json.loads(result.stdout)] == [task["id"]]


def test_add_rejects_bad_input(run_cli):
    """Empty titles and unknown categories exit 1 without storing anything."""
    assert run_cli("add", "   ").returncode == 1
    result = run_cli("add", "X", "--category", "hobby")
    assert result.returncode == 1
    assert "Invalid category" in result.stderr
    assert json.loads(run_cli("ls", "--json").stdout) == []


def test_ls_filters_and_raw_output(run_cli):
    """Category, status and search filters narrow the listing."""
    family = _add(run_cli, "Dinner with parents", "-c", "family", "-s", "pending")
    _add(run_cli, "Gym", "-c", "personal")

    result = run_cli("ls", "--category", "family", "--json")
    assert [t["id"] for t in json.loads(result.stdout)] == [family["id"]]

    result = run_cli("ls", "--status", "active", "--json")
    assert [t["title"] for t in json.loads(result.stdout)] == ["Gym"]

    result = run_cli("ls", "--search", "DINNER", "--raw")
    assert result.stdout.strip() == f"{family['id']} [ ] Family | Dinner with parents | due -"


def test_done_toggles(run_cli):
    """done completes a task; running it again reopens it as Active."""
    task = _add(run_cli, "Call Mike", "--status", "pending")
    short = task["id"][:8]

    result = run_cli("done", short, "--raw")
    assert result.stdout.strip() == f"{task['id']}: Completed"
    result = run_cli("done", short, "--raw")
    assert result.stdout.strip() == f"{task['id']}: Active"


def test_edit_and_show(run_cli):
    """edit changes only the given fields; --no-due clears the due date."""
    task = _add(run_cli, "Call Mike", "--due", "2024-06-03")

    result = run_cli("edit", task["id"], "--title", "Call Mike again", "--no-due", "--json")
    edited = json.loads(result.stdout)
    assert edited["title"] == "Call Mike again"
    assert "dueDate" not in edited or edited["dueDate"] is None
    assert edited["createdAt"] == task["createdAt"]

    shown = json.loads(run_cli("show", task["id"], "--json").stdout)
    assert shown == edited

    assert run_cli("edit", task["id"]).returncode == 1


def test_rm_unknown_id_fails(run_cli):
    """Deleting a missing task exits 1 and leaves the board alone."""
    task = _add(run_cli, "Keep me")

    result = run_cli("rm", "doesnotexist")
    assert result.returncode == 1
    assert "not found" in result.stderr.lower()

    result = run_cli("rm", task["id"], "--raw")
    assert result.returncode == 0
    assert json.loads(run_cli("ls", "--json").stdout) == []


def test_next_steps(run_cli):
    """step add / ls / done / rm work by step number."""
    task = _add(run_cli, "Call Mike")

    step = json.loads(run_cli("step", "add", task["id"], "Send numbers", "--due", "2024-06-02", "--json").stdout)
    assert step["text"] == "Send numbers"
    assert step["dueDate"] == "2024-06-02"
    run_cli("step", "add", task["id"], "Follow up")

    result = run_cli("step", "ls", task["id"], "--raw")
    assert result.stdout.splitlines() == [
        "1 [ ] Send numbers | due 2024-06-02",
        "2 [ ] Follow up | due -",
    ]

    assert run_cli("step", "done", task["id"], "1").returncode == 0
    assert run_cli("step", "rm", task["id"], "2").returncode == 0

    steps = json.loads(run_cli("step", "ls", task["id"], "--json").stdout)
    assert [(s["text"], s["done"]) for s in steps] == [("Send numbers", True)]

    assert run_cli("step", "rm", task["id"], "9").returncode == 1


def test_export_then_import(run_cli, tmp_path):
    """Export writes a JSON array that import restores."""
    task = _add(run_cli, "Call Mike")
    out_dir = tmp_path / "backups"
    out_dir.mkdir()

    result = run_cli("export", "--output", str(out_dir), "--raw")
    assert result.returncode == 0
    exported = Path(result.stdout.strip())
    assert exported.parent == out_dir
    assert exported.name.startswith("personal-crm-tasks-")

    run_cli("rm", task["id"])
    result = run_cli("import", str(exported))
    assert result.returncode == 0
    assert [t["id"] for t in json.loads(run_cli("ls", "--json").stdout)] == [task["id"]]


def test_bad_import_leaves_tasks_unchanged(run_cli, tmp_path):
    """A malformed file exits 1 with a warning; the board is unchanged."""
    task = _add(run_cli, "Keep me")
    bad = tmp_path / "bad.json"
    bad.write_text('{"not": "an array"}', encoding="utf-8")

    result = run_cli("import", str(bad))
    assert result.returncode == 1
    assert "Warning" in result.stderr
    assert [t["id"] for t in json.loads(run_cli("ls", "--json").stdout)] == [task["id"]]


def test_stats_json(run_cli):
    """stats --json reports totals over every task."""
    _add(run_cli, "A", "-c", "family")
    done = _add(run_cli, "B", "-c", "family")
    run_cli("done", done["id"])

    data = json.loads(run_cli("stats", "--json").stdout)
    assert data["total"] == 2
    assert data["active"] == 1
    assert data["counts"]["Family"] == 2
    assert data["counts"]["Business"] == 0


def test_calendar_json(run_cli):
    """Month mode has 42 Sunday-first cells; tasks show on their dates."""
    task = _add(run_cli, "Call Mike", "--due", "2024-06-03")

    data = json.loads(run_cli("cal", "--date", "2024-06-15", "--json").stdout)
    assert data["mode"] == "month"
    assert len(data["days"]) == 42
    assert data["days"][0]["date"] == "2024-05-26"
    cell = next(d for d in data["days"] if d["date"] == "2024-06-03")
    assert cell["tasks"] == [task["id"]]

    week = json.loads(run_cli("cal", "--mode", "week", "--date", "2024-06-05", "--json").stdout)
    assert [d["date"] for d in week["days"]][0] == "2024-06-02"
    assert len(week["days"]) == 7


def test_first_run_seeds_board(tmp_path):
    """Without PCRM_SEED=0 the first run starts with five sample tasks."""
    env = os.environ.copy()
    env["PCRM_HOME"] = str(tmp_path / "seeded")
    env.pop("PCRM_SEED", None)
    result = subprocess.run(
        [sys.executable, "-m", "pcrm", "ls", "--json"],
        capture_output=True,
        text=True,
        encoding='utf-8',
        errors='replace',
        cwd=PROJECT_ROOT,
        env=env,
    )
    assert result.returncode == 0, result.stderr
    assert len(json.loads(result.stdout)) == 5

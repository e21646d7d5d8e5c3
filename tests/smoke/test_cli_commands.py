"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They check a few headline numbers but leave the detailed math to the unit tests.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(*args: str, timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m learnpath.cli.main'
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    result = subprocess.run(
        [sys.executable, "-m", "learnpath.cli.main", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


def write_json(directory: Path, name: str, payload: dict) -> str:
    path = directory / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


@pytest.fixture
def submission_file(tmp_path):
    return write_json(
        tmp_path,
        "attempts.json",
        {
            "user_id": "u1",
            "topic_id": "subnetting",
            "record": {
                "topic_id": "subnetting",
                "mastery_level": 0.5,
                "total_attempts": 4,
                "correct_attempts": 2,
            },
            "attempts": [
                {"is_correct": True, "difficulty": "medium", "occurred_at": "2024-03-15T10:00:00Z"},
                {"is_correct": False, "difficulty": "hard", "occurred_at": "2024-03-15T10:01:00Z"},
            ],
        },
    )


@pytest.fixture
def path_file(tmp_path):
    return write_json(
        tmp_path,
        "catalog.json",
        {
            "certification_id": "ccna",
            "now": "2024-03-15T12:00:00Z",
            "topics": [
                {"id": "t1", "name": "OSI Model"},
                {"id": "t2", "name": "IPv4 Addressing"},
                {"id": "t3", "name": "Subnetting"},
                {"id": "t4", "name": "VLANs"},
            ],
            "mastery": [
                {"topic_id": "t1", "mastery_level": 0.9, "total_attempts": 20, "correct_attempts": 18,
                 "last_practiced_at": "2024-03-13T12:00:00Z"},
                {"topic_id": "t2", "mastery_level": 0.2, "total_attempts": 5, "correct_attempts": 1,
                 "last_practiced_at": "2024-03-12T12:00:00Z"},
                {"topic_id": "t3", "mastery_level": 0.6, "total_attempts": 10, "correct_attempts": 6,
                 "last_practiced_at": "2024-03-14T12:00:00Z"},
                {"topic_id": "t4", "mastery_level": 0.1, "total_attempts": 2, "correct_attempts": 0,
                 "last_practiced_at": "2024-03-05T12:00:00Z"},
            ],
        },
    )


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "learnpath" in stdout.lower()
        assert "submit" in stdout
        assert "path" in stdout

    @pytest.mark.parametrize("command", ["submit", "path", "level"])
    def test_command_help(self, command):
        code, stdout, stderr = run_cli_command(command, "--help")
        assert code == 0, f"{command} --help failed: {stderr}"


class TestSubmitCommand:
    """Test the submit command."""

    def test_submit_json(self, submission_file):
        code, stdout, stderr = run_cli_command("submit", submission_file, "--json")

        assert code == 0, f"submit failed: {stderr}"
        result = json.loads(stdout)
        # 0.5 -> 0.64 (medium, streak 1) -> 0.565 (hard miss)
        assert result["record"]["mastery_level"] == pytest.approx(0.565)
        assert result["record"]["total_attempts"] == 6
        assert result["record"]["consecutive_correct"] == 0
        assert result["xp_earned"] == 15
        assert [a["xp_earned"] for a in result["attempts"]] == [15, 0]

    def test_submit_table(self, submission_file):
        code, stdout, stderr = run_cli_command("submit", submission_file)

        assert code == 0, f"submit failed: {stderr}"
        assert "subnetting" in stdout
        assert "XP earned" in stdout

    def test_submit_level_up(self, tmp_path):
        request = write_json(
            tmp_path,
            "level_up.json",
            {"topic_id": "t1", "total_xp": 90, "attempts": [{"is_correct": True, "difficulty": "medium"}]},
        )
        code, stdout, stderr = run_cli_command("submit", request, "--json")

        assert code == 0, f"submit failed: {stderr}"
        result = json.loads(stdout)
        assert result["total_xp"] == 105
        assert result["leveled_up"] is True
        assert result["new_level"] == 2

    def test_submit_bracketed_topic_id(self, tmp_path):
        request = write_json(
            tmp_path,
            "brackets.json",
            {"topic_id": "routing [/]", "attempts": [{"is_correct": True}]},
        )
        code, stdout, stderr = run_cli_command("submit", request)

        assert code == 0, f"submit failed: {stderr}"
        assert "routing [/]" in stdout

    def test_submit_invalid_file(self, tmp_path):
        bad = write_json(tmp_path, "bad.json", {"topic_id": "t1", "attempts": []})
        code, stdout, stderr = run_cli_command("submit", bad)

        assert code == 1
        assert "Invalid input" in stdout

    def test_submit_missing_file(self, tmp_path):
        code, stdout, stderr = run_cli_command("submit", str(tmp_path / "missing.json"))
        assert code == 1


class TestPathCommand:
    """Test the path command."""

    def test_path_json(self, path_file):
        code, stdout, stderr = run_cli_command("path", path_file, "--json")

        assert code == 0, f"path failed: {stderr}"
        result = json.loads(stdout)
        assert [e["topic_id"] for e in result["path"]] == ["t4", "t2", "t3", "t1"]
        assert [e["is_due"] for e in result["path"]] == [True, True, False, False]
        assert result["certification_mastery"] == pytest.approx(0.45)

    def test_path_limit(self, path_file):
        code, stdout, stderr = run_cli_command("path", path_file, "--json", "--limit", "2")

        assert code == 0, f"path failed: {stderr}"
        assert [e["topic_id"] for e in json.loads(stdout)["path"]] == ["t4", "t2"]

    def test_path_table(self, path_file):
        code, stdout, stderr = run_cli_command("path", path_file)

        assert code == 0, f"path failed: {stderr}"
        assert "VLANs" in stdout
        assert "Certification mastery" in stdout


    def test_path_bracketed_names(self, tmp_path):
        request = write_json(
            tmp_path,
            "brackets.json",
            {
                "certification_id": "ccna [bold]",
                "topics": [{"id": "t1", "name": "Routing [/]"}, {"id": "t2", "name": "[red]Switching"}],
            },
        )
        code, stdout, stderr = run_cli_command("path", request)

        assert code == 0, f"path failed: {stderr}"
        assert "Routing [/]" in stdout
        assert "[red]Switching" in stdout


class TestLevelCommand:
    """Test the level command."""

    def test_level(self):
        code, stdout, stderr = run_cli_command("level", "250")

        assert code == 0, f"level failed: {stderr}"
        assert "Level 3" in stdout

"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

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


def run_cli_command(command: str, timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        command: The command to run (after 'python -m src.cli.prioritizer_cli')
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    full_command = f"{sys.executable} -m src.cli.prioritizer_cli {command}"

    result = subprocess.run(
        full_command,
        shell=True,
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


@pytest.fixture
def progress_path(tmp_path):
    path = tmp_path / "progress.json"
    path.write_text(
        json.dumps({"indicative|pres": 85, "indicative|pretIndef": 40, "subjunctive|subjPres": 10}),
        encoding="utf-8",
    )
    return path


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "Commands" in stdout
        assert "plan" in stdout

    @pytest.mark.parametrize("command", ["plan", "stage", "gaps", "weights", "chain"])
    def test_command_help(self, command):
        """Each command's help should work."""
        code, stdout, stderr = run_cli_command(f"{command} --help")

        assert code == 0, f"{command} help failed: {stderr}"


class TestCLIPlan:
    """Test plan command."""

    def test_plan_runs(self):
        """Plan command should complete without error."""
        code, stdout, stderr = run_cli_command("plan B1")

        assert code == 0, f"Plan failed with: {stderr}"
        assert "Core" in stdout

    def test_plan_with_progress(self, progress_path):
        code, stdout, stderr = run_cli_command(f'plan B1 --progress "{progress_path}"')

        assert code == 0, f"Plan failed with: {stderr}"
        assert "Progression Path" in stdout

    def test_plan_json(self, progress_path):
        """JSON output should be machine readable."""
        code, stdout, stderr = run_cli_command(f'plan A2 -p "{progress_path}" --json')

        assert code == 0, f"Plan --json failed with: {stderr}"
        summary = json.loads(stdout)
        assert summary["level"] == "A2"
        assert summary["has_progress"] is True


class TestCLIOtherCommands:
    """Test stage, gaps, weights and chain."""

    def test_stage_runs(self, progress_path):
        code, stdout, stderr = run_cli_command(f'stage B1 -p "{progress_path}"')

        assert code == 0, f"Stage failed with: {stderr}"

    def test_gaps_runs(self, progress_path):
        code, stdout, stderr = run_cli_command(f'gaps B1 -p "{progress_path}"')

        assert code == 0, f"Gaps failed with: {stderr}"
        assert "indicative|pretIndef" in stdout

    def test_weights_runs(self):
        code, stdout, stderr = run_cli_command("weights C2")

        assert code == 0, f"Weights failed with: {stderr}"

    def test_chain_runs(self):
        code, stdout, stderr = run_cli_command('chain "subjunctive|subjPlusc"')

        assert code == 0, f"Chain failed with: {stderr}"


class TestCLIErrors:
    """Bad input should fail gracefully."""

    def test_invalid_level(self):
        code, stdout, stderr = run_cli_command("plan Q7")

        assert code == 2
        assert "Traceback" not in stderr

    def test_missing_progress_file(self, tmp_path):
        code, stdout, stderr = run_cli_command(f'plan B1 -p "{tmp_path / "nope.json"}"')

        assert code == 1
        assert "Traceback" not in stderr


class TestCLIOutputFormat:
    """Test that CLI output is properly formatted."""

    def test_plan_uses_tables(self):
        """Plan should use formatted tables."""
        code, stdout, stderr = run_cli_command("plan A1")

        if code == 0:
            # Rich tables use box characters or separators
            assert "|" in stdout or "─" in stdout or "+" in stdout, (
                "Plan output should use table formatting"
            )

    def test_no_python_exceptions(self):
        """Commands should not print Python exceptions."""
        commands = ["plan B2", "stage A1", "gaps C1", "weights B1"]

        for cmd in commands:
            code, stdout, stderr = run_cli_command(cmd)

            assert "Traceback" not in stdout, f"Exception in {cmd} stdout"
            assert "Traceback" not in stderr, f"Crash in {cmd}: {stderr}"


class TestCLIPerformance:
    """Test CLI performance."""

    def test_help_fast(self):
        """Help should complete very quickly."""
        import time

        start = time.time()

        code, stdout, stderr = run_cli_command("--help", timeout=10)

        elapsed = time.time() - start

        assert elapsed < 5, f"Help took {elapsed:.1f}s, expected < 5s"

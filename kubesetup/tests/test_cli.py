import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli_command(cmd):
    return subprocess.run(
        [sys.executable, "-m", "kubesetup.cli"] + cmd.split(),
        capture_output=True, text=True, cwd=REPO_ROOT,
    )


def test_help():
    result = run_cli_command("--help")
    assert "Usage" in result.stdout
    for group in ("install", "reset", "check", "steps", "status"):
        assert group in result.stdout


def test_install_help():
    result = run_cli_command("install run --help")
    assert "--dry-run" in result.stdout
    assert "--config" in result.stdout


def test_reset_help():
    result = run_cli_command("reset cluster --help")
    assert "--force" in result.stdout


def test_steps_list():
    result = run_cli_command("steps list")
    assert result.returncode == 0
    lines = result.stdout.splitlines()
    assert lines[0].split()[1] == "check-os"
    assert lines[-1].split()[1] == "install-helm"


def test_invalid_settings_exit_non_zero(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("not_a_setting: true\n")
    result = run_cli_command(f"install run --dry-run --config {config}")
    assert result.returncode == 1
    assert "Settings validation error" in result.stdout

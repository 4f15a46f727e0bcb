import logging

import pytest

from kubesetup.errors import CommandError
from kubesetup.modules.runner import CommandRunner, shell_args


def test_output_is_streamed_to_logger(caplog):
    caplog.set_level(logging.INFO, logger="kubesetup")
    result = CommandRunner().run(["printf", "one\\ntwo\\n"])
    assert result.ok
    assert result.output == "one\ntwo"
    messages = [r.getMessage() for r in caplog.records]
    assert messages[-2:] == ["one", "two"]


def test_stderr_is_merged():
    result = CommandRunner().run("echo out; echo err >&2")
    assert result.output.splitlines() == ["out", "err"]


def test_pipeline_failure_is_not_masked():
    with pytest.raises(CommandError) as exc:
        CommandRunner().run("false | true")
    assert exc.value.returncode == 1


def test_exit_status_is_propagated():
    with pytest.raises(CommandError) as exc:
        CommandRunner().run("exit 3")
    assert exc.value.returncode == 3
    assert CommandRunner().run("exit 3", check=False).returncode == 3


def test_input_and_log_file(tmp_path):
    log_file = tmp_path / "logs" / "init.log"
    result = CommandRunner().run(["cat"], input="hello\n", log_file=log_file)
    assert result.output == "hello"
    assert log_file.read_text() == "hello\n"


def test_environment_is_exported():
    runner = CommandRunner(env={"DEBIAN_FRONTEND": "noninteractive"})
    assert runner.run("echo $DEBIAN_FRONTEND").output == "noninteractive"
    assert runner.run("echo $EXTRA", env={"EXTRA": "1"}).output == "1"


def test_missing_binary():
    with pytest.raises(CommandError) as exc:
        CommandRunner().run(["definitely-not-a-real-binary-kubesetup"])
    assert exc.value.returncode == 127


def test_dry_run_does_not_execute(tmp_path):
    marker = tmp_path / "touched"
    result = CommandRunner(dry_run=True).run(["touch", str(marker)])
    assert result.ok
    assert not marker.exists()


def test_run_as_user_wraps_in_su():
    args = CommandRunner()._build_args(["kubectl", "get", "pods", "-A"], "px-admin")
    assert args == ["su", "-", "px-admin", "-c", "kubectl get pods -A"]


def test_shell_args_enable_pipefail():
    assert shell_args("a | b") == ["bash", "-o", "errexit", "-o", "pipefail", "-c", "a | b"]


def test_undecodable_output_is_replaced():
    result = CommandRunner().run("printf 'ok\\n\\377\\376 bad bytes\\n'")
    assert result.ok
    first, second = result.output.splitlines()
    assert first == "ok"
    assert "\ufffd" in second
    assert second.endswith(" bad bytes")


def test_child_exiting_before_reading_input():
    payload = "x" * 1_000_000
    assert CommandRunner().run("exit 4", input=payload, check=False).returncode == 4
    with pytest.raises(CommandError) as exc:
        CommandRunner().run("exit 4", input=payload)
    assert exc.value.returncode == 4

import logging
import socket

import pytest

from kubesetup.logging import build_syslog_handler, get_logger, setup_logging
from kubesetup.modules.runner import CommandRunner


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.lines = []

    def emit(self, record):
        self.lines.append(self.format(record))


def test_every_line_reaches_both_sinks(capsys):
    syslog = ListHandler()
    setup_logging(syslog_handler=syslog)

    get_logger("driver").info("====> Installing containerd...")
    CommandRunner().run(["echo", "from a command"])

    console = capsys.readouterr().out.splitlines()
    assert console == ["====> Installing containerd...", "from a command"]
    assert syslog.lines == console


def test_debug_lines_only_with_debug(capsys):
    syslog = ListHandler()
    setup_logging(debug_mode=False, syslog_handler=syslog)
    get_logger("x").debug("hidden")
    assert syslog.lines == []

    setup_logging(debug_mode=True, syslog_handler=syslog)
    get_logger("x").debug("shown")
    assert syslog.lines == ["shown"]


def test_missing_syslog_socket_falls_back_to_console(tmp_path, capsys):
    logger = setup_logging(syslog_address=str(tmp_path / "no-such-socket"))
    assert len(logger.handlers) == 1
    assert "syslog unavailable" in capsys.readouterr().out


def test_syslog_lines_are_tagged(tmp_path):
    address = str(tmp_path / "log.sock")
    server = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    server.bind(address)
    server.settimeout(5)
    try:
        handler = build_syslog_handler("K8S-SETUP", address)
        setup_logging(syslog_handler=handler)
        get_logger("driver").info("====> Checking Operating System...")
        data = server.recv(4096)
    finally:
        server.close()
    assert b"K8S-SETUP: ====> Checking Operating System..." in data


def test_get_logger_nests_under_package():
    assert get_logger("driver").name == "kubesetup.driver"
    assert get_logger("kubesetup.modules.runner").name == "kubesetup.modules.runner"


def test_unreachable_syslog_socket_is_rejected(tmp_path):
    with pytest.raises(OSError):
        build_syslog_handler("K8S-SETUP", str(tmp_path / "no-such-socket"))


def test_logging_after_fallback_has_no_handler_errors(tmp_path, capsys):
    setup_logging(syslog_address=str(tmp_path / "no-such-socket"))
    get_logger("driver").info("====> Checking Operating System...")
    captured = capsys.readouterr()
    assert "====> Checking Operating System..." in captured.out
    assert "Logging error" not in captured.err

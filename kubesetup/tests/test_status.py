from typer.testing import CliRunner
from urllib3.exceptions import MaxRetryError

from kubesetup.cli import app
from kubesetup.commands import status

runner = CliRunner()


def unreachable(api):
    raise MaxRetryError(None, "https://127.0.0.1:6443/api/v1/nodes", reason="Connection refused")


def test_unreachable_api_server_exits_cleanly(monkeypatch):
    monkeypatch.setattr(status, "load_kubeconfig", lambda path: None)
    monkeypatch.setattr(status, "node_summary", unreachable)
    result = runner.invoke(app, ["status", "cluster"])
    assert result.exit_code == 1
    assert "Cannot reach Kubernetes API" in result.output
    assert not isinstance(result.exception, MaxRetryError)


def test_missing_kubeconfig_exits_cleanly(tmp_path):
    result = runner.invoke(app, ["status", "cluster", "--kubeconfig", str(tmp_path / "missing.conf")])
    assert result.exit_code == 1

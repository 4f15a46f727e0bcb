import typer

from kubesetup.commands.common import finish, prepare
from kubesetup.modules.driver import run_install

app = typer.Typer()


@app.command("run")
def install_cmd(
    ctx: typer.Context,
    config_file: str = typer.Option(None, "--config", "-c", help="YAML file overriding default settings"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Log every command without changing the host"),
):
    """
    Provision a single-node Kubernetes cluster on this host.

    Stops at the first failing step and exits with that step's status.
    """
    settings = prepare(ctx, config_file)
    finish(run_install(settings, dry_run=dry_run))

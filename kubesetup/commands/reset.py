import typer

from kubesetup.commands.common import finish, prepare
from kubesetup.modules.driver import run_reset

app = typer.Typer()


@app.command("cluster")
def reset_cluster_cmd(
    ctx: typer.Context,
    config_file: str = typer.Option(None, "--config", "-c", help="YAML file overriding default settings"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be reset without making changes"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
):
    """
    Reset the local Kubernetes control plane.

    Runs kubeadm reset and removes the CNI configuration and etcd data.
    """
    settings = prepare(ctx, config_file)
    if not force and not dry_run:
        typer.confirm(
            "This will destroy the Kubernetes cluster on this host. Continue?",
            abort=True
        )
    finish(run_reset(settings, dry_run=dry_run))

import logging

import typer

from kubesetup.commands.common import prepare
from kubesetup.errors import UnsupportedOSError
from kubesetup.modules.preflight import check_os

app = typer.Typer()
logger = logging.getLogger("kubesetup.commands.check")


@app.command("os")
def check_os_cmd(
    ctx: typer.Context,
    config_file: str = typer.Option(None, "--config", "-c", help="YAML file overriding default settings"),
):
    """Verify this host runs the supported operating system without changing anything."""
    settings = prepare(ctx, config_file)
    try:
        release = check_os(settings.paths.os_release, settings.os_id, settings.os_version_id)
    except UnsupportedOSError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)
    logger.info(f"Supported OS detected: {release.pretty_name or release.id + ' ' + release.version_id}")

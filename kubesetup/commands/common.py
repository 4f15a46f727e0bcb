"""Helpers shared by the command groups."""
import logging
from typing import Optional

import typer

from kubesetup.config import Settings, load_settings
from kubesetup.errors import ConfigError
from kubesetup.logging import setup_logging
from kubesetup.models import RunReport


def prepare(ctx: typer.Context, config_file: Optional[str]) -> Settings:
    """Load settings and configure logging for a command, exiting on bad settings."""
    debug = bool(ctx.obj and ctx.obj.get("debug"))
    try:
        settings = load_settings(config_file)
    except ConfigError as e:
        setup_logging(debug, syslog_address=None)
        logging.getLogger("kubesetup").error(f"ERROR: {e}")
        raise typer.Exit(code=1)
    setup_logging(debug, tag=settings.log_tag, syslog_address=settings.syslog_address)
    return settings


def finish(report: RunReport) -> None:
    """Turn a run report into the process exit status."""
    if not report.success:
        raise typer.Exit(code=report.exit_code)

import logging
import sys

import typer

from kubesetup.commands import check, install, reset, status, steps

app = typer.Typer(help="Single-node Kubernetes provisioning.")

# Add all command groups
app.add_typer(install.app, name="install")
app.add_typer(reset.app, name="reset")
app.add_typer(check.app, name="check")
app.add_typer(steps.app, name="steps")
app.add_typer(status.app, name="status")


# Global options callback
@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """kubesetup - single-node Kubernetes provisioning CLI."""
    ctx.obj = {"debug": debug}


def run() -> None:
    try:
        app()
    except Exception as e:
        logging.getLogger("kubesetup").error(f"Error: {e}", exc_info="--debug" in sys.argv)
        sys.exit(1)


if __name__ == "__main__":
    run()

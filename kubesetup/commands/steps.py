import typer

from kubesetup.modules.driver import default_steps

app = typer.Typer()


@app.command("list")
def list_steps():
    """Show the installation steps in execution order."""
    for index, step in enumerate(default_steps(), start=1):
        description = step.description or "Reset the cluster if it was initialized before"
        typer.echo(f"{index:2d}. {step.name:<24} {description}")

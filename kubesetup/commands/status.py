import typer
from kubernetes import client
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from kubesetup.utils.kube import load_kubeconfig, node_summary, pod_phase_counts

app = typer.Typer()


@app.command("cluster")
def status_cluster(
    kubeconfig: str = typer.Option("/etc/kubernetes/admin.conf", "--kubeconfig", "-k", help="Path to kubeconfig"),
):
    """Show node readiness and pod phases of the local cluster."""
    try:
        load_kubeconfig(kubeconfig)
    except (FileNotFoundError, ValueError, ConfigException) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)

    api = client.CoreV1Api()
    try:
        nodes = node_summary(api)
        phases = pod_phase_counts(api)
    except ApiException as e:
        typer.echo(f"❌ Kubernetes API error: {e.status} {e.reason}", err=True)
        raise typer.Exit(code=1)
    except HTTPError as e:
        typer.echo(f"❌ Cannot reach Kubernetes API: {e}", err=True)
        raise typer.Exit(code=1)

    for node in nodes:
        state = "Ready" if node["ready"] else "NotReady"
        taints = ", ".join(node["taints"]) or "none"
        typer.echo(f"📡 {node['name']}: {state} (taints: {taints})")
    for phase, count in sorted(phases.items()):
        typer.echo(f"   {phase}: {count} pod(s)")

import os
from pathlib import Path
from typing import Any, Dict, List

from kubernetes import client, config


def load_kubeconfig(path: str = None) -> str:
    """
    Load the kubeconfig from a given path or from the KUBECONFIG env var.
    Returns the actual path used to load the kubeconfig.
    """
    path = path or os.environ.get("KUBECONFIG")
    if not path:
        raise ValueError("No kubeconfig path provided and KUBECONFIG is not set.")

    resolved = Path(os.path.expanduser(path)).resolve()
    if not resolved.exists():
        raise FileNotFoundError(f"Kubeconfig not found: {resolved}")
    config.load_kube_config(config_file=str(resolved))
    return str(resolved)


def node_summary(api: client.CoreV1Api) -> List[Dict[str, Any]]:
    """Name, readiness and taints of every node."""
    nodes = []
    for node in api.list_node().items:
        ready = next(
            (c.status for c in (node.status.conditions or []) if c.type == "Ready"),
            "Unknown",
        )
        nodes.append({
            "name": node.metadata.name,
            "ready": ready == "True",
            "taints": [t.key for t in (node.spec.taints or [])],
        })
    return nodes


def pod_phase_counts(api: client.CoreV1Api) -> Dict[str, int]:
    """Number of pods in each phase across all namespaces."""
    counts: Dict[str, int] = {}
    for pod in api.list_pod_for_all_namespaces().items:
        phase = pod.status.phase or "Unknown"
        counts[phase] = counts.get(phase, 0) + 1
    return counts

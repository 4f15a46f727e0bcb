"""Cluster initialisation state and the reset transition."""
import logging

from kubesetup.config import Paths
from kubesetup.models import ClusterState
from kubesetup.modules.context import StepContext

logger = logging.getLogger("kubesetup.state")


def probe_cluster_state(paths: Paths) -> ClusterState:
    """Derive the cluster state from the API server static pod manifest.

    kubeadm writes the manifest only once a control plane has been
    initialised, so its presence alone marks the host as INITIALIZED.
    """
    if paths.apiserver_manifest.exists():
        return ClusterState.INITIALIZED
    return ClusterState.UNINITIALIZED


def reset_cluster(ctx: StepContext) -> ClusterState:
    """Move an INITIALIZED host back to UNINITIALIZED.

    Runs ``kubeadm reset`` and removes the CNI configuration and the etcd
    data directory. A host that is already UNINITIALIZED is left alone.

    Returns:
        ClusterState.UNINITIALIZED
    """
    state = probe_cluster_state(ctx.paths)
    if state is ClusterState.UNINITIALIZED:
        logger.debug("No control plane manifest found, nothing to reset")
        return state

    ctx.runner.run(["kubeadm", "reset", "-f"])
    ctx.runner.run(["rm", "-rf", str(ctx.paths.cni_dir)])
    ctx.runner.run(["rm", "-rf", str(ctx.paths.etcd_dir)])
    return ClusterState.UNINITIALIZED

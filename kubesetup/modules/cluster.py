"""Cluster bootstrap steps run after the host is prepared."""
import logging
import shlex
from pathlib import Path

from kubesetup.models import ClusterState
from kubesetup.modules.context import StepContext
from kubesetup.modules.state import probe_cluster_state, reset_cluster

logger = logging.getLogger("kubesetup.cluster")

COMPLETION_LINE = 'source <(kubectl completion bash)'
CONTROL_PLANE_TAINT = 'node-role.kubernetes.io/control-plane-'


def reset_existing_cluster(ctx: StepContext) -> None:
    """Reset the host first if a control plane was initialised before."""
    if probe_cluster_state(ctx.paths) is ClusterState.UNINITIALIZED:
        logger.debug("Cluster not initialised yet, skipping reset")
        return
    logger.info("====> Kubernetes is already initialized. Resetting cluster...")
    reset_cluster(ctx)
    logger.info("====> Kubernetes cluster reset complete.")


def init_cluster(ctx: StepContext) -> None:
    ctx.runner.run(
        ["kubeadm", "init", f"--pod-network-cidr={ctx.settings.pod_cidr}"],
        log_file=ctx.paths.init_log,
    )
    logger.info("====> Kubernetes cluster initialized.")


def configure_kubectl(ctx: StepContext) -> None:
    """Copy the admin kubeconfig to root and to every operator account."""
    admin_conf = ctx.paths.admin_conf
    ctx.make_dir(ctx.root_kubeconfig.parent)
    ctx.copy_file(admin_conf, ctx.root_kubeconfig)

    for account in ctx.operators():
        logger.info(f"====> Configuring kubectl for the {account.name} user...")
        kube_dir = Path(account.home) / ".kube"
        ctx.make_dir(kube_dir)
        ctx.copy_file(admin_conf, kube_dir / "config")
        ctx.runner.run(["chown", "-R", f"{account.name}:{account.name}", str(kube_dir)])
        logger.info(f"Copied .kube config to {account.name}'s home directory.")


def install_cni(ctx: StepContext) -> None:
    ctx.sleep(ctx.settings.settle_delay)
    admin = ctx.cluster_admin()
    logger.info(f"====> {admin.name} user will execute the command..")
    ctx.kubectl(admin, ["apply", "-f", ctx.settings.cni_manifest_url])


def untaint_control_plane(ctx: StepContext) -> None:
    ctx.kubectl(ctx.cluster_admin(), ["taint", "nodes", "--all", CONTROL_PLANE_TAINT])


def enable_completion(ctx: StepContext) -> None:
    for account in ctx.targets():
        bashrc = Path(account.home) / ".bashrc"
        if ctx.append_line(bashrc, COMPLETION_LINE):
            logger.info(f"Enabled kubectl auto-completion for the {account.name} user.")
    logger.info("====> Kubernetes single-node cluster setup complete!")


def check_cluster(ctx: StepContext) -> None:
    ctx.sleep(ctx.settings.settle_delay)
    for account in ctx.targets():
        ctx.kubectl(account, ["get", "nodes"])
        ctx.kubectl(account, ["get", "pods", "-A"])
    logger.info("====> Kubernetes setup completed successfully!")


def install_helm(ctx: StepContext) -> None:
    ctx.runner.run(f"curl -fsSL {shlex.quote(ctx.settings.helm_install_url)} | bash")

"""Sequential provisioning driver.

Runs an ordered list of named steps against the local host. The first step
that raises stops the run; nothing after it executes and nothing is rolled
back. Each step is announced with a ``====>`` marker so a failure can be
located from the log alone.
"""
import logging
import time
from typing import List, Optional

from kubesetup.config import Settings
from kubesetup.errors import KubesetupError, StepError, UnsupportedOSError
from kubesetup.models import ClusterState, RunReport, Step, StepResult
from kubesetup.modules import cluster, host
from kubesetup.modules.context import StepContext
from kubesetup.modules.preflight import check_os
from kubesetup.modules.runner import CommandRunner
from kubesetup.modules.state import probe_cluster_state, reset_cluster

logger = logging.getLogger("kubesetup.driver")

NONINTERACTIVE_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def check_operating_system(ctx: StepContext) -> None:
    settings = ctx.settings
    check_os(ctx.paths.os_release, settings.os_id, settings.os_version_id)
    logger.info("====> Starting Kubernetes single-node installation...")


def reset_only(ctx: StepContext) -> None:
    if probe_cluster_state(ctx.paths) is ClusterState.UNINITIALIZED:
        logger.info("No existing Kubernetes cluster found, nothing to reset.")
        return
    reset_cluster(ctx)
    logger.info("====> Kubernetes cluster reset complete.")


def default_steps() -> List[Step]:
    """The full single-node installation, in execution order."""
    return [
        Step("check-os", "Checking Operating System...", check_operating_system),
        Step("install-dependencies", "Updating system and installing dependencies...",
             host.install_dependencies),
        Step("kernel-modules", "Configuring kernel modules...", host.configure_kernel_modules),
        Step("sysctl", "Configuring sysctl settings for Kubernetes networking...",
             host.configure_sysctl),
        Step("install-containerd", "Installing containerd...", host.install_containerd),
        Step("configure-containerd", "Configuring containerd with systemd cgroup driver...",
             host.configure_containerd),
        Step("disable-swap", "Disabling swap (required for Kubernetes)...", host.disable_swap),
        Step("kubernetes-repository", "Adding Kubernetes GPG Key and Repository...",
             host.add_kubernetes_repository),
        Step("update-package-list", "Updating package list...", host.update_package_list),
        Step("install-kubernetes", "Installing Kubernetes components...", host.install_kubernetes),
        Step("reset-cluster", "", cluster.reset_existing_cluster),
        Step("init-cluster", "Initializing Kubernetes cluster...", cluster.init_cluster),
        Step("configure-kubectl", "Configuring kubectl for user...", cluster.configure_kubectl),
        Step("install-cni", "Installing Calico network plugin...", cluster.install_cni),
        Step("untaint-control-plane", "Allowing scheduling of pods on the control plane...",
             cluster.untaint_control_plane),
        Step("kubectl-completion", "Enabling kubectl auto-completion...", cluster.enable_completion),
        Step("check-cluster", "Check pods and nodes", cluster.check_cluster),
        Step("install-helm", "Installing helm...", cluster.install_helm),
    ]


def reset_steps() -> List[Step]:
    """OS check followed by the cluster reset on its own."""
    return [
        Step("check-os", "Checking Operating System...", check_operating_system),
        Step("reset-cluster", "Resetting Kubernetes cluster...", reset_only),
    ]


class ProvisioningDriver:
    """Runs steps in order and stops at the first failure."""

    def __init__(self, steps: List[Step]):
        self.steps = steps

    def _run_step(self, step: Step, ctx: StepContext) -> StepResult:
        if step.description:
            logger.info(f"====> {step.description}")
        start_time = time.time()
        try:
            step.action(ctx)
        except UnsupportedOSError as e:
            logger.error(str(e))
            return StepResult(step.name, False, 1, str(e), time.time() - start_time)
        except StepError as e:
            logger.error(f"ERROR: Step '{step.name}' failed: {e}")
            return StepResult(step.name, False, e.returncode, str(e), time.time() - start_time)
        except (KubesetupError, OSError) as e:
            logger.error(f"ERROR: Step '{step.name}' failed: {e}")
            return StepResult(step.name, False, None, str(e), time.time() - start_time)

        duration = time.time() - start_time
        logger.debug(f"Step '{step.name}' completed in {duration:.1f}s")
        return StepResult(step.name, True, 0, None, duration)

    def run(self, ctx: StepContext) -> RunReport:
        """Execute every step until one fails.

        Returns:
            RunReport whose ``failed_step`` names the step that stopped the run
        """
        report = RunReport()
        for step in self.steps:
            result = self._run_step(step, ctx)
            report.add(result)
            if not result.success:
                break
        return report


def build_context(settings: Settings, dry_run: bool = False, runner: Optional[CommandRunner] = None) -> StepContext:
    """Create the context for a run, exporting the non-interactive APT setting."""
    if runner is None:
        runner = CommandRunner(env=NONINTERACTIVE_ENV, dry_run=dry_run)
    return StepContext(settings=settings, runner=runner)


def run_install(settings: Settings, dry_run: bool = False) -> RunReport:
    return ProvisioningDriver(default_steps()).run(build_context(settings, dry_run))


def run_reset(settings: Settings, dry_run: bool = False) -> RunReport:
    return ProvisioningDriver(reset_steps()).run(build_context(settings, dry_run))

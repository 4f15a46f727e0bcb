"""Host preparation steps.

Each function takes the run's StepContext and raises on the first failing
command. Package installs, module loads and sysctl writes are left to the
underlying tools to make idempotent.
"""
import logging
from typing import List

import requests

from kubesetup.errors import StepError
from kubesetup.modules.context import StepContext

logger = logging.getLogger("kubesetup.host")

BASE_APT_PACKAGES = [
    "apt-transport-https",
    "ca-certificates",
    "curl",
    "gnupg",
]

KERNEL_MODULES = ["overlay", "br_netfilter"]

SYSCTL_SETTINGS = [
    ("net.bridge.bridge-nf-call-iptables", "1"),
    ("net.ipv4.ip_forward", "1"),
    ("net.bridge.bridge-nf-call-ip6tables", "1"),
]


def apt_install(ctx: StepContext, packages: List[str]) -> None:
    ctx.runner.run(["apt-get", "install", "-yq", *packages])


def fetch_text(url: str, timeout: int) -> str:
    """Download a small text resource.

    Raises:
        StepError: On any HTTP or connection error
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise StepError(f"Failed to download {url}: {e}") from e
    return response.text


def enable_systemd_cgroup(config: str) -> str:
    """Switch containerd's runc runtime to the systemd cgroup driver."""
    return config.replace("SystemdCgroup = false", "SystemdCgroup = true")


def comment_swap_entries(fstab: str) -> str:
    """Comment out every active fstab line that mounts swap."""
    lines = []
    for line in fstab.splitlines(keepends=True):
        if " swap " in line and not line.lstrip().startswith('#'):
            line = '#' + line
        lines.append(line)
    return ''.join(lines)


def install_dependencies(ctx: StepContext) -> None:
    ctx.runner.run(["apt-get", "update", "-qq"])
    apt_install(ctx, BASE_APT_PACKAGES)


def configure_kernel_modules(ctx: StepContext) -> None:
    ctx.write_file(ctx.paths.modules_load, ''.join(f"{m}\n" for m in KERNEL_MODULES))
    for module in KERNEL_MODULES:
        ctx.runner.run(["modprobe", module])


def configure_sysctl(ctx: StepContext) -> None:
    content = ''.join(f"{key} = {value}\n" for key, value in SYSCTL_SETTINGS)
    ctx.write_file(ctx.paths.sysctl_conf, content)
    ctx.runner.run(["sysctl", "--system"])


def install_containerd(ctx: StepContext) -> None:
    apt_install(ctx, ["containerd"])


def configure_containerd(ctx: StepContext) -> None:
    ctx.make_dir(ctx.paths.containerd_dir)
    default = ctx.runner.run(["containerd", "config", "default"])
    # The default config is already echoed line by line by the runner
    ctx.write_file(ctx.paths.containerd_config, enable_systemd_cgroup(default.output + '\n'), echo=False)
    ctx.runner.run(["systemctl", "restart", "containerd"])
    ctx.runner.run(["systemctl", "enable", "containerd"])


def disable_swap(ctx: StepContext) -> None:
    ctx.runner.run(["swapoff", "-a"])
    fstab = ctx.paths.fstab
    original = fstab.read_text(encoding='utf-8')
    updated = comment_swap_entries(original)
    if updated != original:
        ctx.write_file(fstab, updated, echo=False)
        logger.debug(f"Commented swap entries in {fstab}")


def add_kubernetes_repository(ctx: StepContext) -> None:
    settings = ctx.settings
    ctx.make_dir(ctx.paths.keyrings_dir, mode=0o755)
    if ctx.dry_run:
        logger.info(f"[dry-run] download {settings.key_url}")
        key = ''
    else:
        key = fetch_text(settings.key_url, settings.http_timeout)
    ctx.runner.run(
        ["gpg", "--batch", "--yes", "--dearmor", "-o", str(ctx.paths.keyring)],
        input=key,
    )
    ctx.chmod(ctx.paths.keyring, 0o644)
    ctx.write_file(ctx.paths.apt_sources, settings.apt_source_line + '\n')


def update_package_list(ctx: StepContext) -> None:
    ctx.runner.run(["apt-get", "update", "-qq"])


def install_kubernetes(ctx: StepContext) -> None:
    apt_install(ctx, ctx.settings.kube_packages)
    ctx.runner.run(["apt-mark", "hold", *ctx.settings.held_packages])

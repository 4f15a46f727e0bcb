"""Configuration management for the kubesetup application."""
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from jsonschema import validate, ValidationError

from kubesetup.errors import ConfigError

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Application configuration with sensible defaults."""

    # Target operating system
    OS_ID: str = os.getenv("KUBESETUP_OS_ID", "ubuntu")
    OS_VERSION_ID: str = os.getenv("KUBESETUP_OS_VERSION_ID", "22.04")

    # Cluster
    K8S_VERSION: str = os.getenv("KUBESETUP_K8S_VERSION", "v1.31")
    POD_CIDR: str = os.getenv("KUBESETUP_POD_CIDR", "192.168.0.0/16")
    CNI_MANIFEST_URL: str = os.getenv(
        "KUBESETUP_CNI_MANIFEST_URL",
        "https://docs.projectcalico.org/manifests/calico.yaml"
    )
    HELM_INSTALL_URL: str = os.getenv(
        "KUBESETUP_HELM_INSTALL_URL",
        "https://raw.githubusercontent.com/helm/helm/main/scripts/get-helm-3"
    )

    # Operator accounts
    OPERATOR_PREFIX: str = os.getenv("KUBESETUP_OPERATOR_PREFIX", "px-admin")

    # Timeouts (in seconds)
    SETTLE_DELAY: float = float(os.getenv("KUBESETUP_SETTLE_DELAY", "5"))
    HTTP_TIMEOUT: int = int(os.getenv("KUBESETUP_HTTP_TIMEOUT", "30"))

    # Logging
    LOG_TAG: str = os.getenv("KUBESETUP_LOG_TAG", "K8S-SETUP")
    SYSLOG_ADDRESS: str = os.getenv("KUBESETUP_SYSLOG_ADDRESS", "/dev/log")


SETTINGS_SCHEMA = {
    "type": "object",
    "properties": {
        "os_id": {"type": "string"},
        "os_version_id": {"type": "string"},
        "k8s_version": {"type": "string", "pattern": "^v[0-9]+\\.[0-9]+$"},
        "pod_cidr": {"type": "string"},
        "cni_manifest_url": {"type": "string"},
        "helm_install_url": {"type": "string"},
        "operator_prefix": {"type": "string", "minLength": 1},
        "settle_delay": {"type": "number", "minimum": 0},
        "http_timeout": {"type": "integer", "minimum": 1},
        "log_tag": {"type": "string", "minLength": 1},
        "syslog_address": {"type": "string"},
    },
    "additionalProperties": False,
}


@dataclass
class Paths:
    """Filesystem locations touched by the provisioning steps."""
    os_release: Path = Path("/etc/os-release")
    passwd: Path = Path("/etc/passwd")
    modules_load: Path = Path("/etc/modules-load.d/containerd.conf")
    sysctl_conf: Path = Path("/etc/sysctl.d/99-kubernetes-cri.conf")
    containerd_dir: Path = Path("/etc/containerd")
    fstab: Path = Path("/etc/fstab")
    keyrings_dir: Path = Path("/etc/apt/keyrings")
    apt_sources: Path = Path("/etc/apt/sources.list.d/kubernetes.list")
    apiserver_manifest: Path = Path("/etc/kubernetes/manifests/kube-apiserver.yaml")
    admin_conf: Path = Path("/etc/kubernetes/admin.conf")
    cni_dir: Path = Path("/etc/cni/net.d")
    etcd_dir: Path = Path("/var/lib/etcd")
    root_home: Path = Path("/root")
    home_base: Path = Path("/home")

    @property
    def containerd_config(self) -> Path:
        return self.containerd_dir / "config.toml"

    @property
    def keyring(self) -> Path:
        return self.keyrings_dir / "kubernetes-archive-keyring.gpg"

    @property
    def init_log(self) -> Path:
        return self.root_home / "kubeadm-init.log"

    def under(self, root: Path) -> "Paths":
        """Return a copy with every path relocated below ``root``."""
        root = Path(root)
        moved = {
            f.name: root / getattr(self, f.name).relative_to("/")
            for f in fields(self)
        }
        return replace(self, **moved)


@dataclass
class Settings:
    """Resolved settings for one provisioning run."""
    os_id: str = Config.OS_ID
    os_version_id: str = Config.OS_VERSION_ID
    k8s_version: str = Config.K8S_VERSION
    pod_cidr: str = Config.POD_CIDR
    cni_manifest_url: str = Config.CNI_MANIFEST_URL
    helm_install_url: str = Config.HELM_INSTALL_URL
    operator_prefix: str = Config.OPERATOR_PREFIX
    settle_delay: float = Config.SETTLE_DELAY
    http_timeout: int = Config.HTTP_TIMEOUT
    log_tag: str = Config.LOG_TAG
    syslog_address: str = Config.SYSLOG_ADDRESS
    paths: Paths = field(default_factory=Paths)

    @property
    def repo_url(self) -> str:
        return f"https://pkgs.k8s.io/core:/stable:/{self.k8s_version}/deb/"

    @property
    def key_url(self) -> str:
        return f"{self.repo_url}Release.key"

    @property
    def apt_source_line(self) -> str:
        return f"deb [signed-by={self.paths.keyring}] {self.repo_url} /"

    @property
    def kube_packages(self) -> List[str]:
        return ["kubelet", "kubeadm", "kubectl", "cri-tools"]

    @property
    def held_packages(self) -> List[str]:
        return ["kubelet", "kubeadm", "kubectl"]


def load_settings(path: Optional[str] = None) -> Settings:
    """Build run settings from the environment defaults and an optional YAML file.

    Args:
        path: Optional path to a YAML file overriding individual settings

    Returns:
        Settings instance

    Raises:
        ConfigError: If the file is missing, not valid YAML, or fails schema validation
    """
    settings = Settings()
    if not path:
        return settings

    config_path = Path(os.path.expanduser(path))
    if not config_path.exists():
        raise ConfigError(f"Settings file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            overrides: Dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    try:
        validate(instance=overrides, schema=SETTINGS_SCHEMA)
    except ValidationError as ve:
        raise ConfigError(f"Settings validation error in {config_path}: {ve.message}") from ve

    return replace(settings, **overrides)

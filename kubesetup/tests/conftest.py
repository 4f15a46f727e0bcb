import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from kubesetup.config import Paths, Settings
from kubesetup.errors import CommandError
from kubesetup.models import CommandResult
from kubesetup.modules.context import StepContext

UBUNTU_2204 = """\
PRETTY_NAME="Ubuntu 22.04.4 LTS"
NAME="Ubuntu"
VERSION_ID="22.04"
VERSION="22.04.4 LTS (Jammy Jellyfish)"
ID=ubuntu
ID_LIKE=debian
"""

DEBIAN_12 = """\
PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"
NAME="Debian GNU/Linux"
VERSION_ID="12"
ID=debian
"""

PASSWD = """\
root:x:0:0:root:/root:/bin/bash
daemon:x:1:1:daemon:/usr/sbin:/usr/sbin/nologin
px-admin:x:1000:1000:Operator:/home/px-admin:/bin/bash
ubuntu:x:1001:1001::/home/ubuntu:/bin/bash
"""

FSTAB = """\
UUID=1234 / ext4 errors=remount-ro 0 1
/swap.img none swap sw 0 0
"""

CONTAINERD_DEFAULT = """\
version = 2
[plugins."io.containerd.grpc.v1.cri".containerd.runtimes.runc.options]
  SystemdCgroup = false
"""


class FakeRunner:
    """Records commands instead of running them."""

    def __init__(self, fail_on: Optional[Sequence[str]] = None, returncode: int = 2,
                 outputs: Optional[Dict[Tuple[str, ...], str]] = None):
        self.dry_run = False
        self.calls: List[dict] = []
        self.fail_on = list(fail_on) if fail_on else None
        self.returncode = returncode
        self.outputs = outputs or {}

    @property
    def commands(self) -> List[List[str]]:
        return [c["args"] for c in self.calls]

    def run(self, command, input=None, log_file=None, user=None, env=None, check=True):
        args = [command] if isinstance(command, str) else list(command)
        self.calls.append({"args": args, "input": input, "log_file": log_file, "user": user, "env": env})
        if self.fail_on and args[:len(self.fail_on)] == self.fail_on:
            raise CommandError(args, self.returncode, "boom")
        return CommandResult(args=args, returncode=0, output=self.outputs.get(tuple(args), ""))


@pytest.fixture
def paths(tmp_path):
    paths = Paths().under(tmp_path)
    paths.os_release.parent.mkdir(parents=True, exist_ok=True)
    paths.os_release.write_text(UBUNTU_2204)
    paths.passwd.write_text(PASSWD)
    paths.fstab.write_text(FSTAB)
    paths.admin_conf.parent.mkdir(parents=True, exist_ok=True)
    paths.admin_conf.write_text("apiVersion: v1\nkind: Config\n")
    paths.root_home.mkdir(parents=True, exist_ok=True)
    (paths.home_base / "px-admin").mkdir(parents=True, exist_ok=True)
    return paths


@pytest.fixture
def settings(paths):
    return Settings(settle_delay=0, paths=paths)


@pytest.fixture
def runner():
    return FakeRunner(outputs={("containerd", "config", "default"): CONTAINERD_DEFAULT.rstrip("\n")})


@pytest.fixture
def ctx(settings, runner):
    return StepContext(settings=settings, runner=runner, sleep=lambda seconds: None)


@pytest.fixture(autouse=True)
def reset_kubesetup_logger():
    yield
    logger = logging.getLogger("kubesetup")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_runner():
    return FakeRunner

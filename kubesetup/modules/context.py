"""Shared state handed to every provisioning step."""
import logging
import os
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from kubesetup.config import Paths, Settings
from kubesetup.models import CommandResult, OperatorAccount
from kubesetup.modules.accounts import find_operator_accounts, root_account
from kubesetup.modules.runner import CommandRunner

logger = logging.getLogger("kubesetup.context")


@dataclass
class StepContext:
    """Settings, runner and host helpers for one provisioning run.

    File helpers honour the runner's dry-run flag so a dry run never touches
    the host.
    """
    settings: Settings
    runner: CommandRunner
    sleep: Callable[[float], None] = time.sleep
    _accounts: Optional[List[OperatorAccount]] = field(default=None, repr=False)

    @property
    def paths(self) -> Paths:
        return self.settings.paths

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    @property
    def root_kubeconfig(self) -> Path:
        return self.paths.root_home / ".kube" / "config"

    def operators(self) -> List[OperatorAccount]:
        """Operator accounts, discovered once per run."""
        if self._accounts is None:
            self._accounts = find_operator_accounts(
                self.paths.passwd, self.settings.operator_prefix, self.paths.home_base
            )
            if not self._accounts:
                logger.warning(
                    f"WARNING: No account matching '{self.settings.operator_prefix}' found; "
                    "per-user steps will run as root"
                )
            elif len(self._accounts) > 1:
                names = ', '.join(a.name for a in self._accounts)
                logger.warning(
                    f"WARNING: Several accounts match '{self.settings.operator_prefix}' ({names}); "
                    f"cluster-wide commands run as {self._accounts[0].name}"
                )
        return self._accounts

    def targets(self) -> List[OperatorAccount]:
        """Accounts that receive per-user actions, falling back to root."""
        return self.operators() or [root_account(self.paths.root_home)]

    def cluster_admin(self) -> OperatorAccount:
        """The single account that runs cluster-wide kubectl commands."""
        return self.targets()[0]

    def kubectl(self, account: OperatorAccount, args: Sequence[str]) -> CommandResult:
        """Run kubectl as ``account``."""
        command = ["kubectl", *args]
        if account.is_root:
            return self.runner.run(command, env={"KUBECONFIG": str(self.root_kubeconfig)})
        return self.runner.run(command, user=account.name)

    def make_dir(self, path: Path, mode: Optional[int] = None) -> None:
        if self.dry_run:
            logger.info(f"[dry-run] mkdir -p {path}")
            return
        path.mkdir(parents=True, exist_ok=True)
        if mode is not None:
            os.chmod(path, mode)

    def write_file(self, path: Path, content: str, echo: bool = True) -> None:
        """Write ``content`` to ``path``, echoing it into the log like ``tee``."""
        if self.dry_run:
            logger.info(f"[dry-run] write {path}")
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
        if echo:
            for line in content.splitlines():
                logger.info(line)

    def append_line(self, path: Path, line: str) -> bool:
        """Append ``line`` to ``path`` unless it is already present.

        Returns:
            bool: True if the file was changed
        """
        existing = path.read_text(encoding='utf-8') if path.exists() else ''
        if line in existing.splitlines():
            logger.debug(f"{path} already contains {line!r}")
            return False
        if self.dry_run:
            logger.info(f"[dry-run] append to {path}")
            return True
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'a', encoding='utf-8') as f:
            if existing and not existing.endswith('\n'):
                f.write('\n')
            f.write(line + '\n')
        return True

    def copy_file(self, src: Path, dest: Path) -> None:
        if self.dry_run:
            logger.info(f"[dry-run] cp {src} {dest}")
            return
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)

    def chmod(self, path: Path, mode: int) -> None:
        if self.dry_run:
            logger.info(f"[dry-run] chmod {mode:o} {path}")
            return
        os.chmod(path, mode)

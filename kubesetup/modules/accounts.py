"""Operator account discovery."""
import logging
from pathlib import Path
from typing import List

from kubesetup.models import OperatorAccount

logger = logging.getLogger("kubesetup.accounts")


def find_operator_accounts(passwd: Path, prefix: str, home_base: Path) -> List[OperatorAccount]:
    """Collect every passwd entry whose login name starts with ``prefix``.

    Accounts are returned in file order with their home under ``home_base``.
    Malformed lines are skipped.
    """
    accounts: List[OperatorAccount] = []
    if not passwd.is_file():
        logger.warning(f"Account database not found: {passwd}")
        return accounts

    for line in passwd.read_text(encoding='utf-8').splitlines():
        if not line.startswith(prefix):
            continue
        parts = line.split(':')
        if len(parts) < 6:
            logger.debug(f"Skipping malformed passwd entry: {line!r}")
            continue
        try:
            uid, gid = int(parts[2]), int(parts[3])
        except ValueError:
            logger.debug(f"Skipping passwd entry with invalid ids: {line!r}")
            continue
        accounts.append(OperatorAccount(name=parts[0], home=str(home_base / parts[0]), uid=uid, gid=gid))
    return accounts


def root_account(home: Path) -> OperatorAccount:
    """The fallback account used when no operator account exists."""
    return OperatorAccount(name='root', home=str(home), uid=0, gid=0)

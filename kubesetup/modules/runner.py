"""Local command execution.

Commands run synchronously, one at a time. Standard output and standard
error are merged and fed line by line into the kubesetup logger, so the
terminal and syslog see the same text in the same order.
"""
import os
import shlex
import subprocess
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from kubesetup.errors import CommandError
from kubesetup.logging import get_logger
from kubesetup.models import CommandResult

logger = get_logger(__name__)

Command = Union[str, Sequence[str]]


def shell_args(command: str) -> List[str]:
    """Wrap a shell pipeline so that any failing stage fails the whole command."""
    return ["bash", "-o", "errexit", "-o", "pipefail", "-c", command]


class CommandRunner:
    """Runs external commands on the local host and fails fast on errors."""

    def __init__(self, env: Optional[Dict[str, str]] = None, dry_run: bool = False):
        """Initialize the runner.

        Args:
            env: Extra environment variables exported to every child process
            dry_run: Log commands instead of executing them
        """
        self.env = dict(os.environ)
        self.env.update(env or {})
        self.dry_run = dry_run

    def _build_args(self, command: Command, user: Optional[str]) -> List[str]:
        args = shell_args(command) if isinstance(command, str) else list(command)
        if user:
            # Login shell so the account's own environment and home apply
            args = ["su", "-", user, "-c", shlex.join(args)]
        return args

    def run(
        self,
        command: Command,
        input: Optional[str] = None,
        log_file: Optional[Path] = None,
        user: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        check: bool = True,
    ) -> CommandResult:
        """Execute a command and stream its output into the logger.

        Args:
            command: argv list, or a shell string run with pipefail
            input: Text written to the command's standard input
            log_file: Also copy every output line to this file (truncated first)
            user: Run the command as this account via ``su -``
            env: Extra environment variables for this command only
            check: Raise CommandError if the command exits non-zero

        Returns:
            CommandResult with the merged output

        Raises:
            CommandError: If the command fails and check is True
        """
        args = self._build_args(command, user)
        command_id = ' '.join(args)

        if self.dry_run:
            logger.info(f"[dry-run] {command_id}")
            return CommandResult(args=args, returncode=0, output='')

        child_env = dict(self.env)
        child_env.update(env or {})

        logger.debug(f"Starting command {command_id}")
        start_time = time.time()
        lines: List[str] = []
        sink = None
        try:
            if log_file is not None:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                sink = open(log_file, 'w', encoding='utf-8')

            process = subprocess.Popen(
                args,
                stdin=subprocess.PIPE if input is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=child_env,
                text=True,
                encoding='utf-8',
                errors='replace',
                bufsize=1,  # Line buffered
            )
            if input is not None:
                # A child may exit without reading stdin; its status is what matters
                try:
                    process.stdin.write(input)
                except BrokenPipeError:
                    pass
                try:
                    process.stdin.close()
                except BrokenPipeError:
                    pass

            for line in process.stdout:
                line = line.rstrip('\n')
                lines.append(line)
                logger.info(line)
                if sink is not None:
                    sink.write(line + '\n')
            process.stdout.close()
            returncode = process.wait()
        except FileNotFoundError as e:
            logger.error(f"{args[0]}: command not found")
            raise CommandError(args, 127, str(e)) from e
        finally:
            if sink is not None:
                sink.close()

        output = '\n'.join(lines)
        duration = time.time() - start_time
        logger.debug(f"Completed {command_id} with status {returncode} in {duration:.2f}s")

        if returncode != 0 and check:
            raise CommandError(args, returncode, output)

        return CommandResult(args=args, returncode=returncode, output=output)

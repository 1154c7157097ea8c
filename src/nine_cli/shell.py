"""
External command execution and Helm release probing.

Commands run through subprocess with stdout and stderr captured separately.
Helm is only used to check whether a tool's release is installed.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    stdout: str
    stderr: str
    returncode: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_command(command: str, *args: str, timeout: int = 60) -> CommandResult:
    """
    Run command with args and capture its output.

    Any output on stdout counts as success: error is cleared even when the
    process exited non-zero. The real exit status is kept in returncode.
    A missing executable or a timeout is reported through error (returncode -1).

    Args:
        command: Executable to run (looked up in PATH).
        args: Arguments passed to the command.
        timeout: Seconds before the command is abandoned.

    Returns:
        CommandResult with stdout, stderr, returncode and error.
    """
    cmd = [command, *args]
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("Exec %s args:%s failed: %s", command, list(args), exc)
        return CommandResult(stdout="", stderr="", returncode=-1, error=str(exc))

    error: Optional[str] = None
    if proc.returncode != 0:
        error = proc.stderr.strip() or f"{command} exited with status {proc.returncode}"
    if proc.stdout:
        error = None
    logger.debug(
        "Exec %s args:%s with output:%s, errput:%s, returncode:%d",
        command,
        list(args),
        proc.stdout,
        proc.stderr,
        proc.returncode,
    )
    return CommandResult(
        stdout=proc.stdout,
        stderr=proc.stderr,
        returncode=proc.returncode,
        error=error,
    )


def release_exists(release: str, namespace: str, kubeconfig: Optional[str] = None) -> bool:
    """True if `helm status` finds release in namespace."""
    args = ["status", release, "--namespace", namespace]
    if kubeconfig:
        args.extend(["--kubeconfig", kubeconfig])
    return run_command("helm", *args).ok

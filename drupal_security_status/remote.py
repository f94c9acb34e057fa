"""Run commands on remote hosts over SSH."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import paramiko

from .config import DEFAULT_SSH_PORT, get_ssh_key_filename, get_ssh_timeout

logger = logging.getLogger(__name__)

CONNECTION_FAILED = 255
"""Exit status reported when the SSH session itself fails, as ``ssh`` does."""


@dataclass
class CommandResult:
    """Exit status and captured output lines of a remote command."""

    return_code: int
    output: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.return_code == 0


def run_remote_command(
    host: str,
    user: str,
    command: str,
    *,
    port: int = DEFAULT_SSH_PORT,
    key_filename: Optional[str] = None,
    timeout: Optional[float] = None,
) -> CommandResult:
    """Execute ``command`` on ``host`` and return its exit status and output.

    Stderr is merged into stdout on the channel, so output holds the lines in
    the order the remote command wrote them. Connection, authentication and
    SSH settings failures are returned as a result with exit status 255
    instead of being raised, so one unreachable host does not stop a sweep.
    """

    client = paramiko.SSHClient()
    try:
        if key_filename is None:
            key_filename = get_ssh_key_filename()
        if timeout is None:
            timeout = get_ssh_timeout()

        client.load_system_host_keys()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        logger.debug("Connecting to %s@%s:%d", user, host, port)
        client.connect(
            host,
            port=port,
            username=user,
            key_filename=key_filename,
            timeout=timeout,
        )
        _, stdout, _ = client.exec_command(command, timeout=timeout)
        stdout.channel.set_combine_stderr(True)
        output = stdout.read().decode("utf-8", errors="replace").splitlines()
        return_code = stdout.channel.recv_exit_status()
    except (paramiko.SSHException, OSError, RuntimeError) as exc:
        logger.warning("SSH command on %s@%s failed: %s", user, host, exc)
        return CommandResult(return_code=CONNECTION_FAILED, output=[str(exc)])
    finally:
        client.close()

    return CommandResult(return_code=return_code, output=output)


__all__ = ["CONNECTION_FAILED", "CommandResult", "run_remote_command"]

"""Defaults and environment driven settings for the security status tasks."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Tuple

STATUS_COMMAND = (
    'drush ups --fields="label,name,existing_version,candidate_version,status" --format=csv'
)
REPORT_FILENAME = "security-report.yml"
ACCEPTED_PROJECT_TYPES: Tuple[str, ...] = ("d7", "d8")

DEFAULT_TEMPLATE = "page.html"
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

DEFAULT_SSH_PORT = 22
DEFAULT_SSH_TIMEOUT = 60.0

SSH_KEY_ENV = "DRUPAL_SECURITY_SSH_KEY"
SSH_TIMEOUT_ENV = "DRUPAL_SECURITY_SSH_TIMEOUT"


def get_ssh_key_filename() -> Optional[str]:
    """Return the private key configured for SSH polling, if any."""

    value = os.environ.get(SSH_KEY_ENV, "").strip()
    return os.path.expanduser(value) if value else None


def get_ssh_timeout() -> float:
    """Return the SSH connect/command timeout in seconds."""

    raw = os.environ.get(SSH_TIMEOUT_ENV, "").strip()
    if not raw:
        return DEFAULT_SSH_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise RuntimeError(f"{SSH_TIMEOUT_ENV} must be a number of seconds, got {raw!r}") from None
    if timeout <= 0:
        raise RuntimeError(f"{SSH_TIMEOUT_ENV} must be positive, got {raw!r}")
    return timeout


__all__ = [
    "ACCEPTED_PROJECT_TYPES",
    "DEFAULT_SSH_PORT",
    "DEFAULT_SSH_TIMEOUT",
    "DEFAULT_TEMPLATE",
    "DEFAULT_TEMPLATE_DIR",
    "REPORT_FILENAME",
    "SSH_KEY_ENV",
    "SSH_TIMEOUT_ENV",
    "STATUS_COMMAND",
    "get_ssh_key_filename",
    "get_ssh_timeout",
]

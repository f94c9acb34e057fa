"""Update status codes reported by ``drush ups``."""
from __future__ import annotations

from enum import IntEnum
from typing import Dict


class StatusCode(IntEnum):
    """Update status of a Drupal module as reported by the update manager."""

    NOT_SECURE = 1
    """Project is missing security update(s)."""
    REVOKED = 2
    """Current release has been unpublished and is no longer available."""
    NOT_SUPPORTED = 3
    """Current release is no longer supported by the project maintainer."""
    NOT_CURRENT = 4
    """Project has a new release available, but it is not a security release."""
    CURRENT = 5
    """Project is up to date."""
    NOT_CHECKED = -1
    """Project's status cannot be checked."""
    UNKNOWN = -2
    """No available update data was found for project."""

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS: Dict[StatusCode, str] = {
    StatusCode.NOT_SECURE: "Insecure",
    StatusCode.NOT_CURRENT: "Update available",
    StatusCode.REVOKED: "Unpublished",
    StatusCode.NOT_SUPPORTED: "Unsupported",
    StatusCode.CURRENT: "Up to date",
    StatusCode.NOT_CHECKED: "Unchecked",
    StatusCode.UNKNOWN: "Unknown",
}

UNKNOWN_STATUS_LABEL = "Update code unknown"


def label_of(code: int) -> str:
    """Return the human readable label for ``code``."""

    try:
        return STATUS_LABELS[StatusCode(code)]
    except ValueError:
        return UNKNOWN_STATUS_LABEL


def empty_counts() -> Dict[int, int]:
    """Return a tally with every known status code set to zero."""

    return {int(code): 0 for code in STATUS_LABELS}


__all__ = ["STATUS_LABELS", "StatusCode", "UNKNOWN_STATUS_LABEL", "empty_counts", "label_of"]

"""Project and server descriptors read from YAML files."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Union

import yaml

from .config import DEFAULT_SSH_PORT
from .remote import CommandResult, run_remote_command

logger = logging.getLogger(__name__)

DESCRIPTOR_PATTERNS = ("*.yml", "*.yaml")


class ProjectConfigError(ValueError):
    """Raised when a project descriptor is missing required settings."""


class PollableServer(Protocol):
    """What the aggregator needs from a server."""

    label: str
    host: str
    user: str

    def run_remote(self, command: str) -> CommandResult:
        ...


class PollableProject(Protocol):
    """What the aggregator needs from a project."""

    identifier: str
    type: str
    group: str
    name: str
    team: str
    poll_security_automatically: bool

    def security_pollable_servers(self) -> Sequence[PollableServer]:
        ...


@dataclass
class Server:
    """A remote host belonging to a project."""

    label: str
    host: str
    user: str
    port: int = DEFAULT_SSH_PORT
    poll_security: bool = False

    def run_remote(self, command: str) -> CommandResult:
        return run_remote_command(self.host, self.user, command, port=self.port)


@dataclass
class Project:
    """A Drupal site codebase with the servers it is deployed to."""

    group: str
    name: str
    type: str
    team: str
    poll_security_automatically: bool = True
    servers: List[Server] = field(default_factory=list)
    source: Optional[Path] = None

    @property
    def identifier(self) -> str:
        return f"{self.group}.{self.name}"

    def security_pollable_servers(self) -> List[Server]:
        return [server for server in self.servers if server.poll_security]


def project_from_dict(data: Mapping[str, Any], source: Optional[Path] = None) -> Project:
    """Build a :class:`Project` from a parsed descriptor document."""

    where = f" in {source}" if source else ""
    settings = data.get("project") if isinstance(data, Mapping) else None
    if not isinstance(settings, Mapping):
        raise ProjectConfigError(f"Missing 'project' section{where}")
    for key in ("group", "name"):
        if not settings.get(key):
            raise ProjectConfigError(f"Missing project '{key}'{where}")

    server_settings = data.get("servers") or {}
    if not isinstance(server_settings, Mapping):
        raise ProjectConfigError(f"'servers' must be a mapping of labels to hosts{where}")

    servers: List[Server] = []
    for label, server in server_settings.items():
        if not isinstance(server, Mapping) or not server.get("host"):
            raise ProjectConfigError(f"Server '{label}' has no host{where}")
        try:
            port = int(server.get("port", DEFAULT_SSH_PORT))
        except (TypeError, ValueError):
            raise ProjectConfigError(
                f"Server '{label}' has an invalid port {server.get('port')!r}{where}"
            ) from None
        servers.append(
            Server(
                label=str(label),
                host=str(server["host"]),
                user=str(server.get("user", "")),
                port=port,
                poll_security=bool(server.get("poll_security", False)),
            )
        )

    return Project(
        group=str(settings["group"]),
        name=str(settings["name"]),
        type=str(settings.get("type", "")),
        team=str(settings.get("team", "")),
        poll_security_automatically=bool(settings.get("poll_security", True)),
        servers=servers,
        source=source,
    )


def load_projects(source_dir: Union[str, Path]) -> List[Project]:
    """Load every project descriptor found directly inside ``source_dir``."""

    directory = Path(source_dir)
    if not directory.is_dir():
        raise ProjectConfigError(f"Project directory does not exist: {directory}")

    paths = sorted({p for pattern in DESCRIPTOR_PATTERNS for p in directory.glob(pattern)})
    projects: List[Project] = []
    for path in paths:
        with path.open("r", encoding="utf-8") as fh:
            try:
                data = yaml.safe_load(fh) or {}
            except yaml.YAMLError as exc:
                raise ProjectConfigError(f"{path} is not valid YAML: {exc}") from exc
        projects.append(project_from_dict(data, source=path))
        logger.debug("Loaded project descriptor %s", path)
    return projects


__all__ = [
    "PollableProject",
    "PollableServer",
    "Project",
    "ProjectConfigError",
    "Server",
    "load_projects",
    "project_from_dict",
]

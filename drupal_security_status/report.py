"""Data models for the Drupal security status report."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping

from .status import StatusCode, empty_counts


@dataclass(frozen=True)
class ModuleRecord:
    """One line of ``drush ups`` output for a single module."""

    label: str
    machine_name: str
    current_version: str
    new_version: str
    status_code: int
    message: str

    @property
    def needs_update(self) -> bool:
        return self.status_code != StatusCode.CURRENT

    def sort_key(self) -> tuple[int, str]:
        """Order used for the needs-update listing: status first, then name."""

        return (self.status_code, self.machine_name)

    def update_key(self) -> str:
        """Key under which the record is stored in ``needUpdateModules``."""

        return f"{self.status_code}{self.machine_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "machineName": self.machine_name,
            "currentVersion": self.current_version,
            "newVersion": self.new_version,
            "statusCode": self.status_code,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModuleRecord":
        return cls(
            label=str(data["label"]),
            machine_name=str(data["machineName"]),
            current_version=str(data["currentVersion"]),
            new_version=str(data["newVersion"]),
            status_code=int(data["statusCode"]),
            message=str(data["message"]),
        )


@dataclass
class ServerReport:
    """Result of polling a single server of a project."""

    host: str
    checked: bool = False
    message: str = ""
    counts: Dict[int, int] = field(default_factory=empty_counts)
    modules: Dict[str, ModuleRecord] = field(default_factory=dict)
    need_update_modules: Dict[str, ModuleRecord] = field(default_factory=dict)

    def count(self, code: int) -> int:
        return self.counts.get(int(code), 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "checked": self.checked,
            "message": self.message,
            "modules": {
                "counts": {int(code): total for code, total in self.counts.items()},
                "modules": {name: m.to_dict() for name, m in self.modules.items()},
                "needUpdateModules": {
                    key: m.to_dict() for key, m in self.need_update_modules.items()
                },
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ServerReport":
        modules = data.get("modules") or {}
        counts = empty_counts()
        for code, total in (modules.get("counts") or {}).items():
            counts[int(code)] = int(total)
        return cls(
            host=str(data.get("host", "")),
            checked=bool(data.get("checked", False)),
            message=str(data.get("message") or ""),
            counts=counts,
            modules={
                str(name): ModuleRecord.from_dict(m)
                for name, m in (modules.get("modules") or {}).items()
            },
            need_update_modules={
                str(key): ModuleRecord.from_dict(m)
                for key, m in (modules.get("needUpdateModules") or {}).items()
            },
        )


@dataclass
class ProjectReport:
    """Aggregated status for every polled server of one project."""

    id: str
    type: str
    group: str
    name: str
    team: str
    checked: bool = False
    message: str = ""
    report: Dict[str, ServerReport] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return f"{self.group} {self.name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "checked": self.checked,
            "id": self.id,
            "type": self.type,
            "group": self.group,
            "name": self.name,
            "team": self.team,
            "message": self.message,
            "report": {label: server.to_dict() for label, server in self.report.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectReport":
        return cls(
            id=str(data["id"]),
            type=str(data.get("type", "")),
            group=str(data.get("group", "")),
            name=str(data.get("name", "")),
            team=str(data.get("team", "")),
            checked=bool(data.get("checked", False)),
            message=str(data.get("message") or ""),
            report={
                str(label): ServerReport.from_dict(server)
                for label, server in (data.get("report") or {}).items()
            },
        )


@dataclass
class AggregateReport:
    """Project reports keyed by project identifier, in polling order."""

    projects: Dict[str, ProjectReport] = field(default_factory=dict)

    def add(self, project: ProjectReport) -> None:
        self.projects[project.id] = project

    def teams(self) -> List[str]:
        """Return the team names in the order they first appear."""

        return list(dict.fromkeys(p.team for p in self.projects.values()))

    def __iter__(self) -> Iterator[ProjectReport]:
        return iter(self.projects.values())

    def __len__(self) -> int:
        return len(self.projects)

    def to_dict(self) -> Dict[str, Any]:
        return {key: project.to_dict() for key, project in self.projects.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AggregateReport":
        return cls(
            projects={str(key): ProjectReport.from_dict(value) for key, value in data.items()}
        )


__all__ = ["AggregateReport", "ModuleRecord", "ProjectReport", "ServerReport"]

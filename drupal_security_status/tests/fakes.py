"""In-memory stand-ins for projects and servers used by the tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from drupal_security_status.remote import CommandResult


@dataclass
class FakeServer:
    label: str
    host: str
    user: str = "deploy"
    return_code: int = 0
    output: List[str] = field(default_factory=list)
    commands: List[str] = field(default_factory=list)

    def run_remote(self, command: str) -> CommandResult:
        self.commands.append(command)
        return CommandResult(return_code=self.return_code, output=list(self.output))


@dataclass
class FakeProject:
    group: str
    name: str
    team: str = "web"
    type: str = "d8"
    poll_security_automatically: bool = True
    servers: List[FakeServer] = field(default_factory=list)

    @property
    def identifier(self) -> str:
        return f"{self.group}.{self.name}"

    def security_pollable_servers(self) -> List[FakeServer]:
        return self.servers

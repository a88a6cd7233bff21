# src/brnch/core/scope.py

"""
Scope key derivation.

A scope is the (project, branch) pair; it owns exactly one stored task list.

Key layout:
- prefix:          tasks_<project>_<branch>
- record key:      tasks_<project>_<branch>_tasks
- project pattern: tasks_<project>_*   (secondary index over every branch of a project)

Each component is percent-escaped before joining ("%", the "_" delimiter and the glob
metacharacters "*", "?", "["), so a component can neither contain the delimiter nor act
as a wildcard inside an index pattern. Names without those characters keep the plain
layout; project "a_b" + branch "c" and project "a" + branch "b_c" get different keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote

from ..errors import ScopeUnavailable

NAMESPACE = "tasks"
RECORD_SUFFIX = "tasks"
DELIMITER = "_"

_ESCAPES = {"%": "%25", "_": "%5F", "*": "%2A", "?": "%3F", "[": "%5B"}


def escape_component(name: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in name)


def unescape_component(raw: str) -> str:
    return unquote(raw)


@dataclass(frozen=True, slots=True)
class Scope:
    project: str
    branch: str

    def __post_init__(self) -> None:
        if not self.project or not self.project.strip():
            raise ScopeUnavailable("Project name is empty.")
        if not self.branch or not self.branch.strip():
            raise ScopeUnavailable("Branch name is empty.")

    @property
    def prefix(self) -> str:
        return DELIMITER.join(
            (NAMESPACE, escape_component(self.project), escape_component(self.branch))
        )

    @property
    def key(self) -> str:
        return f"{self.prefix}{DELIMITER}{RECORD_SUFFIX}"

    @property
    def project_pattern(self) -> str:
        return project_pattern(self.project)

    @property
    def index_name(self) -> str:
        return f"{NAMESPACE}{DELIMITER}{escape_component(self.project)}"

    def __str__(self) -> str:
        return f"{self.project} :: {self.branch}"


def project_pattern(project: str) -> str:
    return f"{NAMESPACE}{DELIMITER}{escape_component(project)}{DELIMITER}*"


def scope_from_key(key: str) -> Scope | None:
    """Decode a record key back into its scope; None for keys that are not task records."""
    parts = key.split(DELIMITER)
    if len(parts) != 4 or parts[0] != NAMESPACE or parts[3] != RECORD_SUFFIX:
        return None
    try:
        return Scope(project=unescape_component(parts[1]), branch=unescape_component(parts[2]))
    except ScopeUnavailable:
        return None

# tests/test_scope.py

from __future__ import annotations

import pytest

from brnch.core.scope import Scope, escape_component, project_pattern, scope_from_key
from brnch.errors import ScopeUnavailable


def test_plain_names_keep_simple_layout() -> None:
    s = Scope("brnch", "main")

    assert s.prefix == "tasks_brnch_main"
    assert s.key == "tasks_brnch_main_tasks"
    assert s.project_pattern == "tasks_brnch_*"
    assert str(s) == "brnch :: main"


def test_delimiter_in_names_cannot_collide() -> None:
    assert Scope("a_b", "c").key != Scope("a", "b_c").key


def test_escaping_covers_percent_and_glob_characters() -> None:
    assert escape_component("50%_off*?[x]") == "50%25%5Foff%2A%3F%5Bx]"
    assert project_pattern("a_b") == "tasks_a%5Fb_*"


@pytest.mark.parametrize(
    ("project", "branch"),
    [
        ("brnch", "main"),
        ("my_proj", "feature/add_thing"),
        ("100%", "%5F"),
        ("glob*", "what?[1]"),
    ],
)
def test_scope_from_key_decodes_record_keys(project: str, branch: str) -> None:
    assert scope_from_key(Scope(project, branch).key) == Scope(project, branch)


@pytest.mark.parametrize("key", ["tasks_a_b", "other_a_b_tasks", "tasks_a_b_c_tasks", "tasks__b_tasks"])
def test_scope_from_key_rejects_foreign_keys(key: str) -> None:
    assert scope_from_key(key) is None


@pytest.mark.parametrize(("project", "branch"), [("", "main"), ("demo", ""), ("  ", "main")])
def test_empty_names_are_rejected(project: str, branch: str) -> None:
    with pytest.raises(ScopeUnavailable):
        Scope(project, branch)

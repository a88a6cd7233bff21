# tests/test_session.py

from __future__ import annotations

from brnch.core.saver import BackgroundSaver
from brnch.core.session import EditingSession, Intent, Mode
from brnch.tasks.task_models import Task, TaskLevel

from .fakes import FailingTaskRepo, InMemoryTaskRepo, RecordingSink


def _session(tasks=None) -> tuple[EditingSession, InMemoryTaskRepo]:
    repo = InMemoryTaskRepo(tasks)
    saver = BackgroundSaver(repo, background=False)
    return EditingSession.start(repo, saver), repo


def test_start_loads_existing_tasks() -> None:
    session, _ = _session([Task("a"), Task("b")])

    assert [t.text for t in session.view()] == ["a", "b"]
    assert session.mode is Mode.NORMAL


def test_every_mutation_is_followed_by_a_save() -> None:
    session, repo = _session([Task("a"), Task("b")])

    assert session.apply(Intent.TOGGLE)
    assert session.apply(Intent.CURSOR_DOWN) is False
    assert session.apply(Intent.MOVE_UP)
    assert session.apply(Intent.LEVEL_SUB)
    assert session.apply(Intent.DELETE)

    assert len(repo.saves) == 4
    assert repo.last_saved == [Task("a", checked=True)]


def test_noop_intents_do_not_save() -> None:
    session, repo = _session([Task("a")])

    session.apply(Intent.MOVE_UP)
    session.apply(Intent.LEVEL_TOP)
    session.apply(Intent.CURSOR_UP)

    assert repo.saves == []


def test_insert_mode_commit_inserts_after_selection() -> None:
    session, repo = _session([Task("a"), Task("c")])

    session.apply(Intent.BEGIN_INSERT)
    assert session.mode is Mode.INSERT
    assert session.input_seed() == ""

    assert session.apply(Intent.COMMIT_INPUT, "  b  ")
    assert session.mode is Mode.NORMAL
    assert [t.text for t in session.view()] == ["a", "b", "c"]
    assert session.tasks.cursor == 1
    assert [t.text for t in repo.last_saved] == ["a", "b", "c"]


def test_insert_into_empty_list_appends() -> None:
    session, repo = _session()

    session.apply(Intent.BEGIN_INSERT)
    session.apply(Intent.COMMIT_INPUT, "first")

    assert repo.last_saved == [Task("first", checked=False, level=TaskLevel.TOP)]


def test_update_mode_replaces_text() -> None:
    session, repo = _session([Task("old", checked=True)])

    session.apply(Intent.BEGIN_UPDATE)
    assert session.mode is Mode.UPDATE
    assert session.input_seed() == "old"

    assert session.apply(Intent.COMMIT_INPUT, "new")
    assert repo.last_saved == [Task("new", checked=True)]


def test_begin_update_needs_a_selected_task() -> None:
    session, _ = _session()

    session.apply(Intent.BEGIN_UPDATE)

    assert session.mode is Mode.NORMAL


def test_cancel_and_blank_commit_change_nothing() -> None:
    session, repo = _session([Task("a")])

    session.apply(Intent.BEGIN_INSERT)
    assert session.apply(Intent.CANCEL_INPUT) is False
    assert session.mode is Mode.NORMAL

    session.apply(Intent.BEGIN_INSERT)
    assert session.apply(Intent.COMMIT_INPUT, "   ") is False
    assert session.mode is Mode.NORMAL

    assert repo.saves == []
    assert len(session.view()) == 1


def test_intents_outside_their_mode_are_ignored() -> None:
    session, repo = _session([Task("a")])

    assert session.apply(Intent.COMMIT_INPUT, "x") is False

    session.apply(Intent.BEGIN_INSERT)
    assert session.apply(Intent.TOGGLE) is False
    assert session.apply(Intent.DELETE) is False
    assert session.mode is Mode.INSERT

    assert repo.saves == []


def test_save_failure_stops_the_session() -> None:
    repo = FailingTaskRepo([Task("a"), Task("b")], fail_after=1)
    saver = BackgroundSaver(repo, background=False)
    session = EditingSession.start(repo, saver)

    assert session.apply(Intent.TOGGLE)
    session.apply(Intent.DELETE)

    assert session.failed
    assert session.error is not None
    # Rejected after failure; in-memory state is still available for reporting.
    assert session.apply(Intent.TOGGLE) is False
    assert [t.text for t in session.view()] == ["b"]


def test_background_failure_reaches_session_through_callback() -> None:
    repo = FailingTaskRepo([Task("a")], fail_after=0)
    holder: list[EditingSession] = []
    saver = BackgroundSaver(repo, on_error=lambda err: holder[0].fail(err))
    session = EditingSession.start(repo, saver)
    holder.append(session)

    session.apply(Intent.TOGGLE)
    saver.flush()
    saver.shutdown()

    assert session.failed


def test_saves_receive_snapshots_not_live_tasks() -> None:
    sink = RecordingSink()
    session = EditingSession.start(InMemoryTaskRepo([Task("a")]), sink)

    session.apply(Intent.TOGGLE)
    session.apply(Intent.TOGGLE)

    assert [s[0].checked for s in sink.submitted] == [True, False]


def test_unchanged_update_commit_is_a_cancel() -> None:
    session, repo = _session([Task("  padded\nand multi-line ")])

    session.apply(Intent.BEGIN_UPDATE)
    assert session.apply(Intent.COMMIT_INPUT, session.input_seed()) is False

    assert session.mode is Mode.NORMAL
    assert repo.saves == []
    assert session.view()[0].text == "  padded\nand multi-line "

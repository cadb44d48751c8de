"""
Tests for the Navigation Engine.

Tests verify:
    - enter/choose push the node being left onto history
    - go_back is the exact inverse of enter(n, True)
    - reset clears navigation but keeps the language
    - unknown ids fall back to INTRO without raising
    - language changes redisplay without touching history
    - storage is written as a mirror and its failures are ignored
    - the startup contract never resumes a stored position
"""

import json
import threading

import pytest

from lifeline.clipboard import COPY_FAILED, COPY_OK, MemoryClipboard
from lifeline.content import build_default_content
from lifeline.engine import (
    IntroView,
    NavigationEngine,
    NavigationState,
    QuestionView,
    ResultView,
    ViewKind,
)
from lifeline.serialization import content_from_dict
from lifeline.storage import KeyValueStore, MemoryStore


class BrokenStore(KeyValueStore):
    def get(self, key):
        raise OSError("storage disabled")

    def set(self, key, value):
        raise OSError("quota exceeded")

    def remove(self, key):
        raise OSError("storage disabled")


@pytest.fixture
def content():
    return build_default_content()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def engine(content, store):
    return NavigationEngine(content, store=store)


class TestEnter:
    """enter(node_id, push_current_to_history)."""

    def test_enter_question_from_intro(self, engine):
        view = engine.enter("general_intro", True)
        assert isinstance(view, QuestionView)
        assert view.kind == ViewKind.QUESTION
        assert view.question == "What's happening?"
        assert len(view.options) == 5
        assert view.options[0].next == "general_error"
        assert engine.state.current_id == "general_intro"
        assert engine.state.history == []
        assert not view.back_enabled

    def test_enter_pushes_previous_current(self, engine):
        engine.enter("general_intro", True)
        engine.enter("general_error", True)
        assert engine.state.history == ["general_intro"]
        assert engine.state.current_id == "general_error"

    def test_enter_without_push(self, engine):
        engine.enter("general_intro", True)
        engine.enter("git_intro", False)
        assert engine.state.history == []
        assert engine.state.current_id == "git_intro"

    def test_enter_result(self, engine):
        engine.enter("git_intro", True)
        view = engine.enter("git_nocommit", True)
        assert isinstance(view, ResultView)
        assert view.title == "Git won't let me commit"
        assert "<code>git status</code>" in view.body
        assert view.back_enabled

    def test_unknown_id_is_intro(self, engine):
        engine.enter("general_intro", True)
        view = engine.enter("nonexistent_id", True)
        assert isinstance(view, IntroView)
        assert engine.mode == ViewKind.INTRO
        assert engine.state.current_id is None
        assert engine.state.history == []

    def test_unknown_id_from_intro(self, engine):
        assert isinstance(engine.enter("nonexistent_id", True), IntroView)

    def test_history_top_is_never_current(self, engine):
        engine.enter("general_intro", True)
        engine.enter("general_error", True)
        assert engine.state.history[-1] != engine.state.current_id

    def test_reentering_current_node_does_not_push(self, engine):
        engine.enter("start", True)
        engine.enter("general_intro", True)
        view = engine.enter("general_intro", True)
        assert view.node_id == "general_intro"
        assert engine.state.history == ["start"]
        assert engine.go_back().node_id == "start"

    def test_reentering_first_node_keeps_history_empty(self, engine):
        engine.enter("general_intro", True)
        engine.enter("general_intro", True)
        assert engine.state.history == []
        assert not engine.can_go_back

    def test_entering_history_top_without_push_pops_it(self, engine):
        engine.enter("start", True)
        engine.enter("general_intro", True)
        engine.enter("start", False)
        assert engine.state.current_id == "start"
        assert engine.state.history == []

    def test_entering_history_top_after_intro_fallback(self, engine):
        engine.enter("start", True)
        engine.enter("general_intro", True)
        engine.enter("nonexistent_id", True)
        assert engine.state.history == ["start"]
        engine.enter("start", True)
        assert engine.state.current_id == "start"
        assert engine.state.history == []


class TestChoose:

    def test_choose_enters_option_target(self, engine):
        engine.enter("general_intro", True)
        view = engine.choose(0)
        assert isinstance(view, ResultView)
        assert view.node_id == "general_error"
        assert engine.state.history == ["general_intro"]

    def test_choose_out_of_range_is_intro(self, engine):
        engine.enter("general_intro", True)
        assert isinstance(engine.choose(9), IntroView)
        assert engine.state.history == []

    def test_choose_on_result_is_intro(self, engine):
        engine.enter("git_nocommit", True)
        assert isinstance(engine.choose(0), IntroView)

    def test_choose_dangling_target_is_intro(self):
        content = content_from_dict({
            "general_intro": {
                "id": "general_intro",
                "question": "Q?",
                "options": [{"text": "broken", "next": "gone"}],
            },
        })
        engine = NavigationEngine(content)
        engine.enter("general_intro", True)
        assert isinstance(engine.choose(0), IntroView)
        assert engine.state.history == []


class TestGoBack:

    def test_round_trip(self, engine):
        engine.enter("start", True)
        engine.enter("general_intro", True)
        before = engine.state.copy()

        engine.enter("general_output", True)
        engine.go_back()

        assert engine.state.current_id == before.current_id
        assert engine.state.history == before.history

    def test_back_with_empty_history_is_intro(self, engine):
        engine.enter("general_intro", True)
        view = engine.go_back()
        assert isinstance(view, IntroView)
        assert not view.back_enabled
        assert engine.state.current_id is None

    def test_back_never_pushes(self, engine):
        engine.enter("start", True)
        engine.choose(1)
        engine.choose(2)
        assert engine.state.history == ["start", "git_intro"]
        engine.go_back()
        assert engine.state.history == ["start"]
        engine.go_back()
        assert engine.state.history == []
        assert engine.state.current_id == "start"

    def test_back_enabled_tracks_history(self, engine):
        engine.enter("start", True)
        engine.choose(0)
        engine.choose(0)
        view = engine.go_back()
        assert view.back_enabled
        view = engine.go_back()
        assert not view.back_enabled
        assert not engine.can_go_back


class TestReset:

    def test_reset_clears_navigation(self, engine, store):
        engine.enter("general_intro", True)
        engine.choose(3)
        view = engine.reset()
        assert isinstance(view, IntroView)
        assert engine.state.history == []
        assert engine.state.current_id is None
        assert engine.mode == ViewKind.INTRO
        assert store.get("tl_state") is None

    def test_reset_keeps_language(self, engine, store):
        engine.set_language("java")
        engine.enter("general_intro", True)
        engine.reset()
        assert engine.state.language == "java"
        assert store.get("tl_lang") == "java"

    def test_reset_from_intro(self, engine):
        assert isinstance(engine.reset(), IntroView)


class TestLanguage:

    def test_set_language_redisplays_current(self, engine):
        engine.enter("general_intro", True)
        engine.choose(2)
        view = engine.set_language("csharp")
        assert isinstance(view, ResultView)
        assert view.title == "My C# program won't run"
        assert engine.state.history == ["general_intro"]

    def test_set_language_twice_is_idempotent(self, engine):
        engine.enter("general_intro", True)
        engine.choose(0)
        first = engine.set_language("java")
        second = engine.set_language("java")
        assert first == second
        assert engine.state.history == ["general_intro"]

    def test_set_language_at_intro(self, engine, store):
        assert isinstance(engine.set_language("java"), IntroView)
        assert store.get("tl_lang") == "java"

    def test_unknown_language_falls_back_to_canonical(self, engine):
        engine.set_language("python")
        view = engine.enter("general_error", True)
        assert view.title.startswith("JavaScript error message")

    def test_resolve_text_uses_active_language(self, engine):
        engine.set_language("french")
        assert engine.resolve_text({"javascript": "A", "french": "B"}) == "B"
        engine.set_language("spanish")
        assert engine.resolve_text({"javascript": "A", "french": "B"}) == "A"
        assert engine.resolve_text({"french": "B", "german": "C"}) == "B"
        assert engine.resolve_text("plain") == "plain"

    def test_configurable_fallback_language(self, content):
        engine = NavigationEngine(content, fallback_language="java")
        assert engine.state.language == "java"
        engine.set_language("python")
        assert engine.enter("general_wontrun", True).title == "My Java program won't run"

    def test_restore_language(self, engine):
        engine.restore_language("csharp")
        assert engine.state.language == "csharp"
        engine.restore_language(None)
        engine.restore_language("")
        assert engine.state.language == "csharp"


class TestPersistence:

    def test_enter_writes_navigation(self, engine, store):
        engine.enter("general_intro", True)
        engine.choose(1)
        assert json.loads(store.get("tl_state")) == {
            "current": "general_output",
            "history": ["general_intro"],
        }

    def test_go_back_writes_navigation(self, engine, store):
        engine.enter("general_intro", True)
        engine.choose(1)
        engine.go_back()
        assert json.loads(store.get("tl_state")) == {"current": "general_intro", "history": []}

    def test_unknown_id_is_not_written(self, engine, store):
        engine.enter("nonexistent_id", True)
        assert store.get("tl_state") is None

    def test_custom_keys(self, content, store):
        engine = NavigationEngine(content, store=store, nav_key="nav", lang_key="lang")
        engine.enter("git_intro", True)
        engine.set_language("java")
        assert set(store.data) == {"nav", "lang"}

    def test_broken_storage_does_not_interrupt(self, content):
        engine = NavigationEngine(content, store=BrokenStore())
        assert isinstance(engine.start(), IntroView)
        engine.enter("general_intro", True)
        view = engine.choose(0)
        assert isinstance(view, ResultView)
        engine.set_language("java")
        assert engine.go_back().node_id == "general_intro"
        assert isinstance(engine.reset(), IntroView)

    def test_no_store(self, content):
        engine = NavigationEngine(content)
        engine.enter("general_intro", True)
        assert engine.state.current_id == "general_intro"


class TestStartup:

    def test_start_restores_language(self, content):
        store = MemoryStore({"tl_lang": "java"})
        engine = NavigationEngine(content, store=store)
        assert isinstance(engine.start(), IntroView)
        assert engine.state.language == "java"

    def test_start_never_resumes_position(self, content):
        store = MemoryStore({
            "tl_state": json.dumps({"current": "git_nocommit", "history": ["git_intro"]}),
        })
        engine = NavigationEngine(content, store=store)
        engine.start()
        assert engine.state.current_id is None
        assert engine.state.history == []
        assert engine.mode == ViewKind.INTRO

    def test_start_path(self, engine):
        engine.start()
        assert engine.start_path("git").node_id == "git_intro"
        engine.reset()
        assert engine.start_path("general").node_id == "general_intro"

    def test_start_path_twice_keeps_history_empty(self, engine):
        engine.start()
        engine.start_path("general")
        view = engine.start_path("general")
        assert view.node_id == "general_intro"
        assert engine.state.history == []
        assert not view.back_enabled

    def test_start_path_from_deep_node_clears_history(self, engine, store):
        engine.start()
        engine.start_path("git")
        engine.choose(0)
        assert engine.state.history == ["git_intro"]

        view = engine.start_path("general")
        assert view.node_id == "general_intro"
        assert engine.state.history == []
        assert isinstance(engine.go_back(), IntroView)
        assert json.loads(store.get("tl_state")) == {"current": "general_intro", "history": []}

    def test_any_valid_id_can_be_entered(self, engine):
        engine.start()
        assert engine.enter("git_remotes", True).node_id == "git_remotes"


class TestCopy:

    def test_copy_result_body(self, engine):
        engine.enter("git_notpushed", True)
        clipboard = MemoryClipboard()
        note = engine.copy_result(clipboard)
        assert note.ok and note.message == COPY_OK
        assert clipboard.copied[0].startswith("Make sure you pushed")
        assert "<" not in clipboard.copied[0]

    def test_copy_outside_result_fails(self, engine):
        engine.enter("git_intro", True)
        note = engine.copy_result(MemoryClipboard())
        assert note.message == COPY_FAILED

    def test_copy_does_not_touch_navigation(self, engine):
        engine.enter("git_intro", True)
        engine.choose(0)
        before = engine.state.copy()
        engine.copy_result(MemoryClipboard())
        assert engine.state == before


def test_general_error_scenario(engine):
    """Intro -> general_intro -> general_error -> back."""
    assert isinstance(engine.start(), IntroView)

    view = engine.enter("general_intro", True)
    assert isinstance(view, QuestionView)
    assert len(view.options) == 5
    target = [i for i, o in enumerate(view.options) if o.next == "general_error"][0]

    view = engine.choose(target)
    assert isinstance(view, ResultView)
    assert view.back_enabled

    view = engine.go_back()
    assert isinstance(view, QuestionView)
    assert view.node_id == "general_intro"
    assert not view.back_enabled


def test_independent_sessions(content):
    a = NavigationEngine(content)
    b = NavigationEngine(content)
    a.enter("general_intro", True)
    a.choose(0)
    b.set_language("java")
    assert b.state.current_id is None
    assert a.state.language == a.fallback_language


def test_explicit_state(content):
    state = NavigationState(current_id="git_intro", history=["start"], language="csharp")
    engine = NavigationEngine(content, state=state)
    view = engine.current_view()
    assert view.node_id == "git_intro"
    assert view.back_enabled


def test_concurrent_transitions_keep_state_consistent(content):
    store = MemoryStore()
    engine = NavigationEngine(content, store=store)
    engine.enter("start", True)

    def worker(node_id):
        for _ in range(50):
            engine.enter(node_id, True)
            engine.go_back()

    ids = ["general_intro", "git_intro", "general_error", "git_nocommit"]
    threads = [threading.Thread(target=worker, args=(node_id,)) for node_id in ids]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    state = engine.state
    assert all(node_id in content for node_id in state.history)
    assert all(a != b for a, b in zip(state.history, state.history[1:]))
    if state.history:
        assert state.history[-1] != state.current_id
    if state.current_id is not None:
        assert json.loads(store.get("tl_state")) == {
            "current": state.current_id,
            "history": state.history,
        }

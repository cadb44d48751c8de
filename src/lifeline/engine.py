"""
Navigation Engine: walks a ContentModel one node at a time.

States:
    INTRO            - nothing active (start, reset, or a failed lookup)
    QUESTION(nodeId) - a question node is shown
    RESULT(nodeId)   - a result node is shown

Every operation returns a view: a render-ready value with all text
already resolved for the active language. The presentation layer paints
views and binds its buttons back to enter()/choose()/go_back()/reset().

ARCHITECTURAL RULE:
    The engine never raises for content problems.
    Unknown ids fall back to INTRO; unresolvable text is stringified.
    Storage failures stay inside SafeStore.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple, Union

from lifeline.clipboard import COPY_FAILED, Clipboard, Notification, copy_text, html_to_text
from lifeline.config import CANONICAL_LANGUAGE, LANG_KEY, NAV_KEY
from lifeline.model import ContentModel, Node, QuestionNode, ResultNode, root_for
from lifeline.serialization import state_to_dict
from lifeline.storage import KeyValueStore, SafeStore
from lifeline.text import LocalizedText, RawText, resolve_text

logger = logging.getLogger(__name__)


class ViewKind(Enum):
    INTRO = "intro"
    QUESTION = "question"
    RESULT = "result"


@dataclass(frozen=True)
class OptionView:
    """One resolved option: its label and the node it leads to."""

    text: str
    next: str


@dataclass(frozen=True)
class IntroView:
    """The idle/start screen. Back is always disabled here."""

    back_enabled: bool = False

    kind = ViewKind.INTRO


@dataclass(frozen=True)
class QuestionView:
    node_id: str
    question: str
    options: Tuple[OptionView, ...]
    back_enabled: bool

    kind = ViewKind.QUESTION


@dataclass(frozen=True)
class ResultView:
    node_id: str
    title: str
    body: str
    back_enabled: bool

    kind = ViewKind.RESULT


View = Union[IntroView, QuestionView, ResultView]


@dataclass
class NavigationState:
    """
    Session state owned by one engine.

    Properties:
        current_id: Node on screen, or None at INTRO
        history: Ancestors of current_id, most recent last
        language: Active language key

    INVARIANT:
        After a successful entry, history[-1] != current_id.
    """

    current_id: Optional[str] = None
    history: List[str] = field(default_factory=list)
    language: str = CANONICAL_LANGUAGE

    def copy(self) -> "NavigationState":
        return replace(self, history=list(self.history))


class NavigationEngine:
    """
    Owns a NavigationState and mediates every transition.

    Each public operation works on a snapshot of the state and commits it
    in one step under a lock, so current_id and history always move
    together.

    Args:
        content: The decision tree
        store: Persistence collaborator (optional; wrapped in SafeStore)
        state: Initial state (a fresh one by default)
        fallback_language: Canonical language for text resolution
        nav_key: Storage key for the navigation snapshot
        lang_key: Storage key for the language preference
    """

    def __init__(
        self,
        content: ContentModel,
        store: Optional[KeyValueStore] = None,
        state: Optional[NavigationState] = None,
        fallback_language: str = CANONICAL_LANGUAGE,
        nav_key: str = NAV_KEY,
        lang_key: str = LANG_KEY,
    ):
        self.content = content
        self.store = store if isinstance(store, SafeStore) else SafeStore(store)
        self.state = state if state is not None else NavigationState(language=fallback_language)
        self.fallback_language = fallback_language
        self.nav_key = nav_key
        self.lang_key = lang_key
        self._lock = threading.Lock()

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def mode(self) -> ViewKind:
        node = self.content.get_node(self.state.current_id)
        if isinstance(node, QuestionNode):
            return ViewKind.QUESTION
        if isinstance(node, ResultNode):
            return ViewKind.RESULT
        return ViewKind.INTRO

    @property
    def can_go_back(self) -> bool:
        return len(self.state.history) > 0

    def resolve_text(self, item: Union[LocalizedText, RawText]) -> str:
        """Resolve text for the active language."""
        return resolve_text(item, self.state.language, self.fallback_language)

    def current_view(self) -> View:
        with self._lock:
            return self._view_of(self.state)

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def enter(self, node_id: str, push_current_to_history: bool = True) -> View:
        """
        Enter a node.

        Args:
            node_id: Node to show
            push_current_to_history: Push the node being left onto history.
                Re-entering the current node pushes nothing, and entering
                the node on top of history pops it.

        Returns:
            QuestionView or ResultView; IntroView if `node_id` is unknown
        """
        with self._lock:
            return self._commit(self._entered(self.state.copy(), node_id, push_current_to_history))

    def choose(self, index: int) -> View:
        """
        Pick option `index` of the current question.

        Equivalent to enter(option.next, True). An index that does not
        name an option of the current question falls back to INTRO.
        """
        with self._lock:
            snapshot = self.state.copy()
            node = self.content.get_node(snapshot.current_id)
            if not isinstance(node, QuestionNode) or not 0 <= index < len(node.options):
                logger.debug("No option %r at %r", index, snapshot.current_id)
                return self._commit(self._intro(snapshot))
            return self._commit(self._entered(snapshot, node.options[index].next, True))

    def go_back(self) -> View:
        """
        Return to the previous node.

        Pops history and re-enters the popped id without pushing anything.
        With empty history the engine goes to INTRO.
        """
        with self._lock:
            snapshot = self.state.copy()
            if not snapshot.history:
                return self._commit(self._intro(snapshot))
            previous = snapshot.history.pop()
            return self._commit(self._entered(snapshot, previous, False))

    def reset(self) -> View:
        """
        Clear history and current node and go to INTRO.

        The stored navigation snapshot is removed; the language is kept.
        """
        with self._lock:
            self.state = NavigationState(language=self.state.language)
            self.store.remove(self.nav_key)
            logger.debug("Reset")
            return IntroView()

    def set_language(self, language: str) -> View:
        """
        Switch the active language.

        Stores the preference and redisplays the current node in the new
        language. History is untouched.
        """
        with self._lock:
            self.state.language = language
            self.store.set(self.lang_key, language)
            logger.debug("Language set to %r", language)
            return self._view_of(self.state)

    def restore_language(self, persisted_language: Optional[str]) -> None:
        """Adopt a persisted language preference, if there is one."""
        if persisted_language:
            with self._lock:
                self.state.language = persisted_language

    def start(self) -> IntroView:
        """
        Begin a session.

        Restores the stored language, then shows INTRO. A stored navigation
        position is never resumed.
        """
        self.restore_language(self.store.get(self.lang_key))
        with self._lock:
            self.state = NavigationState(language=self.state.language)
        logger.info("Session started (language=%r)", self.state.language)
        return IntroView()

    def start_path(self, start_key: str) -> View:
        """
        Enter the root node behind a start button ("git" or general).

        A fresh entry, not a descent: history is cleared and nothing is
        pushed.
        """
        with self._lock:
            snapshot = self.state.copy()
            snapshot.history = []
            return self._commit(self._entered(snapshot, root_for(start_key), False))

    def copy_result(self, clipboard: Clipboard) -> Notification:
        """Copy the visible text of the current result body."""
        view = self.current_view()
        if not isinstance(view, ResultView):
            return Notification(ok=False, message=COPY_FAILED)
        return copy_text(clipboard, html_to_text(view.body))

    # =========================================================================
    # INTERNALS (called with the lock held)
    # =========================================================================

    def _entered(self, snapshot: NavigationState, node_id: str, push: bool) -> Tuple[NavigationState, bool]:
        node = self.content.get_node(node_id)
        if node is None:
            logger.debug("Unknown node %r, showing intro", node_id)
            return self._intro(snapshot)
        if push and snapshot.current_id is not None and snapshot.current_id != node_id:
            snapshot.history.append(snapshot.current_id)
        elif snapshot.history and snapshot.history[-1] == node_id:
            snapshot.history.pop()
        snapshot.current_id = node_id
        logger.debug("Entered %r (history depth %d)", node_id, len(snapshot.history))
        return snapshot, True

    def _intro(self, snapshot: NavigationState) -> Tuple[NavigationState, bool]:
        snapshot.current_id = None
        return snapshot, False

    def _commit(self, outcome: Tuple[NavigationState, bool]) -> View:
        snapshot, persist = outcome
        self.state = snapshot
        if persist:
            self.store.set(self.nav_key, json.dumps(state_to_dict(snapshot.current_id, snapshot.history)))
        return self._view_of(snapshot)

    def _view_of(self, state: NavigationState) -> View:
        node: Optional[Node] = self.content.get_node(state.current_id)
        back_enabled = len(state.history) > 0

        def text(item: LocalizedText) -> str:
            return resolve_text(item, state.language, self.fallback_language)

        if isinstance(node, QuestionNode):
            return QuestionView(
                node_id=state.current_id,
                question=text(node.question),
                options=tuple(OptionView(text=text(o.text), next=o.next) for o in node.options),
                back_enabled=back_enabled,
            )
        if isinstance(node, ResultNode):
            return ResultView(
                node_id=state.current_id,
                title=text(node.result.title),
                body=text(node.result.body),
                back_enabled=back_enabled,
            )
        return IntroView()

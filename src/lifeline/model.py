"""
Content Model Objects

Defines the decision tree the navigator walks:
    - Options (labelled edges to another node)
    - Question nodes (branch to other nodes)
    - Result nodes (terminal advice)
    - ContentModel (the read-only id -> node mapping)

ARCHITECTURAL RULE:
    These objects:
        - Are immutable once loaded
        - Know nothing about languages being selected
        - Know nothing about navigation state
        - Represent structure, not behavior
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from lifeline.text import LocalizedText, PlainText


class NodeKind(Enum):
    """The two shapes a node can take."""
    QUESTION = "question"
    RESULT = "result"


@dataclass(frozen=True)
class Option:
    """
    One answer offered by a question node.

    Properties:
        text: Label shown for the option
        next: Id of the node entered when the option is chosen

    IMPORTANT:
        `next` is not checked here. A target missing from the model
        is reported by validation and falls back to Intro when entered.
    """

    text: LocalizedText
    next: str


@dataclass(frozen=True)
class ResultContent:
    """Title and body of a result node."""

    title: LocalizedText
    body: LocalizedText


@dataclass(frozen=True)
class QuestionNode:
    """
    A node that asks a question and branches.

    Properties:
        id: Unique identifier, equal to its key in the ContentModel
        question: Question text
        options: Ordered, non-empty sequence of options
    """

    id: str
    question: LocalizedText
    options: Tuple[Option, ...] = ()

    kind = NodeKind.QUESTION


@dataclass(frozen=True)
class ResultNode:
    """
    A terminal node carrying advice.

    Properties:
        id: Unique identifier, equal to its key in the ContentModel
        result: Title and body
    """

    id: str
    result: ResultContent = field(default_factory=lambda: ResultContent(PlainText(""), PlainText("")))

    kind = NodeKind.RESULT


Node = Union[QuestionNode, ResultNode]


# Start targets wired to the two entry buttons
ROOT_NODES: Dict[str, str] = {
    "general": "general_intro",
    "git": "git_intro",
}


def root_for(start_key: str) -> str:
    """Map a start button key to its root node id ("git" or general)."""
    return ROOT_NODES["git"] if start_key == "git" else ROOT_NODES["general"]


class ContentModel:
    """
    Root container for the decision tree.

    Loaded once, read-only afterwards. Lookup is by key.

    INVARIANTS (authoring, checked by lifeline.validation, not enforced):
        - node.id equals its key
        - every option target exists
        - every question has at least one option
        - the tree is acyclic
    """

    def __init__(self, nodes: Mapping[str, Node], name: str = "content"):
        self.name = name
        self._nodes = MappingProxyType(dict(nodes))

    @property
    def nodes(self) -> Mapping[str, Node]:
        return self._nodes

    def get_node(self, node_id: Optional[str]) -> Optional[Node]:
        """
        Retrieve a node by id.

        Args:
            node_id: Node identifier

        Returns:
            Node or None if not found
        """
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def node_ids(self) -> List[str]:
        return list(self._nodes.keys())

    def targets_of(self, node_id: str) -> List[str]:
        """Option targets of a question node, in order (empty otherwise)."""
        node = self.get_node(node_id)
        if isinstance(node, QuestionNode):
            return [opt.next for opt in node.options]
        return []

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        return f"ContentModel(name={self.name!r}, nodes={len(self)})"

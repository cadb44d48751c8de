"""
Serialization helpers for lifeline content and navigation state.

Authored content uses the same shape everywhere (dict, JSON, YAML):

    general_intro:
      id: general_intro
      question: "What's happening?"
      options:
        - {text: I see an error message, next: general_error}
    git_nocommit:
      id: git_nocommit
      result: {title: ..., body: ...}

Text fields are either a string or a language -> string mapping.
"""
from __future__ import annotations

import json
import logging
import os
import warnings
from typing import Any, Dict, List, Mapping, Optional

import yaml

from lifeline.errors import ContentFormatError, ContentWarning
from lifeline.model import (
    ContentModel,
    Node,
    Option,
    QuestionNode,
    ResultContent,
    ResultNode,
)
from lifeline.text import text_from_raw, text_to_raw

logger = logging.getLogger(__name__)


def option_to_dict(o: Option) -> Dict[str, Any]:
    return {"text": text_to_raw(o.text), "next": o.next}


def option_from_dict(d: Mapping[str, Any]) -> Option:
    return Option(text=text_from_raw(d.get("text")), next=str(d.get("next", "")))


def node_to_dict(n: Node) -> Dict[str, Any]:
    if isinstance(n, QuestionNode):
        return {
            "id": n.id,
            "question": text_to_raw(n.question),
            "options": [option_to_dict(o) for o in n.options],
        }
    if isinstance(n, ResultNode):
        return {
            "id": n.id,
            "result": {
                "title": text_to_raw(n.result.title),
                "body": text_to_raw(n.result.body),
            },
        }
    raise TypeError(f"Unsupported node type: {type(n)}")


def node_from_dict(key: str, d: Mapping[str, Any]) -> Optional[Node]:
    """
    Build one node from its authored dict.

    Returns None when the dict is neither a question nor a result.
    A missing `id` defaults to the map key.
    """
    if not isinstance(d, Mapping):
        return None
    node_id = str(d.get("id", key))
    if "question" in d:
        options = d.get("options") or []
        return QuestionNode(
            id=node_id,
            question=text_from_raw(d.get("question")),
            options=tuple(option_from_dict(o) for o in options if isinstance(o, Mapping)),
        )
    result = d.get("result")
    if isinstance(result, Mapping):
        return ResultNode(
            id=node_id,
            result=ResultContent(
                title=text_from_raw(result.get("title")),
                body=text_from_raw(result.get("body")),
            ),
        )
    return None


def content_to_dict(c: ContentModel) -> Dict[str, Any]:
    return {key: node_to_dict(node) for key, node in c.nodes.items()}


def content_from_dict(d: Any, name: str = "content") -> ContentModel:
    """
    Build a ContentModel from authored data.

    A node that is neither a question nor a result is left out and a
    ContentWarning is emitted. Entering it later behaves like an unknown id.

    Raises:
        ContentFormatError: If `d` is not a mapping
    """
    if not isinstance(d, Mapping):
        raise ContentFormatError(f"Content must be a mapping of node id to node, got {type(d).__name__}")

    nodes: Dict[str, Node] = {}
    skipped: List[str] = []
    for key, raw in d.items():
        node = node_from_dict(str(key), raw)
        if node is None:
            skipped.append(str(key))
            warnings.warn(f"Node {key!r} is neither a question nor a result; skipped", ContentWarning)
            continue
        nodes[str(key)] = node

    logger.info("Loaded content %r: %d node(s), %d skipped", name, len(nodes), len(skipped))
    return ContentModel(nodes, name=name)


def content_to_json(c: ContentModel) -> str:
    return json.dumps(content_to_dict(c), indent=2, ensure_ascii=False)


def content_from_json(s: str, name: str = "content") -> ContentModel:
    return content_from_dict(json.loads(s), name=name)


def content_to_yaml(c: ContentModel) -> str:
    return yaml.safe_dump(content_to_dict(c), sort_keys=False, allow_unicode=True)


def content_from_yaml(s: str, name: str = "content") -> ContentModel:
    return content_from_dict(yaml.safe_load(s), name=name)


def load_content_file(filepath: str) -> ContentModel:
    """
    Load content from a .json, .yaml or .yml file.

    Args:
        filepath: Path to the content file

    Returns:
        ContentModel named after the file

    Raises:
        FileNotFoundError: If file doesn't exist
        ContentFormatError: If the extension is unsupported or the document is not a mapping
    """
    name, ext = os.path.splitext(os.path.basename(filepath))
    ext = ext.lower()
    if ext not in (".json", ".yaml", ".yml"):
        raise ContentFormatError(f"Unsupported content file type: {ext or '(none)'}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Content file not found: {filepath}")

    if ext == ".json":
        return content_from_json(content, name=name)
    return content_from_yaml(content, name=name)


def state_to_dict(current: Optional[str], history: List[str]) -> Dict[str, Any]:
    """Persisted navigation snapshot."""
    return {"current": current, "history": list(history)}


"""
Graphviz DOT diagram generator for lifeline content.

Draws the decision tree for content authors:
    - Question nodes as boxes
    - Result nodes as notes
    - Option edges (labelled with the option text in DETAILED mode)
    - Missing option targets as red dashed nodes

Supports two modes:
    - SIMPLE: Node ids and edges only
    - DETAILED: Question/title text on nodes, option text on edges
"""

from enum import Enum
from typing import List, Set

from lifeline.config import CANONICAL_LANGUAGE
from lifeline.model import ContentModel, QuestionNode, ResultNode
from lifeline.text import resolve_text


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"      # Just the tree shape
    DETAILED = "detailed"  # Include question, title and option text


_MAX_LABEL = 40


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    s = s.replace('\\', '\\\\')
    s = s.replace('"', '\\"')
    s = s.replace('\n', '\\n')
    return f'"{s}"'


def _escape_dot_id(identifier: str) -> str:
    """Quote an identifier unless it is a plain DOT id."""
    if not identifier or identifier[0].isdigit() or not identifier.replace('_', '').isalnum():
        return _escape_dot_string(identifier)
    return identifier


def _shorten(label: str) -> str:
    label = " ".join(label.split())
    if len(label) > _MAX_LABEL:
        return label[:_MAX_LABEL - 3] + "..."
    return label


def generate_dot(content: ContentModel, mode: DotMode = DotMode.SIMPLE,
                 language: str = CANONICAL_LANGUAGE) -> str:
    """
    Generate Graphviz DOT format for a content tree.

    Args:
        content: ContentModel to visualize
        mode: Visualization mode (SIMPLE, DETAILED)
        language: Language used to resolve labels in DETAILED mode

    Returns:
        String containing DOT graph definition
    """
    lines: List[str] = []

    lines.append("digraph lifeline {")
    lines.append("  rankdir=LR;")
    lines.append("  node [shape=box, style=filled, fillcolor=lightblue];")

    # =========================================================================
    # NODES
    # =========================================================================

    for key, node in content.nodes.items():
        node_id = _escape_dot_id(key)
        label = key

        if isinstance(node, QuestionNode):
            if mode == DotMode.DETAILED:
                label = f"{key}\n{_shorten(resolve_text(node.question, language))}"
            lines.append(f"  {node_id} [label={_escape_dot_string(label)}];")
        elif isinstance(node, ResultNode):
            if mode == DotMode.DETAILED:
                label = f"{key}\n{_shorten(resolve_text(node.result.title, language))}"
            lines.append(f"  {node_id} [shape=note, fillcolor=lightyellow, label={_escape_dot_string(label)}];")

    # =========================================================================
    # EDGES (OPTIONS)
    # =========================================================================

    missing: Set[str] = set()
    for key, node in content.nodes.items():
        if not isinstance(node, QuestionNode):
            continue
        for opt in node.options:
            if opt.next not in content:
                missing.add(opt.next)
            edge_attr = ""
            if mode == DotMode.DETAILED:
                edge_attr = f" [label={_escape_dot_string(_shorten(resolve_text(opt.text, language)))}]"
            lines.append(f"  {_escape_dot_id(key)} -> {_escape_dot_id(opt.next)}{edge_attr};")

    for target in sorted(missing):
        lines.append(
            f"  {_escape_dot_id(target)} [shape=box, style=dashed, color=red, "
            f"fillcolor=white, label={_escape_dot_string(target + ' (missing)')}];"
        )

    lines.append("}")

    return "\n".join(lines)


def save_dot_file(content: ContentModel, filename: str, mode: DotMode = DotMode.SIMPLE,
                  language: str = CANONICAL_LANGUAGE) -> None:
    """
    Generate DOT and save to file.

    Args:
        content: ContentModel to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
        language: Language for labels
    """
    dot = generate_dot(content, mode=mode, language=language)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(dot)


__all__ = ["DotMode", "generate_dot", "save_dot_file"]

"""
Content Validator: load-time checks of a ContentModel.

Checks for:
    - Node ids that differ from their map key
    - Option targets missing from the model
    - Questions with no options
    - Text with no plain string anywhere (resolves to its stringified form)
    - Nodes unreachable from the entry points
    - Cycles (an authoring invariant, never enforced by the engine)
    - Translation coverage across the dataset's languages

IMPORTANT: This does NOT modify the content.
Findings are reported, not fatal, unless strict mode is requested.
"""

from __future__ import annotations

import logging
import warnings
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from lifeline.errors import ContentValidationError, ContentWarning
from lifeline.model import ROOT_NODES, ContentModel, QuestionNode, ResultNode
from lifeline.text import LocalizedMap, LocalizedText, available_languages, has_text_leaf

logger = logging.getLogger(__name__)


def _find_cycles_dfs(graph: Dict[str, List[str]], start: str, visited: Set[str],
                     rec_stack: Set[str], path: List[str]) -> Optional[List[str]]:
    """DFS to find a cycle starting from a node."""
    visited.add(start)
    rec_stack.add(start)
    path.append(start)

    for neighbor in graph.get(start, []):
        if neighbor not in visited:
            cycle = _find_cycles_dfs(graph, neighbor, visited, rec_stack, path[:])
            if cycle:
                return cycle
        elif neighbor in rec_stack:
            cycle_start_idx = path.index(neighbor)
            return path[cycle_start_idx:] + [neighbor]

    rec_stack.remove(start)
    return None


def _node_texts(node) -> List[Tuple[str, LocalizedText]]:
    """(label, text) pairs for every displayed text of a node."""
    if isinstance(node, QuestionNode):
        texts = [("question", node.question)]
        texts.extend((f"options[{i}].text", opt.text) for i, opt in enumerate(node.options))
        return texts
    if isinstance(node, ResultNode):
        return [("result.title", node.result.title), ("result.body", node.result.body)]
    return []


@dataclass
class ContentReport:
    """Validation report for a ContentModel."""

    content_name: str
    total_nodes: int = 0
    question_count: int = 0
    result_count: int = 0
    total_options: int = 0

    # Structural findings
    id_mismatches: Dict[str, str] = field(default_factory=dict)       # key -> node.id
    dangling_targets: List[Tuple[str, str]] = field(default_factory=list)  # (from, missing to)
    empty_questions: List[str] = field(default_factory=list)
    textless: List[str] = field(default_factory=list)                 # "node_id.field"
    has_cycles: bool = False
    cycle_example: Optional[List[str]] = None

    # Informational
    entry_points: List[str] = field(default_factory=list)
    unreachable_nodes: Set[str] = field(default_factory=set)
    languages: Dict[str, int] = field(default_factory=dict)
    missing_translations: Dict[str, List[str]] = field(default_factory=dict)

    # Messages
    errors: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, msg: str) -> None:
        if msg not in self.errors:
            self.errors.append(msg)

    def add_note(self, msg: str) -> None:
        if msg not in self.notes:
            self.notes.append(msg)


def validate_content(
    content: ContentModel,
    strict: bool = False,
    roots: Optional[Iterable[str]] = None,
) -> ContentReport:
    """
    Check a ContentModel once, at load time.

    Args:
        content: The model to check
        strict: Raise instead of warning when structural problems are found
        roots: Entry node ids for reachability (defaults to "start" when
            present plus the general and git roots)

    Returns:
        ContentReport with findings

    Raises:
        ContentValidationError: Only when strict=True and errors were found
    """
    report = ContentReport(content_name=content.name)
    report.total_nodes = len(content)

    if roots is None:
        roots = (["start"] if "start" in content else []) + list(ROOT_NODES.values())
    report.entry_points = [r for r in roots if r in content]

    outgoing: Dict[str, List[str]] = defaultdict(list)
    all_texts: List[Tuple[str, LocalizedText]] = []

    # =========================================================================
    # 1. PER-NODE SHAPE
    # =========================================================================

    for key, node in content.nodes.items():
        if node.id != key:
            report.id_mismatches[key] = node.id

        if isinstance(node, QuestionNode):
            report.question_count += 1
            report.total_options += len(node.options)
            if not node.options:
                report.empty_questions.append(key)
            for opt in node.options:
                outgoing[key].append(opt.next)
                if opt.next not in content:
                    report.dangling_targets.append((key, opt.next))
        else:
            report.result_count += 1

        for label, text in _node_texts(node):
            all_texts.append((f"{key}.{label}", text))
            if not has_text_leaf(text):
                report.textless.append(f"{key}.{label}")

    # =========================================================================
    # 2. REACHABILITY AND CYCLES
    # =========================================================================

    reachable: Set[str] = set()
    stack = list(report.entry_points)
    while stack:
        node_id = stack.pop()
        if node_id in reachable:
            continue
        reachable.add(node_id)
        for neighbor in outgoing.get(node_id, []):
            if neighbor not in reachable and neighbor in content:
                stack.append(neighbor)

    report.unreachable_nodes = {k for k in content.node_ids() if k not in reachable}

    visited: Set[str] = set()
    for node_id in list(outgoing.keys()):
        if node_id not in visited:
            cycle = _find_cycles_dfs(outgoing, node_id, visited, set(), [])
            if cycle:
                report.has_cycles = True
                report.cycle_example = cycle
                break

    # =========================================================================
    # 3. TRANSLATION COVERAGE
    # =========================================================================

    maps = [(where, t) for where, t in all_texts if isinstance(t, LocalizedMap)]
    for _, text in maps:
        for lang in available_languages(text):
            report.languages[lang] = report.languages.get(lang, 0) + 1

    dataset_languages = set(report.languages)
    for where, text in maps:
        missing = sorted(dataset_languages - set(available_languages(text)))
        if missing:
            report.missing_translations[where] = missing

    # =========================================================================
    # 4. MESSAGES
    # =========================================================================

    for key, node_id in sorted(report.id_mismatches.items()):
        report.add_error(f"Node {key!r} declares id {node_id!r}")
    for src, dst in report.dangling_targets:
        report.add_error(f"Option in {src!r} points to missing node {dst!r}")
    for key in report.empty_questions:
        report.add_error(f"Question {key!r} has no options")
    for where in report.textless:
        report.add_error(f"No text found in {where}")
    if report.has_cycles:
        report.add_error(f"Cycle detected: {' -> '.join(report.cycle_example)}")

    if report.unreachable_nodes:
        report.add_note(f"Unreachable nodes: {', '.join(sorted(report.unreachable_nodes))}")
    for where, missing in report.missing_translations.items():
        report.add_note(f"{where} has no {', '.join(missing)} text")

    if report.errors:
        if strict:
            raise ContentValidationError(report.errors)
        for msg in report.errors:
            warnings.warn(msg, ContentWarning)

    logger.info(
        "Validated %r: %d node(s), %d error(s), %d note(s)",
        content.name, report.total_nodes, len(report.errors), len(report.notes),
    )
    return report

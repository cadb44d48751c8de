"""
LocalizedText for lifeline content.

Every piece of displayed text in the decision tree is a LocalizedText:
either language-invariant plain text, or a mapping from language key to
further LocalizedText.

    PlainText("Nothing on GitHub")

    text_from_raw({
        "javascript": "My JavaScript code won't run",
        "java": "My Java program won't run",
    })

ARCHITECTURAL RULE:
    The variant is structure only.
    Choosing a language is done by resolve_text(), a pure function.
"""

from __future__ import annotations

import json
from abc import ABC
from collections import deque
from dataclasses import dataclass
from typing import Any, List, Mapping, Tuple, Union

from lifeline.config import CANONICAL_LANGUAGE


class LocalizedText(ABC):
    """
    Base class for displayed text.

    Exists to give the two variants a common type.
    """
    pass


@dataclass(frozen=True)
class PlainText(LocalizedText):
    """Language-invariant text."""

    value: str


@dataclass(frozen=True)
class LocalizedMap(LocalizedText):
    """
    Text that varies by language key.

    Properties:
        entries:
            Ordered (language, LocalizedText) pairs.
            Authored order is kept; the breadth-first fallback depends on it.

    A value may itself be a LocalizedMap (nested variants).
    """

    entries: Tuple[Tuple[str, LocalizedText], ...] = ()

    def get(self, key: str) -> LocalizedText | None:
        for k, v in self.entries:
            if k == key:
                return v
        return None

    def keys(self) -> List[str]:
        return [k for k, _ in self.entries]


RawText = Union[str, Mapping[str, Any], None]


def text_from_raw(raw: Any) -> LocalizedText:
    """
    Build a LocalizedText from authored data.

    str        -> PlainText
    mapping    -> LocalizedMap (recursively)
    list/tuple -> LocalizedMap keyed by position
    None       -> PlainText("")
    other      -> PlainText(str(raw))

    Inside a mapping, values that are neither text nor containers cannot be
    resolved and are dropped.
    """
    if isinstance(raw, LocalizedText):
        return raw
    if raw is None:
        return PlainText("")
    if isinstance(raw, str):
        return PlainText(raw)
    if isinstance(raw, Mapping):
        return LocalizedMap(tuple(_container_entries(raw.items())))
    if isinstance(raw, (list, tuple)):
        return LocalizedMap(tuple(_container_entries((str(i), v) for i, v in enumerate(raw))))
    return PlainText(str(raw))


def _container_entries(items):
    for key, value in items:
        if isinstance(value, (str, Mapping, list, tuple, LocalizedText)):
            yield str(key), text_from_raw(value)


def text_to_raw(text: LocalizedText) -> Any:
    """Inverse of text_from_raw, for serialization."""
    if isinstance(text, PlainText):
        return text.value
    if isinstance(text, LocalizedMap):
        return {k: text_to_raw(v) for k, v in text.entries}
    raise TypeError(f"Unsupported LocalizedText type: {type(text)}")


def resolve_text(
    item: LocalizedText | RawText,
    language: str,
    fallback_language: str = CANONICAL_LANGUAGE,
) -> str:
    """
    Resolve displayed text for a language.

    Order of precedence:
        1. Plain text is returned as is.
        2. Absent text resolves to "".
        3. For a language map:
            a. the entry for `language`, if it is plain text
            b. the entry for `fallback_language`, if it is plain text
            c. the first plain text found breadth-first, in entry order
            d. the whole structure, stringified (raw input is dumped as
               given, scalars included)

    Never raises and always returns a str.

    Args:
        item: LocalizedText, or raw authored text (str / dict / None)
        language: Active language key
        fallback_language: Canonical language used when `language` misses

    Returns:
        Resolved string
    """
    if item is None:
        return ""
    raw = item if not isinstance(item, LocalizedText) else None
    if raw is not None:
        item = text_from_raw(raw)

    if isinstance(item, PlainText):
        return item.value

    exact = item.get(language)
    if isinstance(exact, PlainText):
        return exact.value

    canonical = item.get(fallback_language)
    if isinstance(canonical, PlainText):
        return canonical.value

    queue = deque([item])
    while queue:
        current = queue.popleft()
        for _, value in current.entries:
            if isinstance(value, PlainText):
                return value.value
            if isinstance(value, LocalizedMap):
                queue.append(value)

    if raw is None:
        raw = text_to_raw(item)
    return json.dumps(raw, ensure_ascii=False, default=str)


def has_text_leaf(item: LocalizedText) -> bool:
    """True if resolution can find a plain string anywhere in `item`."""
    if isinstance(item, PlainText):
        return True
    return any(has_text_leaf(v) for _, v in item.entries)


def available_languages(item: LocalizedText) -> List[str]:
    """Top-level language keys of a LocalizedMap (empty for plain text)."""
    if isinstance(item, LocalizedMap):
        return item.keys()
    return []

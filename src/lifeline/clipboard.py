"""
Clipboard collaborator for copying a result body.

The copy itself is opaque; the navigator only reports success or failure
back to the user. Navigation state is never touched.
"""
from __future__ import annotations

import html
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)

COPY_OK = "Copied!"
COPY_FAILED = "Copy failed"

_BLOCK_TAG_RE = re.compile(r"</?(p|br|div|li|ul|ol|h[1-6])\b[^>]*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"[ \t\r\f\v]+")


@dataclass(frozen=True)
class Notification:
    """What the user is told after a copy attempt."""

    ok: bool
    message: str


class Clipboard(ABC):
    @abstractmethod
    def copy_text(self, text: str) -> bool:
        """Put `text` on the clipboard. Returns False on failure."""
        ...


class MemoryClipboard(Clipboard):
    """Keeps copied text in a list (for terminals without a clipboard, and tests)."""

    def __init__(self):
        self.copied: List[str] = []

    def copy_text(self, text: str) -> bool:
        self.copied.append(text)
        return True


def html_to_text(body: str) -> str:
    """
    Visible text of an HTML fragment.

    Block tags become line breaks, other tags are dropped and entities
    are unescaped.
    """
    text = _BLOCK_TAG_RE.sub("\n", body)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text)
    lines = [_SPACE_RE.sub(" ", line).strip() for line in text.split("\n")]
    return "\n".join(line for line in lines if line)


def copy_text(clipboard: Clipboard, text: str) -> Notification:
    """Copy through `clipboard`, turning any failure into a notification."""
    try:
        ok = bool(clipboard.copy_text(text))
    except Exception as e:
        logger.debug("Clipboard copy failed: %s", e)
        ok = False
    return Notification(ok=ok, message=COPY_OK if ok else COPY_FAILED)

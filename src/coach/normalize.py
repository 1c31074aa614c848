from __future__ import annotations
from typing import Iterable, List
from .models import Edit


def fold(text: str) -> str:
    """Comparison key for edit snippets: trimmed and casefolded."""
    return (text or "").strip().casefold()


def is_noop(edit: Edit) -> bool:
    """True when the model "corrected" a snippet into itself (case/whitespace only)."""
    return fold(edit.original) == fold(edit.correction)


def same_edit(a: Edit, b: Edit) -> bool:
    return fold(a.original) == fold(b.original) and fold(a.correction) == fold(b.correction)


def normalize_edits(edits: Iterable[Edit]) -> List[Edit]:
    """
    Keep only the "real" edits, in the order the model returned them.
    Explanations pass through untouched; nothing else is filtered.
    """
    return [e for e in edits if not is_noop(e)]


def dedupe_edits(edits: Iterable[Edit]) -> List[Edit]:
    """Drop later duplicates (same original and correction, ignoring case/whitespace)."""
    seen: set[tuple[str, str]] = set()
    out: List[Edit] = []
    for e in edits:
        key = (fold(e.original), fold(e.correction))
        if key in seen:
            continue
        seen.add(key)
        out.append(e)
    return out

from __future__ import annotations
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import Edit, Run
from .normalize import normalize_edits, dedupe_edits

Needle = Tuple[str, Edit]

# A needle may only start after a non-word char (or ^) and end before one (or $).
_LEFT = r"(?<!\w)"
_RIGHT = r"(?!\w)"


def _usable(needles: Iterable[Needle]) -> List[Needle]:
    return [(text, edit) for text, edit in needles if text and text.strip()]


def _longest_first(needles: Sequence[Needle]) -> List[Needle]:
    # sorted() is stable: equal-length needles keep the model's order
    return sorted(needles, key=lambda n: len(n[0]), reverse=True)


def compile_needles(needles: Sequence[Needle]) -> Optional[re.Pattern]:
    """
    Build one case-insensitive alternation from escaped literals, longest first.
    Each alternative gets its own group (n0, n1, ...) so a match maps back to its edit
    without re-comparing text. Returns None for an empty needle set.
    """
    if not needles:
        return None
    alts = "|".join(f"(?P<n{i}>{re.escape(text)})" for i, (text, _) in enumerate(needles))
    return re.compile(rf"{_LEFT}(?:{alts}){_RIGHT}", re.IGNORECASE)


def match(source_text: str, needles: Iterable[Needle]) -> List[Run]:
    """
    Split source_text into plain and tagged runs.

    Matching is literal, case-insensitive and word-bounded; longer needles win at a
    given position; the scan is a single left-to-right pass so runs never overlap.
    Needles that do not occur in the text simply produce no tag.
    Joining the run texts always gives back source_text unchanged.
    """
    if not source_text:
        return []
    ordered = _longest_first(_usable(needles))
    pattern = compile_needles(ordered)
    if pattern is None:
        return [Run(source_text)]

    runs: List[Run] = []
    pos = 0
    for m in pattern.finditer(source_text):
        start, end = m.span()
        if start == end:
            continue
        if start > pos:
            runs.append(Run(source_text[pos:start]))
        idx = int((m.lastgroup or "n0")[1:])  # every alternative is a named group
        runs.append(Run(m.group(0), ordered[idx][1]))
        pos = end
    if pos < len(source_text):
        runs.append(Run(source_text[pos:]))
    return runs


def _prepare(edits: Iterable[Edit]) -> List[Edit]:
    return dedupe_edits(normalize_edits(edits))


# /* ~~~ the two rendering passes of a grammar result ~~~ */
def render_original(text: str, edits: Iterable[Edit]) -> List[Run]:
    """Tag the snippets the user got wrong inside the original text."""
    return match(text, [(e.original, e) for e in _prepare(edits)])


def render_corrected(text: str, edits: Iterable[Edit]) -> List[Run]:
    """Tag the replacement snippets inside the corrected text."""
    return match(text, [(e.correction, e) for e in _prepare(edits)])


def highlighted(runs: Iterable[Run]) -> List[Run]:
    return [r for r in runs if r.tagged]


def join_runs(runs: Iterable[Run]) -> str:
    return "".join(r.text for r in runs)

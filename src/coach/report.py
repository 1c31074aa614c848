from __future__ import annotations
from typing import Optional

from .config import REPORT_TITLE
from .models import Document, GrammarResult, Section, SessionRecord
from .normalize import normalize_edits

SECTION_TITLES = {
    "original": "Original",
    "grammar": "Grammar Correction",
    "professional": "Professional Tone",
    "casual": "Casual Tone",
}


def assemble(
    original_text: str,
    grammar_result: Optional[GrammarResult],
    professional_text: Optional[str],
    casual_text: Optional[str],
    date: str,
    *,
    title: str = REPORT_TITLE,
) -> Document:
    """
    Lay out a session as report sections, always in the order
    Original, Grammar Correction, Professional Tone, Casual Tone.
    Sections without source data are left out; Original is always there.
    """
    sections = [Section("original", SECTION_TITLES["original"], original_text)]
    if grammar_result is not None:
        sections.append(Section(
            "grammar",
            SECTION_TITLES["grammar"],
            grammar_result.corrected_text,
            items=normalize_edits(grammar_result.mistakes),
        ))
    if professional_text is not None:
        sections.append(Section("professional", SECTION_TITLES["professional"], professional_text))
    if casual_text is not None:
        sections.append(Section("casual", SECTION_TITLES["casual"], casual_text))
    return Document(title=title, date=date, sections=sections)


def assemble_from_record(record: SessionRecord, *, date: Optional[str] = None) -> Document:
    # mistakes are not persisted with a session, so the grammar section has no items
    grammar = GrammarResult(record.grammar_version) if record.grammar_version is not None else None
    return assemble(
        record.original_text,
        grammar,
        record.professional_version,
        record.casual_version,
        date if date is not None else record.created_at,
    )

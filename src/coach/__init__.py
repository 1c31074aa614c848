"""Correction reconciliation and session history for the spoken-English coach."""
from __future__ import annotations

from .engine import Engine
from .models import AuthContext, Document, Edit, GrammarResult, Provenance, Run, Section, SessionRecord, ToneResult
from .spans import match, render_corrected, render_original
from .normalize import normalize_edits
from .report import assemble

__version__ = "1.0.0"
__all__ = [
    "Engine", "AuthContext", "Document", "Edit", "GrammarResult", "Provenance", "Run",
    "Section", "SessionRecord", "ToneResult", "match", "render_original", "render_corrected",
    "normalize_edits", "assemble",
]

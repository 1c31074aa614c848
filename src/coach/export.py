"""Render a report Document to plain text or to an A4 PDF (reportlab)."""
from __future__ import annotations
import io
import re
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer

from .config import REPORT_MARGIN_MM
from .models import Document, Edit


def _edit_line(e: Edit) -> str:
    line = f'"{e.original}" -> "{e.correction}"'
    return f"{line}: {e.explanation}" if e.explanation else line


def render_text(document: Document) -> str:
    lines: List[str] = [document.title, document.date, ""]
    for s in document.sections:
        lines.append(s.title.upper())
        lines.append(s.body)
        for e in s.items:
            lines.append(f"  - {_edit_line(e)}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def _para(text: str, style: ParagraphStyle) -> Paragraph:
    # Paragraph takes a mini-markup; keep user text literal and line breaks visible
    return Paragraph(escape(text).replace("\n", "<br/>"), style)


def render_pdf(document: Document) -> bytes:
    """A4, fixed page width, text flows onto as many pages as it needs."""
    buf = io.BytesIO()
    margin = REPORT_MARGIN_MM * mm
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        leftMargin=margin, rightMargin=margin, topMargin=margin, bottomMargin=margin,
        title=document.title,
    )
    styles = getSampleStyleSheet()
    body = ParagraphStyle("ReportBody", parent=styles["BodyText"], fontSize=11, leading=15)
    meta = ParagraphStyle("ReportMeta", parent=styles["Normal"], fontSize=9, textColor="#64748b")

    story: list = [_para(document.title, styles["Title"]), _para(document.date, meta), Spacer(1, 6 * mm)]
    for s in document.sections:
        story.append(_para(s.title, styles["Heading2"]))
        story.append(_para(s.body, body))
        if s.items:
            story.append(ListFlowable(
                [ListItem(_para(_edit_line(e), body)) for e in s.items],
                bulletType="bullet",
            ))
        story.append(Spacer(1, 4 * mm))
    doc.build(story)
    return buf.getvalue()


_UNSAFE = re.compile(r"[^A-Za-z0-9]+")


def report_filename(document: Document, ext: str = "pdf") -> str:
    stem = _UNSAFE.sub("-", f"{document.title} {document.date}").strip("-").lower()
    return f"{stem or 'report'}.{ext}"

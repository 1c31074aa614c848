from coach.export import render_pdf, render_text, report_filename
from coach.models import Edit, GrammarResult, SessionRecord
from coach.report import assemble, assemble_from_record

DATE = "19th Oct 2026, 3:05 PM"


def test_only_original_section_when_nothing_else_ran():
    doc = assemble("I goes home", None, None, None, DATE)
    assert [s.key for s in doc.sections] == ["original"]
    assert doc.sections[0].body == "I goes home"
    assert doc.date == DATE


def test_all_sections_in_fixed_order_with_real_edits_only():
    grammar = GrammarResult("I go home", [Edit("goes", "go", "agreement"), Edit("Home", "home", "")])
    doc = assemble("I goes home", grammar, "I am heading home.", "Heading home!", DATE)
    assert [s.title for s in doc.sections] == [
        "Original", "Grammar Correction", "Professional Tone", "Casual Tone",
    ]
    assert doc.section("grammar").items == [Edit("goes", "go", "agreement")]
    assert doc.section("professional").items == []


def test_partial_sections_keep_relative_order():
    doc = assemble("txt", None, None, "casual", DATE)
    assert [s.key for s in doc.sections] == ["original", "casual"]


def test_from_record_has_grammar_without_items():
    rec = SessionRecord("1", "2026-10-19T10:00:00Z", "orig", grammar_version="fixed")
    doc = assemble_from_record(rec)
    assert [s.key for s in doc.sections] == ["original", "grammar"]
    assert doc.section("grammar").items == []
    assert doc.date == "2026-10-19T10:00:00Z"


def test_text_and_pdf_export():
    grammar = GrammarResult("I go home", [Edit("goes", "go", "agreement")])
    doc = assemble("I goes home <b>", grammar, None, None, DATE)
    text = render_text(doc)
    assert "GRAMMAR CORRECTION" in text
    assert '"goes" -> "go": agreement' in text

    pdf = render_pdf(doc)
    assert pdf.startswith(b"%PDF")
    assert report_filename(doc).endswith(".pdf")


def test_pdf_flows_over_several_pages():
    long_text = "This sentence repeats to fill the page. " * 800
    pdf = render_pdf(assemble(long_text, None, None, None, DATE))
    assert pdf.count(b"/Type /Page") - pdf.count(b"/Type /Pages") > 1

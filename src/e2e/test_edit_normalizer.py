from coach.models import Edit
from coach.normalize import dedupe_edits, is_noop, normalize_edits, same_edit


def test_case_and_whitespace_only_edits_are_dropped():
    edits = [
        Edit("Hello", "hello", "capitalization"),
        Edit(" there ", "there", "spacing"),
        Edit("goes", "went", "past tense"),
    ]
    assert normalize_edits(edits) == [Edit("goes", "went", "past tense")]


def test_explanations_and_order_pass_through():
    edits = [Edit("b", "B2", "second"), Edit("a", "A2", "first")]
    assert normalize_edits(edits) == edits


def test_is_noop_and_same_edit():
    assert is_noop(Edit("Word", " word ", ""))
    assert not is_noop(Edit("word", "words", ""))
    assert same_edit(Edit("Goes", "Went", "x"), Edit(" goes", "went ", "y"))
    assert not same_edit(Edit("goes", "went", ""), Edit("goes", "gone", ""))


def test_dedupe_keeps_first_occurrence():
    first = Edit("goes", "went", "first")
    edits = [first, Edit("GOES", "Went", "dup"), Edit("is", "was", "")]
    assert dedupe_edits(edits) == [first, Edit("is", "was", "")]

import pytest

from coach.models import GrammarResult, Provenance, SessionRecord, ToneResult
from coach.records import (
    as_dict, classify_id, from_raw, new_record, read_field, to_local_item, to_remote_row,
)


def test_classify_id_by_hyphen():
    assert classify_id("3f9a2b1c-0000-4000-8000-000000000000") is Provenance.REMOTE
    assert classify_id("1700000000000") is Provenance.LOCAL


def test_read_field_prefers_remote_naming():
    raw = {"id": "1", "original_text": "remote", "originalText": "local", "casualVersion": "hey"}
    assert read_field(raw, "original_text") == "remote"
    assert read_field(raw, "casual_version") == "hey"
    assert read_field(raw, "grammar_version") is None
    assert read_field({"created_at": "2026-01-01"}, "date") == "2026-01-01"


def test_new_record_only_fills_versions_that_ran():
    rec = new_record("I goes home", GrammarResult("I go home"), None, ToneResult("I'm heading home"),
                     now="2026-10-19T10:00:00.000Z")
    assert rec.grammar_version == "I go home"
    assert rec.professional_version is None
    assert rec.casual_version == "I'm heading home"
    assert rec.provenance is Provenance.LOCAL
    assert "-" not in rec.id


def test_new_record_remote_gets_uuid():
    rec = new_record("hello", provenance=Provenance.REMOTE)
    assert classify_id(rec.id) is Provenance.REMOTE


def test_new_record_requires_text():
    with pytest.raises(ValueError):
        new_record("   ")


def test_shapes_convert_both_ways():
    rec = SessionRecord("1700000000000", "2026-10-19T10:00:00Z", "text", professional_version="pro")
    local = to_local_item(rec)
    assert local == {"id": "1700000000000", "date": "2026-10-19T10:00:00Z",
                     "originalText": "text", "professionalVersion": "pro"}
    remote = to_remote_row(rec, "user-1")
    assert remote["original_text"] == "text" and remote["user_id"] == "user-1"
    assert "grammar_version" not in remote
    assert from_raw(local) == rec
    assert from_raw(remote, Provenance.LOCAL) == rec


def test_from_raw_rejects_missing_text_and_blank_versions_become_none():
    with pytest.raises(ValueError):
        from_raw({"id": "1"})
    rec = from_raw({"id": "1", "originalText": "x", "grammarVersion": ""})
    assert rec.grammar_version is None
    assert as_dict(rec)["provenance"] == "local"

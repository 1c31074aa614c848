"""
Session records and their two storage shapes.

The remote store speaks snake_case rows (``original_text``), the local fallback
store keeps camelCase items (``originalText``). Both describe the same logical
record; ``read_field`` reads either, preferring the remote naming.
"""
from __future__ import annotations
import time
import uuid
from typing import Any, Dict, Mapping, Optional, Union

from .dates import now_iso
from .models import GrammarResult, Provenance, SessionRecord, ToneResult

# logical field -> (remote key, local key)
FIELD_NAMES: Dict[str, tuple[str, str]] = {
    "id": ("id", "id"),
    "date": ("date", "date"),
    "original_text": ("original_text", "originalText"),
    "grammar_version": ("grammar_version", "grammarVersion"),
    "professional_version": ("professional_version", "professionalVersion"),
    "casual_version": ("casual_version", "casualVersion"),
}

VERSION_FIELDS = ("grammar_version", "professional_version", "casual_version")

Versionish = Union[str, GrammarResult, ToneResult, None]


def classify_id(record_id: str) -> Provenance:
    """Hyphenated ids (UUIDs) come from the remote store, everything else is local."""
    return Provenance.REMOTE if "-" in str(record_id) else Provenance.LOCAL


def new_remote_id() -> str:
    return str(uuid.uuid4())


def new_local_id() -> str:
    # epoch milliseconds: never contains a hyphen
    return str(int(time.time() * 1000))


def bump_local_id(record_id: str) -> str:
    """Next candidate id after a collision (two saves in the same millisecond)."""
    if record_id.isdigit():
        return str(int(record_id) + 1)
    return f"{record_id}1"


def read_field(raw: Mapping[str, Any], name: str) -> Any:
    remote_key, local_key = FIELD_NAMES[name]
    val = raw.get(remote_key)
    if val is None and name == "date":
        val = raw.get("created_at")
    if val is None:
        val = raw.get(local_key)
    return val


def _opt(val: Any) -> Optional[str]:
    if val is None or val == "":
        return None
    return str(val)


def from_raw(raw: Mapping[str, Any], provenance: Optional[Provenance] = None) -> SessionRecord:
    """Build a record from either storage shape."""
    rid = read_field(raw, "id")
    if rid is None or rid == "":
        raise ValueError("record has no id")
    original = read_field(raw, "original_text")
    if not original:
        raise ValueError(f"record {rid!r} has no original text")
    return SessionRecord(
        id=str(rid),
        created_at=str(read_field(raw, "date") or ""),
        original_text=str(original),
        grammar_version=_opt(read_field(raw, "grammar_version")),
        professional_version=_opt(read_field(raw, "professional_version")),
        casual_version=_opt(read_field(raw, "casual_version")),
        provenance=provenance or classify_id(str(rid)),
    )


def to_remote_row(record: SessionRecord, user_id: Optional[str] = None) -> Dict[str, Any]:
    row: Dict[str, Any] = {"id": record.id, "date": record.created_at, "original_text": record.original_text}
    for name in VERSION_FIELDS:
        val = getattr(record, name)
        if val is not None:
            row[name] = val
    if user_id is not None:
        row["user_id"] = user_id
    return row


def to_local_item(record: SessionRecord) -> Dict[str, Any]:
    item: Dict[str, Any] = {"id": record.id, "date": record.created_at, "originalText": record.original_text}
    for name in VERSION_FIELDS:
        val = getattr(record, name)
        if val is not None:
            item[FIELD_NAMES[name][1]] = val
    return item


def _text_of(val: Versionish) -> Optional[str]:
    if isinstance(val, GrammarResult):
        return _opt(val.corrected_text)
    if isinstance(val, ToneResult):
        return _opt(val.improved_text)
    return _opt(val)


def new_record(
    original_text: str,
    grammar: Versionish = None,
    professional: Versionish = None,
    casual: Versionish = None,
    *,
    now: Optional[str] = None,
    provenance: Provenance = Provenance.LOCAL,
) -> SessionRecord:
    """
    Snapshot a finished analysis. Only the transformations that actually ran get a
    version; the rest stay None.
    """
    if not original_text or not original_text.strip():
        raise ValueError("original_text is required")
    rid = new_remote_id() if provenance is Provenance.REMOTE else new_local_id()
    return SessionRecord(
        id=rid,
        created_at=now or now_iso(),
        original_text=original_text,
        grammar_version=_text_of(grammar),
        professional_version=_text_of(professional),
        casual_version=_text_of(casual),
        provenance=provenance,
    )


def as_dict(record: SessionRecord) -> Dict[str, Any]:
    """JSON-friendly shape used by the web/CLI layers."""
    return {
        "id": record.id,
        "date": record.created_at,
        "originalText": record.original_text,
        "grammarVersion": record.grammar_version,
        "professionalVersion": record.professional_version,
        "casualVersion": record.casual_version,
        "provenance": record.provenance.value,
    }

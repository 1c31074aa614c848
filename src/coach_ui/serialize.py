from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional

from coach.models import AuthContext, Document, Edit, GrammarResult, Run
from coach.upstream import parse_grammar_result


def edit_dict(e: Edit) -> Dict[str, str]:
    return {"original": e.original, "correction": e.correction, "explanation": e.explanation}


def runs_json(runs: List[Run]) -> List[Dict[str, Any]]:
    out = []
    for r in runs:
        row: Dict[str, Any] = {"text": r.text, "tagged": r.tagged}
        if r.edit is not None:
            row["edit"] = edit_dict(r.edit)
        out.append(row)
    return out


def document_json(doc: Document) -> Dict[str, Any]:
    return {
        "title": doc.title,
        "date": doc.date,
        "sections": [
            {"key": s.key, "title": s.title, "body": s.body, "items": [edit_dict(e) for e in s.items]}
            for s in doc.sections
        ],
    }


def grammar_from(body: Mapping[str, Any], key: str = "grammarResult") -> Optional[GrammarResult]:
    raw = body.get(key)
    return None if raw is None else parse_grammar_result(raw)


def auth_from_headers(headers: Mapping[str, str]) -> AuthContext:
    uid = (headers.get("X-User-Id") or "").strip()
    return AuthContext(user_id=uid) if uid else AuthContext.anonymous()

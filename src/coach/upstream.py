from __future__ import annotations
import json
import logging
import re
from typing import Any, Mapping, Union

from .config import ANALYSIS_MODES
from .errors import MalformedUpstreamResult
from .models import Edit, GrammarResult, ToneResult

log = logging.getLogger(__name__)

Payload = Union[str, bytes, Mapping[str, Any]]

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_fences(text: str) -> str:
    """Models like to wrap JSON in ```json fences even when asked not to."""
    return _FENCE.sub("", text).strip()


def _decode(payload: Payload) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        return payload
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    if not isinstance(payload, str):
        raise MalformedUpstreamResult(f"unsupported payload type {type(payload).__name__}", payload=payload)
    try:
        data = json.loads(strip_fences(payload))
    except json.JSONDecodeError as e:
        raise MalformedUpstreamResult(f"upstream result is not JSON: {e.msg}", payload=payload) from e
    if not isinstance(data, Mapping):
        raise MalformedUpstreamResult("upstream result is not a JSON object", payload=payload)
    return data


def _require_str(data: Mapping[str, Any], key: str, payload: Payload) -> str:
    val = data.get(key)
    if not isinstance(val, str):
        raise MalformedUpstreamResult(f"missing or non-string field {key!r}", payload=payload)
    return val


def _edit(raw: Any, payload: Payload) -> Edit:
    if not isinstance(raw, Mapping):
        raise MalformedUpstreamResult("mistake entry is not an object", payload=payload)
    explanation = raw.get("explanation", "")
    if explanation is None:
        explanation = ""
    if not isinstance(explanation, str):
        raise MalformedUpstreamResult("mistake explanation is not a string", payload=payload)
    return Edit(
        original=_require_str(raw, "original", payload),
        correction=_require_str(raw, "correction", payload),
        explanation=explanation,
    )


def parse_grammar_result(payload: Payload) -> GrammarResult:
    """
    Decode {"correctedText": str, "mistakes": [{original, correction, explanation}]}.
    Raises MalformedUpstreamResult on any shape problem; never returns a partial result.
    """
    data = _decode(payload)
    corrected = _require_str(data, "correctedText", payload)
    mistakes = data.get("mistakes")
    if mistakes is None:
        mistakes = []
    if not isinstance(mistakes, list):
        raise MalformedUpstreamResult("'mistakes' is not a list", payload=payload)
    return GrammarResult(corrected_text=corrected, mistakes=[_edit(m, payload) for m in mistakes])


def parse_tone_result(payload: Payload) -> ToneResult:
    """Decode {"improvedText": str, "tips": [str, ...]} (professional and casual modes)."""
    data = _decode(payload)
    improved = _require_str(data, "improvedText", payload)
    tips = data.get("tips")
    if tips is None:
        tips = []
    if not isinstance(tips, list) or not all(isinstance(t, str) for t in tips):
        raise MalformedUpstreamResult("'tips' must be a list of strings", payload=payload)
    if len(tips) != 3:
        log.debug("upstream returned %d tips (expected 3)", len(tips))
    return ToneResult(improved_text=improved, tips=list(tips))


def parse_result(mode: str, payload: Payload) -> Union[GrammarResult, ToneResult]:
    if mode not in ANALYSIS_MODES:
        raise ValueError(f"Invalid mode: {mode!r}")
    if mode == "grammar":
        return parse_grammar_result(payload)
    return parse_tone_result(payload)

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Provenance(str, Enum):
    """Which store a session record lives in."""
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class Edit:
    original: str             # snippet as the user wrote it
    correction: str           # snippet as the model rewrote it
    explanation: str = ""


@dataclass(frozen=True)
class Run:
    text: str
    edit: Optional[Edit] = None   # None -> plain text

    @property
    def tagged(self) -> bool:
        return self.edit is not None


@dataclass(frozen=True)
class GrammarResult:
    corrected_text: str
    mistakes: List[Edit] = field(default_factory=list)


@dataclass(frozen=True)
class ToneResult:
    improved_text: str
    tips: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SessionRecord:
    id: str
    created_at: str           # ISO-8601, set once
    original_text: str
    grammar_version: Optional[str] = None
    professional_version: Optional[str] = None
    casual_version: Optional[str] = None
    provenance: Provenance = Provenance.LOCAL


@dataclass(frozen=True)
class AuthContext:
    user_id: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.user_id)

    @classmethod
    def anonymous(cls) -> "AuthContext":
        return cls()


@dataclass(frozen=True)
class Section:
    key: str                  # "original" | "grammar" | "professional" | "casual"
    title: str
    body: str
    items: List[Edit] = field(default_factory=list)


@dataclass(frozen=True)
class Document:
    title: str
    date: str
    sections: List[Section] = field(default_factory=list)

    def section(self, key: str) -> Optional[Section]:
        for s in self.sections:
            if s.key == key:
                return s
        return None

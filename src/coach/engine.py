# coach/engine.py
from __future__ import annotations

import os
import logging
from typing import List, Optional, Tuple, Union

from . import config as CFG
from .DB.api import LocalRecordStore, RemoteRecordStore, make_local_store, make_remote_store
from .dates import format_pretty_date, now_iso
from .history import HistoryMerger
from .models import AuthContext, Document, GrammarResult, Provenance, Run, SessionRecord, ToneResult
from .records import new_record
from .report import assemble, assemble_from_record
from .spans import render_corrected, render_original
from .upstream import Payload, parse_grammar_result, parse_result

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - the two record stores (remote + local fallback) via HistoryMerger,
      - upstream result parsing and span rendering,
      - report assembly.

    Public API (used by CLI/Flask):
      * open(remote_dsn, local_dsn): create stores and the history merger
      * render(original_text, grammar_result): highlighted runs for both texts
      * history(auth) / delete(id, auth) / save(...): session history, each call
        on a view loaded for that principal only
      * report(...): export Document
      * shutdown(): close underlying resources

    Storage DSNs (via coach.DB.api):
      - remote: "sqlite:///path/to/history.sqlite" | "memory://"
      - local:  "json:///path/to/local.json"       | "memory://"
    """

    # ------------- lifecycle -------------

    def __init__(self) -> None:
        self._history: Optional[HistoryMerger] = None

    def open(
        self,
        *,
        remote_dsn: Optional[str] = None,
        local_dsn: Optional[str] = None,
        local_key: Optional[str] = None,
        verbose: bool = False,
    ) -> "Engine":
        if verbose or CFG.VERBOSE:
            logging.basicConfig(level=logging.INFO)
            os.environ["COACH_VERBOSE"] = "1"

        rdsn = remote_dsn or CFG.REMOTE_DSN
        ldsn = local_dsn or CFG.LOCAL_DSN
        log.info("Initializing stores: remote=%s local=%s", rdsn, ldsn)
        return self.attach(make_remote_store(rdsn), make_local_store(ldsn, key=local_key))

    def attach(self, remote: Optional[RemoteRecordStore], local: LocalRecordStore) -> "Engine":
        """Wire already-built stores (tests inject doubles here)."""
        self._history = HistoryMerger(remote, local)
        return self

    @property
    def merger(self) -> HistoryMerger:
        if self._history is None:
            raise RuntimeError("Engine not initialized. Call open() first.")
        return self._history

    # ------------- analysis -------------

    def render(
        self, original_text: str, grammar: Union[GrammarResult, Payload]
    ) -> Tuple[List[Run], List[Run]]:
        """Runs for the original text (mistakes tagged) and the corrected text (fixes tagged)."""
        result = grammar if isinstance(grammar, GrammarResult) else parse_grammar_result(grammar)
        return (
            render_original(original_text, result.mistakes),
            render_corrected(result.corrected_text, result.mistakes),
        )

    @staticmethod
    def parse(mode: str, payload: Payload) -> Union[GrammarResult, ToneResult]:
        return parse_result(mode, payload)

    # ------------- history -------------

    def session(self, auth: AuthContext) -> HistoryMerger:
        """A merger over the shared stores with a view loaded for this principal."""
        m = self._fresh()
        m.load(auth)
        return m

    def _fresh(self) -> HistoryMerger:
        return HistoryMerger(self.merger.remote, self.merger.local)

    def history(self, auth: AuthContext) -> List[SessionRecord]:
        return list(self.session(auth).view)

    def delete(self, record_id: str, auth: AuthContext) -> None:
        self.session(auth).delete(record_id, auth)

    def save(
        self,
        auth: AuthContext,
        original_text: str,
        grammar: Optional[Union[GrammarResult, str]] = None,
        professional: Optional[Union[ToneResult, str]] = None,
        casual: Optional[Union[ToneResult, str]] = None,
        *,
        local: bool = False,
    ) -> SessionRecord:
        record = new_record(
            original_text, grammar, professional, casual,
            provenance=Provenance.LOCAL if local else Provenance.REMOTE,
        )
        if local:
            return self._fresh().save_local(record)
        return self._fresh().save(record, auth)

    # ------------- report -------------

    def report(
        self,
        original_text: str,
        grammar: Optional[GrammarResult] = None,
        professional_text: Optional[str] = None,
        casual_text: Optional[str] = None,
        *,
        date: Optional[str] = None,
    ) -> Document:
        return assemble(
            original_text, grammar, professional_text, casual_text,
            format_pretty_date(date or now_iso()),
        )

    def report_for(self, record_id: str, auth: AuthContext) -> Document:
        rec = self.session(auth).find(record_id)
        if rec is None:
            raise KeyError(record_id)
        return assemble_from_record(rec, date=format_pretty_date(rec.created_at))

    # ------------- teardown -------------

    def shutdown(self) -> None:
        try:
            if self._history is not None:
                if self._history.remote is not None:
                    self._history.remote.close()
                self._history.local.close()
        finally:
            self._history = None
            log.info("Engine shutdown complete")

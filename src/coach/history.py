# coach/history.py
from __future__ import annotations
import dataclasses
import logging
from typing import Iterable, List, Optional

from .DB.api import LocalRecordStore, RemoteRecordStore, Row
from .errors import AuthenticationRequired, RemoteStoreError
from .models import AuthContext, Provenance, SessionRecord
from .records import bump_local_id, classify_id, from_raw, read_field, to_local_item, to_remote_row

log = logging.getLogger(__name__)

class HistoryMerger:
    """
    One view over the remote store and the local fallback store.

    The view is remote records (newest first, as the store returns them) followed by
    local records in stored order. Every record carries the provenance of the store
    it was read from; deletes and inserts are routed on that.
    The remote side is best effort: failures are logged and never block the local side.
    """

    def __init__(self, remote: Optional[RemoteRecordStore], local: LocalRecordStore) -> None:
        self.remote = remote
        self.local = local
        self.view: List[SessionRecord] = []

    # ------------- read -------------

    def load(self, auth: AuthContext) -> List[SessionRecord]:
        remote_records = self._fetch_remote(auth)
        local_records = self._parse(self.local.read_all(), Provenance.LOCAL)

        merged: List[SessionRecord] = []
        seen: set[str] = set()
        for rec in remote_records + local_records:
            if rec.id in seen:
                log.debug("dropping duplicate id %s from %s store", rec.id, rec.provenance.value)
                continue
            seen.add(rec.id)
            merged.append(rec)

        self.view = merged
        log.info("history loaded: remote=%d local=%d", len(remote_records), len(local_records))
        return list(self.view)

    def _fetch_remote(self, auth: AuthContext) -> List[SessionRecord]:
        user_id = auth.user_id
        if self.remote is None or not user_id:
            return []
        try:
            rows = self.remote.select_all(user_id)
        except Exception as e:  # any client failure degrades to local-only
            log.warning("remote history unavailable, showing local only: %s", e)
            return []
        return self._parse(rows, Provenance.REMOTE)

    @staticmethod
    def _parse(rows: Iterable[Row], provenance: Provenance) -> List[SessionRecord]:
        out: List[SessionRecord] = []
        for raw in rows:
            try:
                out.append(from_raw(raw, provenance))
            except ValueError as e:
                log.warning("skipping malformed %s record: %s", provenance.value, e)
        return out

    # ------------- mutate -------------

    def delete(self, record_id: str, auth: AuthContext) -> None:
        """
        Drop record_id from the view right away, then from its store.
        A failing remote delete is logged and not retried; the view still reflects it.
        Unknown ids are a no-op.
        """
        record_id = str(record_id)
        rec = self._take(record_id)
        provenance = rec.provenance if rec is not None else classify_id(record_id)

        if provenance is Provenance.REMOTE:
            user_id = auth.user_id
            if self.remote is None or not user_id:
                log.info("skipping remote delete of %s: no remote session", record_id)
            else:
                try:
                    self.remote.delete(record_id, user_id)
                except Exception as e:
                    log.warning("remote delete of %s failed; local view already updated: %s", record_id, e)

        # local list = every local record except this id (no-op for remote ids)
        kept = [i for i in self.local.read_all() if str(read_field(i, "id")) != record_id]
        self.local.write_all(kept)

    def save(self, record: SessionRecord, auth: AuthContext) -> SessionRecord:
        """Insert into the remote store. Requires an authenticated user; nothing is written otherwise."""
        if not auth.authenticated:
            raise AuthenticationRequired("log in to save sessions to the cloud")
        if self.remote is None:
            raise RemoteStoreError("no remote store configured")

        row = to_remote_row(record, auth.user_id)
        if classify_id(record.id) is not Provenance.REMOTE:
            row.pop("id")  # the store hands out its own id
        stored = self.remote.insert(row)
        saved = from_raw(stored, Provenance.REMOTE)
        self.view.insert(0, saved)
        log.info("saved session %s to remote store", saved.id)
        return saved

    def save_local(self, record: SessionRecord) -> SessionRecord:
        """
        Append to the local fallback list (no authentication needed).
        An id already present in the list is bumped until it is unique.
        """
        items = self.local.read_all()
        taken = {str(read_field(i, "id")) for i in items}
        rid = record.id
        while rid in taken:
            rid = bump_local_id(rid)
        rec = dataclasses.replace(record, id=rid, provenance=Provenance.LOCAL)
        items.append(to_local_item(rec))
        self.local.write_all(items)
        self.view.append(rec)
        log.info("saved session %s to local store", rec.id)
        return rec

    # ------------- internals -------------

    def find(self, record_id: str) -> Optional[SessionRecord]:
        for rec in self.view:
            if rec.id == record_id:
                return rec
        return None

    def _take(self, record_id: str) -> Optional[SessionRecord]:
        rec = self.find(record_id)
        self.view = [r for r in self.view if r.id != record_id]
        return rec

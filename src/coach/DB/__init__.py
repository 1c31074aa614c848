from .api import LocalRecordStore, RemoteRecordStore, make_local_store, make_remote_store

__all__ = ["LocalRecordStore", "RemoteRecordStore", "make_local_store", "make_remote_store"]

# coach/DB/json_store.py
from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict, Iterable, List

from .api import Row

log = logging.getLogger(__name__)


class JsonFileLocalStore:
    """
    Browser-storage style fallback: a JSON object on disk mapping keys to serialized
    strings. The history list lives under a single key and is always rewritten whole.
    """
    def __init__(self, path: str, *, key: str) -> None:
        self.path = os.path.abspath(path)
        self.key = key

    def _load_file(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            log.warning("unreadable local store %s (%s); treating as empty", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def read_all(self) -> List[Row]:
        raw = self._load_file().get(self.key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except (TypeError, json.JSONDecodeError) as e:
            log.warning("corrupt value under %r in %s (%s); treating as empty", self.key, self.path, e)
            return []
        return [i for i in items if isinstance(i, dict)] if isinstance(items, list) else []

    def write_all(self, items: Iterable[Row]) -> None:
        data = self._load_file()
        data[self.key] = json.dumps(list(items), ensure_ascii=False)
        tmp = f"{self.path}.tmp"
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp, self.path)

    def close(self) -> None:
        pass

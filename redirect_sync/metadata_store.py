"""Record metadata stores"""

import copy
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from .logger import get_logger
from .models import HELPSCOUT_META_KEY

log = get_logger("metadata_store")


class MetadataStoreError(Exception):
    """Metadata store could not be read"""
    pass


class MetadataStore:
    """
    Key/value access to the HelpScout metadata of content records.

    Subclasses implement `_read_meta` and `_write_meta`.
    """

    def __init__(self, meta_key: str = HELPSCOUT_META_KEY):
        self.meta_key = meta_key

    def get(self, record_id: Any) -> Dict[str, Any]:
        """Return the record's metadata mapping, empty if it has none"""
        value = self._read_meta(record_id)
        if not isinstance(value, dict):
            return {}
        return copy.deepcopy(value)

    def set(self, record_id: Any, data: Dict[str, Any]) -> None:
        """Replace the record's metadata mapping"""
        self._write_meta(record_id, copy.deepcopy(data))

    def _read_meta(self, record_id: Any) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def _write_meta(self, record_id: Any, data: Dict[str, Any]) -> None:
        raise NotImplementedError


class InMemoryMetadataStore(MetadataStore):
    """Dictionary backed store"""

    def __init__(self, initial: Optional[Dict[Any, Dict[str, Any]]] = None, meta_key: str = HELPSCOUT_META_KEY):
        super().__init__(meta_key)
        self._records: Dict[str, Dict[str, Any]] = {}
        for record_id, data in (initial or {}).items():
            self.set(record_id, data)

    def _read_meta(self, record_id: Any) -> Optional[Dict[str, Any]]:
        return self._records.get(str(record_id), {}).get(self.meta_key)

    def _write_meta(self, record_id: Any, data: Dict[str, Any]) -> None:
        self._records.setdefault(str(record_id), {})[self.meta_key] = data


class JSONFileMetadataStore(MetadataStore):
    """
    Store backed by a JSON file.

    Layout: {"<record_id>": {"_helpscout_data": {...}, ...}}. Other meta
    keys of a record are preserved on write.
    """

    def __init__(self, path: str, meta_key: str = HELPSCOUT_META_KEY):
        super().__init__(meta_key)
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise MetadataStoreError(f"Failed to read metadata store {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise MetadataStoreError(f"Metadata store {self.path} must contain a JSON object")
        return data

    def _dump(self, records: Dict[str, Dict[str, Any]]) -> None:
        """Write records to a temp file and swap it into place"""
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise MetadataStoreError(f"Failed to write metadata store {self.path}: {e}") from e

    def _read_meta(self, record_id: Any) -> Optional[Dict[str, Any]]:
        return self._load().get(str(record_id), {}).get(self.meta_key)

    def _write_meta(self, record_id: Any, data: Dict[str, Any]) -> None:
        with self._lock:
            records = self._load()
            records.setdefault(str(record_id), {})[self.meta_key] = data
            self._dump(records)

        log.debug(f"Saved {self.meta_key} for record {record_id} to {self.path}")

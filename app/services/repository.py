# app/services/repository.py
import copy
import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional, Protocol

from app.models.application import ApplicationRecord, known_keys
from app.services.document_schema import validate_document
from app.services.errors import NotFound, StorageCorrupt, StorageUnavailable

logger = logging.getLogger(__name__)


class ApplicationRepository(Protocol):
    """Storage port used by ApplicationStore. Records keep insertion order."""

    def load_all(self) -> List[ApplicationRecord]:
        ...

    def find(self, app_id: str) -> Optional[ApplicationRecord]:
        ...

    def insert(self, record: ApplicationRecord) -> None:
        ...

    def replace(self, record: ApplicationRecord) -> None:
        ...


# ============================================================
# 🧩 Document helpers
# ============================================================

def parse_document(document: Any) -> List[ApplicationRecord]:
    """
    Validate the `{"applications": [...]}` envelope and load every record in it.
    Only a broken envelope is corrupt; a record with stale field values is
    loaded as-is (see ApplicationRecord.from_stored).
    """
    ok, err = validate_document(document)
    if not ok:
        raise StorageCorrupt(f"Malformed applications document: {err}")

    known = known_keys()
    records = []
    for raw in document["applications"]:
        record = ApplicationRecord.from_stored(raw)
        stale = sorted(set(record.extra_fields) & known)
        if stale:
            logger.warning(f"⚠️ Stored application {record.id} has invalid {', '.join(stale)}; kept as-is")
        records.append(record)
    return records


def build_document(records: List[ApplicationRecord]) -> Dict[str, Any]:
    return {"applications": [r.to_document() for r in records]}


def _atomic_write(path: Path, document: Dict[str, Any]):
    """Write to a sibling temp file, then rename over the target."""
    tmp_path = path.with_suffix(".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def _replace_in(records: List[ApplicationRecord], record: ApplicationRecord) -> None:
    for i, existing in enumerate(records):
        if existing.id == record.id:
            records[i] = record
            return
    raise NotFound(f"No application found with ID: {record.id}", context={"id": record.id})


# ============================================================
# 📘 JSON file backend
# ============================================================

class JsonFileApplicationRepository:
    """
    All records in one JSON document on disk.

    Every call re-reads the file and every mutation rewrites the whole
    document. The lock only keeps a single read or write from interleaving
    with another inside this process; read-modify-write cycles are not
    serialised, so concurrent writers can still lose updates.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._lock = Lock()

    def _read(self) -> List[ApplicationRecord]:
        if not self.path.exists():
            logger.info(f"📄 No {self.path.name} found — starting with an empty document.")
            return []
        try:
            with self._lock:
                with open(self.path, "r", encoding="utf-8") as f:
                    document = json.load(f)
        except ValueError as e:
            logger.error(f"❌ Corrupted JSON in {self.path}: {e}")
            raise StorageCorrupt(f"Could not parse {self.path}: {e}", context={"path": str(self.path)})
        except OSError as e:
            logger.error(f"❌ Error reading {self.path}: {e}")
            raise StorageUnavailable(f"Could not read {self.path}: {e}", context={"path": str(self.path)})

        records = parse_document(document)
        logger.debug(f"📂 Loaded {len(records)} application(s) from {self.path}")
        return records

    def _write(self, records: List[ApplicationRecord]) -> None:
        document = build_document(records)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock:
                _atomic_write(self.path, document)
        except OSError as e:
            logger.error(f"❌ Error saving applications to {self.path}: {e}")
            raise StorageUnavailable(f"Could not write {self.path}: {e}", context={"path": str(self.path)})
        logger.info(f"✅ Saved {len(records)} application(s) → {self.path}")

    def load_all(self) -> List[ApplicationRecord]:
        return self._read()

    def find(self, app_id: str) -> Optional[ApplicationRecord]:
        return next((r for r in self._read() if r.id == app_id), None)

    def insert(self, record: ApplicationRecord) -> None:
        records = self._read()
        records.append(record)
        self._write(records)

    def replace(self, record: ApplicationRecord) -> None:
        records = self._read()
        _replace_in(records, record)
        self._write(records)


# ============================================================
# 🧪 In-memory backend
# ============================================================

class InMemoryApplicationRepository:
    """Keeps serialised documents in a list so reads never share objects with writes."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None):
        self._document = {"applications": copy.deepcopy(records or [])}

    def load_all(self) -> List[ApplicationRecord]:
        return parse_document(copy.deepcopy(self._document))

    def find(self, app_id: str) -> Optional[ApplicationRecord]:
        return next((r for r in self.load_all() if r.id == app_id), None)

    def insert(self, record: ApplicationRecord) -> None:
        records = self.load_all()
        records.append(record)
        self._document = build_document(records)

    def replace(self, record: ApplicationRecord) -> None:
        records = self.load_all()
        _replace_in(records, record)
        self._document = build_document(records)

    @property
    def document(self) -> Dict[str, Any]:
        return copy.deepcopy(self._document)

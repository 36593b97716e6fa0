"""Flat vector store: an ordered list of chunk records persisted as one JSON document."""

import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

SOURCE_TYPES = ("file", "url")


def make_record_id(source_type: str, source: str, chunk_index: int) -> str:
    return f"{source_type}:{source}::{chunk_index}"


@dataclass
class IndexRecord:
    id: str
    source: str
    type: str
    text: str
    embedding: List[float] = field(repr=False)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "IndexRecord":
        return cls(
            id=data["id"],
            source=data["source"],
            type=data["type"],
            text=data["text"],
            embedding=list(data["embedding"]),
        )


class VectorStore:
    """In-memory record list guarded by a lock and rewritten to disk after every mutation."""

    def __init__(self, path: Path, model: str = ""):
        self.path = Path(path)
        self.model = model
        self._items: List[IndexRecord] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._items)

    @property
    def dimension(self) -> Optional[int]:
        return len(self._items[0].embedding) if self._items else None

    def load(self) -> "VectorStore":
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            items = [IndexRecord.from_dict(item) for item in raw.get("items", [])]
            self._check_dimensions(items, None)
        except FileNotFoundError:
            logger.info(f"No index on disk, starting empty | path={self.path}")
            items = []
        except (OSError, ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning(f"Index unreadable, starting empty | path={self.path} | error={e}")
            items = []

        with self._lock:
            self._items = items
        logger.info(f"Index loaded | items={len(items)}")
        return self

    def save(self):
        with self._lock:
            self._save_locked()

    def _save_locked(self):
        document = {
            "model": self.model,
            "updated_at": datetime.now(timezone.utc).isoformat(),
            "items": [item.to_dict() for item in self._items],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")

    def _check_dimensions(self, records: List[IndexRecord], existing: Optional[int]):
        expected = existing
        for record in records:
            if expected is None:
                expected = len(record.embedding)
            elif len(record.embedding) != expected:
                raise ValueError(
                    f"Embedding dimension mismatch for {record.id}: "
                    f"expected {expected}, got {len(record.embedding)}"
                )

    def append(self, records: Iterable[IndexRecord]) -> int:
        records = list(records)
        with self._lock:
            self._check_dimensions(records, self.dimension)
            self._items.extend(records)
            self._save_locked()
        logger.info(f"Index append | added={len(records)} | total={len(self._items)}")
        return len(records)

    def delete_by_source(self, source: str) -> int:
        with self._lock:
            before = len(self._items)
            self._items = [item for item in self._items if item.source != source]
            removed = before - len(self._items)
            self._save_locked()
        logger.info(f"Index delete | source={source} | removed={removed}")
        return removed

    def replace(self, records: Iterable[IndexRecord]):
        records = list(records)
        self._check_dimensions(records, None)
        with self._lock:
            self._items = records
            self._save_locked()
        logger.info(f"Index replaced | total={len(records)}")

    def snapshot(self) -> List[IndexRecord]:
        with self._lock:
            return list(self._items)

    def sources(self) -> List[Dict]:
        groups: Dict[str, Dict] = {}
        for item in self.snapshot():
            group = groups.setdefault(item.source, {"source": item.source, "type": item.type, "count": 0})
            group["count"] += 1
        return [groups[key] for key in sorted(groups)]

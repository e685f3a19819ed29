from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from dataset_curator.core.schemas import Pair, StoredPair
from dataset_curator.core.utils import ensure_directory
from dataset_curator.core.validators import drop_incomplete
from dataset_curator.processing.cleaning import remove_exact_duplicates

logger = logging.getLogger(__name__)


class DatasetStore:
    """Ordered pair collection persisted as a JSON array.

    Every create/update stamps the record with an ISO-8601 UTC ``timestamp``.
    Mutations save immediately.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._pairs: List[StoredPair] = []
        self._lock = Lock()
        self.load()

    def load(self) -> List[StoredPair]:
        with self._lock:
            if not self.path.exists():
                logger.debug("Dataset store %s does not exist yet; starting empty.", self.path)
                self._pairs = []
                return []
            try:
                payload = json.loads(self.path.read_text(encoding="utf-8") or "[]")
                if not isinstance(payload, list):
                    raise ValueError("expected a JSON array")
                self._pairs = [StoredPair.model_validate(record) for record in payload]
            except (ValueError, ValidationError) as exc:
                raise ValueError(f"Corrupt dataset store {self.path}: {exc}") from exc
            logger.debug("Loaded %d pairs from %s", len(self._pairs), self.path)
            return list(self._pairs)

    def save(self) -> None:
        with self._lock:
            self._write()

    def _write(self) -> None:
        ensure_directory(self.path.parent)
        records = [pair.model_dump(mode="json") for pair in self._pairs]
        self.path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")

    @staticmethod
    def _stamp(pair: Pair) -> StoredPair:
        return StoredPair(
            prompt=pair.prompt,
            completion=pair.completion,
            tags=list(pair.tags),
            timestamp=datetime.now(timezone.utc),
        )

    def add(self, pair: Pair) -> StoredPair:
        return self.add_many([pair])[0]

    def add_many(self, pairs: Iterable[Pair]) -> List[StoredPair]:
        with self._lock:
            stored = [self._stamp(pair) for pair in pairs]
            self._pairs.extend(stored)
            self._write()
        logger.info("Added %d pairs to %s", len(stored), self.path)
        return stored

    def update(self, index: int, pair: Pair) -> StoredPair:
        with self._lock:
            self._check_index(index)
            stored = self._stamp(pair)
            self._pairs[index] = stored
            self._write()
        return stored

    def delete(self, index: int) -> None:
        with self._lock:
            self._check_index(index)
            del self._pairs[index]
            self._write()

    def clear(self) -> None:
        with self._lock:
            self._pairs = []
            self._write()

    def get(self, index: int) -> Optional[StoredPair]:
        with self._lock:
            if 0 <= index < len(self._pairs):
                return self._pairs[index]
            return None

    def get_all(self) -> List[StoredPair]:
        with self._lock:
            return list(self._pairs)

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            total = len(self._pairs)
            valid = sum(1 for pair in self._pairs if pair.is_complete)
        return {"total": total, "valid": valid, "warnings": total - valid}

    def remove_duplicates(self) -> int:
        return self._replace_all(remove_exact_duplicates)

    def validate(self) -> int:
        return self._replace_all(drop_incomplete)

    def _replace_all(self, transform) -> int:
        with self._lock:
            before = len(self._pairs)
            self._pairs = list(transform(self._pairs))
            self._write()
            removed = before - len(self._pairs)
        logger.info("Removed %d pairs from %s", removed, self.path)
        return removed

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._pairs):
            raise IndexError(f"Pair index {index} out of range (store has {len(self._pairs)} pairs)")

    def __len__(self) -> int:
        return len(self._pairs)

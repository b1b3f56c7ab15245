"""Flat-file JSON record store with per-collection repositories."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

from flask import current_app

from reefmag.errors import Conflict, IOFailure

Record = dict[str, Any]


class JsonFileStore:
    """Stores each named collection as one pretty-printed JSON array file."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def lock(self, collection: str) -> threading.RLock:
        with self._locks_guard:
            return self._locks.setdefault(collection, threading.RLock())

    def ensure(self, collection: str) -> Path:
        """Create an empty array file for a previously unseen collection."""
        path = self.path_for(collection)
        if not path.exists():
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
                path.write_text('[]', encoding='utf-8')
            except OSError as e:
                raise IOFailure(f"Cannot create {path}: {e}") from e
        return path

    def load(self, collection: str) -> list[Record]:
        path = self.ensure(collection)
        try:
            with path.open('r', encoding='utf-8') as fh:
                records = json.load(fh)
        except (OSError, ValueError) as e:
            raise IOFailure(f"Cannot read {path}: {e}") from e
        if not isinstance(records, list):
            raise IOFailure(f"{path} does not hold a JSON array")
        return records

    def save(self, collection: str, records: list[Record]) -> None:
        """Rewrite the whole collection file."""
        path = self.path_for(collection)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{collection}.", suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(records, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except (OSError, TypeError) as e:
            raise IOFailure(f"Cannot write {path}: {e}") from e


class UniqueField:
    """No two records may share a non-empty value for ``field``."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        self.message = message or f"{field} must be unique"

    def check(self, record: Record, others: Iterable[Record]) -> None:
        value = record.get(self.field)
        if value is None or value == '':
            return
        for other in others:
            if other.get(self.field) == value:
                raise Conflict(self.message)

    def apply(self, record: Record, others: Iterable[Record]) -> None:
        return None


class ExclusiveFlag:
    """At most one record may have ``field`` set to true."""

    def __init__(self, field: str):
        self.field = field

    def check(self, record: Record, others: Iterable[Record]) -> None:
        return None

    def apply(self, record: Record, others: Iterable[Record]) -> None:
        if record.get(self.field) is True:
            for other in others:
                if other.get(self.field):
                    other[self.field] = False


class Repository:
    """Narrow list/get/upsert/delete/find_by interface over one collection.

    Every write runs inside the collection lock: load the array, evaluate all
    constraints against the other records, mutate, save. A failed constraint
    raises before anything is saved.
    """

    def __init__(self, store: JsonFileStore, collection: str, constraints: Iterable[Any] = ()):
        self.store = store
        self.collection = collection
        self.constraints = tuple(constraints)

    @contextmanager
    def _locked_records(self) -> Iterator[list[Record]]:
        with self.store.lock(self.collection):
            yield self.store.load(self.collection)

    def list(self) -> list[Record]:
        with self._locked_records() as records:
            return records

    def get(self, record_id: str) -> Record | None:
        with self._locked_records() as records:
            return _find(records, record_id)

    def find_by(self, predicate: Callable[[Record], bool] | None = None, **criteria: Any) -> list[Record]:
        with self._locked_records() as records:
            return [
                r for r in records
                if all(r.get(k) == v for k, v in criteria.items())
                and (predicate is None or predicate(r))
            ]

    def first_by(self, **criteria: Any) -> Record | None:
        matches = self.find_by(**criteria)
        return matches[0] if matches else None

    def _enforce(self, record: Record, records: list[Record]) -> None:
        others = [r for r in records if r.get('id') != record.get('id')]
        for constraint in self.constraints:
            constraint.check(record, others)
        for constraint in self.constraints:
            constraint.apply(record, others)

    def insert(self, record: Record) -> Record:
        with self._locked_records() as records:
            self._enforce(record, records)
            records.append(record)
            self.store.save(self.collection, records)
        return record

    def upsert(self, record: Record) -> Record:
        """Replace the record with the same id in place, or append it."""
        with self._locked_records() as records:
            self._enforce(record, records)
            for idx, existing in enumerate(records):
                if existing.get('id') == record.get('id'):
                    records[idx] = record
                    break
            else:
                records.append(record)
            self.store.save(self.collection, records)
        return record

    def update(self, record_id: str, mutate: Callable[[Record], None]) -> Record | None:
        """Apply ``mutate`` to a copy of the stored record and persist it.

        Returns None when the id is unknown.
        """
        with self._locked_records() as records:
            for idx, existing in enumerate(records):
                if existing.get('id') == record_id:
                    break
            else:
                return None
            updated = dict(existing)
            mutate(updated)
            self._enforce(updated, records)
            records[idx] = updated
            self.store.save(self.collection, records)
        return updated

    def delete(self, record_id: str) -> Record | None:
        """Remove and return the record, or None when the id is unknown."""
        with self._locked_records() as records:
            existing = _find(records, record_id)
            if existing is None:
                return None
            records.remove(existing)
            self.store.save(self.collection, records)
        return existing


def _find(records: list[Record], record_id: str) -> Record | None:
    for record in records:
        if record.get('id') == record_id:
            return record
    return None


def get_store() -> JsonFileStore:
    """Return the store bound to the current application."""
    return current_app.extensions['reefmag']['store']


__all__ = ['JsonFileStore', 'Repository', 'UniqueField', 'ExclusiveFlag', 'Record', 'get_store']

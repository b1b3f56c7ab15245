"""Generic CRUD service over one JSON collection."""

from __future__ import annotations

from typing import Any, Iterable

from flask import current_app
from werkzeug.datastructures import FileStorage

from reefmag.errors import NotFound, ReefmagError, ValidationError
from reefmag.models import RecordStatus, new_id, utc_timestamp
from reefmag.services.store import JsonFileStore, Record, Repository
from reefmag.services.uploads import delete_upload, has_file, save_upload

PROTECTED_KEYS = frozenset({'id', 'createdAt', 'updatedAt'})


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class CollectionService:
    """Base CRUD service with common operations.

    Subclasses declare the collection name, required fields, file fields and
    constraints; hooks cover the collection-specific steps.
    """

    collection: str = ''
    label: str = 'Record'
    required_fields: tuple[str, ...] = ('title',)
    # request file field -> (record key, upload folder)
    file_fields: dict[str, tuple[str, str]] = {}
    required_files: tuple[str, ...] = ()
    constraints: tuple = ()
    public: bool = True
    admin_create: bool = True
    stamp_updated_on_create: bool = False

    def __init__(self, store: JsonFileStore):
        self.repository = Repository(store, self.collection, self.constraints)

    # ----- queries -----

    def list_all(self, active_only: bool = False) -> list[Record]:
        """
        List records in insertion order.

        Args:
            active_only: Keep only records whose status is exactly "active"
        """
        records = self.repository.list()
        if active_only:
            records = [r for r in records if r.get('status') == RecordStatus.ACTIVE.value]
            records = self.public_order(records)
        return records

    def public_order(self, records: list[Record]) -> list[Record]:
        return records

    def get(self, record_id: str) -> Record:
        record = self.repository.get(record_id)
        if record is None:
            raise NotFound(f"{self.label} not found")
        return record

    def serialize(self, record: Record) -> dict[str, Any]:
        return dict(record)

    # ----- writes -----

    def create(self, data: dict[str, Any], files: dict[str, FileStorage] | None = None) -> Record:
        """
        Create a new record.

        Args:
            data: Validated field values
            files: Uploaded files keyed by request field name

        Returns:
            The persisted record
        """
        files = {k: v for k, v in (files or {}).items() if has_file(v)}
        self._validate_create(data, files)

        record: Record = {'id': new_id()}
        record.update({k: v for k, v in data.items() if k not in PROTECTED_KEYS})
        self.repository_check(record)

        stored = self._store_files(record, files)
        self._before_create(record, files)

        record['createdAt'] = utc_timestamp()
        if self.stamp_updated_on_create:
            record['updatedAt'] = record['createdAt']

        try:
            self.repository.insert(record)
        except ReefmagError:
            self._discard(stored)
            raise

        current_app.logger.info(f"Created {self.collection} record {record['id']}")
        return record

    def update(self, record_id: str, data: dict[str, Any], files: dict[str, FileStorage] | None = None) -> Record:
        """
        Merge the provided fields over an existing record.

        Omitted fields keep their stored values.
        """
        existing = self.get(record_id)
        files = {k: v for k, v in (files or {}).items() if has_file(v)}

        changes = {k: v for k, v in data.items() if k not in PROTECTED_KEYS}
        merged = {**existing, **changes}
        self._validate_record(merged)
        self.repository_check(merged)

        stored = self._store_files(changes, files)
        replaced = [existing.get(key) for key in stored if existing.get(key) and existing.get(key) != changes[key]]
        self._before_update(existing, changes, files)
        changes['updatedAt'] = utc_timestamp()

        try:
            updated = self.repository.update(record_id, lambda r: r.update(changes))
        except ReefmagError:
            self._discard(stored)
            raise
        if updated is None:
            self._discard(stored)
            raise NotFound(f"{self.label} not found")

        for url in replaced:
            delete_upload(url)
        self._after_update(existing, updated)

        current_app.logger.info(f"Updated {self.collection} record {record_id}")
        return updated

    def delete(self, record_id: str) -> Record:
        """Remove a record together with every file it references."""
        removed = self.repository.delete(record_id)
        if removed is None:
            raise NotFound(f"{self.label} not found")

        for key, _folder in self.file_fields.values():
            delete_upload(removed.get(key))
        self._after_delete(removed)

        current_app.logger.info(f"Deleted {self.collection} record {record_id}")
        return removed

    def repository_check(self, record: Record) -> None:
        """Evaluate uniqueness constraints without writing."""
        if not self.constraints:
            return
        others = [r for r in self.repository.list() if r.get('id') != record.get('id')]
        for constraint in self.constraints:
            constraint.check(record, others)

    # ----- helpers -----

    def _store_files(self, target: Record, files: dict[str, FileStorage]) -> dict[str, str]:
        stored: dict[str, str] = {}
        for field, (key, folder) in self.file_fields.items():
            if field in files:
                try:
                    url = save_upload(files[field], folder)
                except ReefmagError:
                    self._discard(stored)
                    raise
                target[key] = url
                stored[key] = url
        return stored

    def _discard(self, stored: dict[str, str]) -> None:
        for url in stored.values():
            delete_upload(url)

    def _missing(self, record: Record, fields: Iterable[str]) -> dict[str, list[str]]:
        return {f: ['This field is required.'] for f in fields if _is_blank(record.get(f))}

    # ----- hooks -----

    def _validate_create(self, data: dict[str, Any], files: dict[str, FileStorage]) -> None:
        """Reject missing required fields and files before anything is stored."""
        errors = self._missing(data, self.required_fields)
        for field in self.required_files:
            if field not in files:
                errors[field] = ['A file is required.']
        if errors:
            raise ValidationError(f"{', '.join(sorted(errors))} required", fields=errors)

    def _validate_record(self, record: Record) -> None:
        errors = self._missing(record, self.required_fields)
        if errors:
            raise ValidationError(f"{', '.join(sorted(errors))} required", fields=errors)

    def _before_create(self, record: Record, files: dict[str, FileStorage]) -> None:
        return None

    def _before_update(self, existing: Record, changes: Record, files: dict[str, FileStorage]) -> None:
        return None

    def _after_update(self, previous: Record, updated: Record) -> None:
        return None

    def _after_delete(self, record: Record) -> None:
        return None


__all__ = ['CollectionService', 'PROTECTED_KEYS']

"""The nine content collections and their specific rules."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from flask import current_app

from reefmag.models import utc_timestamp
from reefmag.services.crud import CollectionService
from reefmag.services.store import ExclusiveFlag, JsonFileStore, Record, UniqueField
from reefmag.services.uploads import filename_for_url


def _by_sort(records: list[Record]) -> list[Record]:
    return sorted(records, key=lambda r: (r.get('sort') is None, r.get('sort') or 0))


class MagazineService(CollectionService):
    collection = 'magazines'
    label = 'Magazine'
    required_fields = ()
    file_fields = {
        'pdf': ('pdf', 'pdfs'),
        'cover': ('cover', 'covers'),
        'splitted_pdf': ('splittedPdf', 'splitted'),
    }
    required_files = ('pdf', 'cover')
    constraints = (ExclusiveFlag('featured'),)

    def public_order(self, records):
        # Featured issue first, insertion order otherwise
        return sorted(records, key=lambda r: not r.get('featured'))

    def protected_pdf_url(self, pdf_path: str) -> str:
        config = current_app.config
        filename = filename_for_url(pdf_path)
        return f"{config['BASE_URL'].rstrip('/')}/uploads/{filename}?token={quote(config['PROTECTION_TOKEN'], safe='')}"

    def _render(self, pdf_path: str) -> dict[str, Any]:
        flipbook = current_app.extensions['reefmag']['flipbook'].create(self.protected_pdf_url(pdf_path))
        current_app.logger.info(f"Rendered flip-book {flipbook.id} for {pdf_path}")
        return {'flipbookId': flipbook.id, 'embedUrl': flipbook.embed_url}

    def _before_create(self, record, files):
        record.update(self._render(record['pdf']))

    def _before_update(self, existing, changes, files):
        if 'pdf' in files:
            changes.update(self._render(changes['pdf']))

    def _after_update(self, previous, updated):
        old_id = previous.get('flipbookId')
        if old_id and old_id != updated.get('flipbookId'):
            current_app.extensions['reefmag']['tasks'].submit('delete_flipbook', old_id)

    def _after_delete(self, record):
        if record.get('flipbookId'):
            current_app.extensions['reefmag']['tasks'].submit('delete_flipbook', record['flipbookId'])


class AdvertiserService(CollectionService):
    collection = 'advertisers'
    label = 'Advertiser'


class SponsorService(CollectionService):
    collection = 'sponsors'
    label = 'Sponsor'
    file_fields = {'image': ('image', 'sponsors')}
    required_files = ('image',)


class ReefClubService(CollectionService):
    collection = 'reefclubs'
    label = 'Reef club'
    required_fields = ('title', 'sort')
    constraints = (UniqueField('sort', 'Sort order already in use'),)

    def public_order(self, records):
        return _by_sort(records)


class EventService(CollectionService):
    collection = 'events'
    label = 'Event'
    required_fields = ('title', 'sort')
    constraints = (
        UniqueField('sort', 'Sort order already in use'),
        ExclusiveFlag('featured'),
    )
    stamp_updated_on_create = True

    def public_order(self, records):
        return _by_sort(records)


class NewsService(CollectionService):
    collection = 'news'
    label = 'News item'


class ProductService(CollectionService):
    collection = 'products'
    label = 'Product'
    file_fields = {'image': ('image', 'products')}
    required_files = ('image',)


class MemberService(CollectionService):
    """Members are seeded by ``flask member import``; no create endpoint."""

    collection = 'members'
    label = 'Member'
    required_fields = ('email',)
    constraints = (UniqueField('email', 'Member email already exists'),)
    public = False
    admin_create = False

    def import_records(self, rows: list[dict[str, Any]]) -> tuple[int, int]:
        """Create members from raw rows; rows whose email exists are skipped."""
        created = skipped = 0
        known = {r.get('email') for r in self.repository.list()}
        for row in rows:
            email = (row.get('email') or '').strip()
            if not email or email in known:
                skipped += 1
                continue
            data = {
                'email': email,
                'country': row.get('country'),
                'registration': row.get('registration'),
                'activation': row.get('activation'),
                'status': row.get('status') or 'active',
            }
            self.create(data)
            known.add(email)
            created += 1
        return created, skipped


class UserService(CollectionService):
    """Accounts created through registration."""

    collection = 'users'
    label = 'User'
    required_fields = ('email',)
    constraints = (UniqueField('email', 'Email already registered'),)
    public = False
    admin_create = False

    def serialize(self, record):
        return {k: v for k, v in record.items() if k != 'password'}

    def find_by_email(self, email: str) -> Record | None:
        return self.repository.first_by(email=email)

    def register(self, email: str, password_hash: str) -> Record:
        return self.create({'email': email, 'password': password_hash})

    def set_password(self, record_id: str, password_hash: str, reset: bool = False) -> Record:
        changes: dict[str, Any] = {'password': password_hash}
        if reset:
            changes['resetAt'] = utc_timestamp()
        return self.update(record_id, changes)


SERVICE_CLASSES = (
    MagazineService,
    AdvertiserService,
    SponsorService,
    ReefClubService,
    EventService,
    NewsService,
    ProductService,
    MemberService,
    UserService,
)


def build_services(store: JsonFileStore) -> dict[str, CollectionService]:
    return {cls.collection: cls(store) for cls in SERVICE_CLASSES}


def get_service(collection: str) -> CollectionService:
    return current_app.extensions['reefmag']['collections'][collection]


__all__ = [
    'MagazineService',
    'AdvertiserService',
    'SponsorService',
    'ReefClubService',
    'EventService',
    'NewsService',
    'ProductService',
    'MemberService',
    'UserService',
    'SERVICE_CLASSES',
    'build_services',
    'get_service',
]

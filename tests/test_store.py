"""Record store and repository constraints."""

import json

import pytest

from reefmag.errors import Conflict, IOFailure
from reefmag.services.store import ExclusiveFlag, JsonFileStore, Repository, UniqueField


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / 'data')


def test_unknown_collection_is_created_empty(store):
    assert store.load('advertisers') == []
    assert json.loads(store.path_for('advertisers').read_text()) == []


def test_save_writes_pretty_printed_array(store):
    store.save('news', [{'id': '1', 'title': 'Corals'}])
    text = store.path_for('news').read_text()
    assert text.startswith('[\n  {')
    assert json.loads(text) == [{'id': '1', 'title': 'Corals'}]
    # No temporary files are left behind
    assert [p.name for p in store.data_dir.iterdir()] == ['news.json']


def test_corrupt_file_raises_io_failure(store):
    store.data_dir.mkdir(parents=True)
    store.path_for('news').write_text('{not json')
    with pytest.raises(IOFailure):
        store.load('news')


def test_non_array_file_raises_io_failure(store):
    store.data_dir.mkdir(parents=True)
    store.path_for('news').write_text('{"id": "1"}')
    with pytest.raises(IOFailure):
        store.load('news')


def test_repository_keeps_insertion_order(store):
    repo = Repository(store, 'news')
    for n in range(5):
        repo.insert({'id': str(n), 'title': f'Item {n}'})
    assert [r['id'] for r in repo.list()] == ['0', '1', '2', '3', '4']


def test_unique_field_rejects_duplicate_and_leaves_file_unchanged(store):
    repo = Repository(store, 'reefclubs', [UniqueField('sort', 'Sort order already in use')])
    repo.insert({'id': 'a', 'sort': 1})
    before = store.path_for('reefclubs').read_text()

    with pytest.raises(Conflict) as exc:
        repo.insert({'id': 'b', 'sort': 1})

    assert exc.value.message == 'Sort order already in use'
    assert store.path_for('reefclubs').read_text() == before


def test_unique_field_ignores_empty_values(store):
    repo = Repository(store, 'members', [UniqueField('email')])
    repo.insert({'id': 'a', 'email': None})
    repo.insert({'id': 'b', 'email': None})
    assert len(repo.list()) == 2


def test_unique_field_allows_record_to_keep_its_own_value(store):
    repo = Repository(store, 'reefclubs', [UniqueField('sort')])
    repo.insert({'id': 'a', 'sort': 3})
    updated = repo.update('a', lambda r: r.update(title='Renamed'))
    assert updated == {'id': 'a', 'sort': 3, 'title': 'Renamed'}


def test_exclusive_flag_keeps_a_single_featured_record(store):
    repo = Repository(store, 'magazines', [ExclusiveFlag('featured')])
    for n in range(12):
        repo.insert({'id': str(n), 'featured': True})

    featured = [r['id'] for r in repo.list() if r.get('featured')]
    assert featured == ['11']

    repo.update('4', lambda r: r.update(featured=True))
    assert [r['id'] for r in repo.list() if r.get('featured')] == ['4']


def test_failed_check_does_not_apply_exclusive_flag(store):
    repo = Repository(store, 'events', [UniqueField('sort'), ExclusiveFlag('featured')])
    repo.insert({'id': 'a', 'sort': 1, 'featured': True})

    with pytest.raises(Conflict):
        repo.insert({'id': 'b', 'sort': 1, 'featured': True})

    assert repo.get('a')['featured'] is True


def test_update_and_delete_unknown_ids_return_none(store):
    repo = Repository(store, 'news')
    assert repo.update('missing', lambda r: None) is None
    assert repo.delete('missing') is None


def test_upsert_replaces_in_place(store):
    repo = Repository(store, 'news')
    repo.insert({'id': 'a', 'title': 'One'})
    repo.insert({'id': 'b', 'title': 'Two'})
    repo.upsert({'id': 'a', 'title': 'Uno'})
    assert repo.list() == [{'id': 'a', 'title': 'Uno'}, {'id': 'b', 'title': 'Two'}]


def test_find_by_criteria_and_predicate(store):
    repo = Repository(store, 'news')
    repo.insert({'id': 'a', 'status': 'active', 'title': 'Reef'})
    repo.insert({'id': 'b', 'status': 'inactive', 'title': 'Reef'})
    repo.insert({'id': 'c', 'status': 'active', 'title': 'Fish'})

    assert [r['id'] for r in repo.find_by(status='active')] == ['a', 'c']
    assert [r['id'] for r in repo.find_by(lambda r: r['title'] == 'Reef', status='active')] == ['a']
    assert repo.first_by(title='Fish')['id'] == 'c'
    assert repo.first_by(title='Shark') is None

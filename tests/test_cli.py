"""Flask CLI commands."""

import json
from pathlib import Path

from reefmag.models import check_password


def _users(app):
    return app.extensions['reefmag']['store'].load('users')


def test_user_create(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['user', 'create', '--email', 'admin@reefmag.com', '--password', 'coral-reef-1'])

    assert 'User created successfully!' in result.output
    assert 'Admin: True' in result.output
    users = _users(app)
    assert users[0]['email'] == 'admin@reefmag.com'
    assert check_password('coral-reef-1', users[0]['password'])


def test_user_create_duplicate(app):
    runner = app.test_cli_runner()
    runner.invoke(args=['user', 'create', '--email', 'dory@reefmag.com', '--password', 'secret-pass'])
    result = runner.invoke(args=['user', 'create', '--email', 'dory@reefmag.com', '--password', 'secret-pass'])

    assert 'already exists' in result.output
    assert len(_users(app)) == 1


def test_user_create_short_password(app):
    result = app.test_cli_runner().invoke(args=['user', 'create', '--email', 'dory@reefmag.com', '--password', 'abc'])
    assert 'at least 6 characters' in result.output
    assert _users(app) == []


def test_set_password(app):
    runner = app.test_cli_runner()
    runner.invoke(args=['user', 'create', '--email', 'dory@reefmag.com', '--password', 'secret-pass'])
    result = runner.invoke(args=['user', 'set-password', '--email', 'dory@reefmag.com', '--password', 'new-secret'])

    assert 'Password updated.' in result.output
    assert check_password('new-secret', _users(app)[0]['password'])


def test_set_password_unknown_user(app):
    result = app.test_cli_runner().invoke(args=['user', 'set-password', '--email', 'x@reefmag.com', '--password', 'abcdef'])
    assert 'No user x@reefmag.com found' in result.output


def test_member_import(app, tmp_path):
    path = tmp_path / 'members.json'
    path.write_text(json.dumps([
        {'email': 'one@reefmag.com', 'country': 'AU', 'registration': '2024-01-01'},
        {'email': 'two@reefmag.com', 'status': 'inactive'},
        {'email': 'one@reefmag.com'},
        {'country': 'NZ'},
    ]))

    result = app.test_cli_runner().invoke(args=['member', 'import', str(path)])

    assert 'Imported 2 members (2 skipped)' in result.output
    members = app.extensions['reefmag']['store'].load('members')
    assert [m['email'] for m in members] == ['one@reefmag.com', 'two@reefmag.com']
    assert members[0]['country'] == 'AU'
    assert members[1]['status'] == 'inactive'


def test_member_import_rejects_non_array(app, tmp_path):
    path = tmp_path / 'members.json'
    path.write_text('{"email": "one@reefmag.com"}')

    result = app.test_cli_runner().invoke(args=['member', 'import', str(path)])
    assert 'Expected a JSON array' in result.output


def test_data_init(app):
    result = app.test_cli_runner().invoke(args=['data', 'init'])

    assert 'Data directory ready.' in result.output
    store = app.extensions['reefmag']['store']
    for collection in ('magazines', 'events', 'users', 'members'):
        assert json.loads(store.path_for(collection).read_text()) == []
    for folder in ('pdfs', 'covers', 'splitted', 'sponsors', 'products'):
        assert (Path(app.config['UPLOAD_ROOT']) / folder).is_dir()

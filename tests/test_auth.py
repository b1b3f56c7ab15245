"""Registration, login, logout, recovery and session handling."""

from unittest import mock

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, login, register


class TestRegistration:

    def test_register_creates_user(self, client, app):
        response = register(client, 'diver@reefmag.com', firstName='Dory')
        assert response.status_code == 201
        assert response.get_json()['success'] is True

        users = app.extensions['reefmag']['store'].load('users')
        assert len(users) == 1
        assert users[0]['email'] == 'diver@reefmag.com'
        assert users[0]['password'] != 'secret-pass'
        assert users[0]['password'].startswith('$2')
        assert users[0]['createdAt'].endswith('Z')

    def test_duplicate_email_rejected(self, client, app):
        register(client, 'diver@reefmag.com')
        response = register(client, 'diver@reefmag.com', password='another-pass')

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Email already registered'
        assert len(app.extensions['reefmag']['store'].load('users')) == 1

    def test_invalid_email_rejected(self, client):
        response = register(client, 'not-an-email')
        assert response.status_code == 400
        assert 'email' in response.get_json()['fields']

    def test_short_password_rejected(self, client):
        response = register(client, 'diver@reefmag.com', password='abc')
        assert response.status_code == 400
        assert 'password' in response.get_json()['fields']

    def test_contact_sync_failure_does_not_affect_registration(self, client, app):
        contacts = app.extensions['reefmag']['contacts']
        contacts.api_key = 'contacts-key'
        with mock.patch.object(contacts, 'add_contact', side_effect=RuntimeError('down')) as add:
            response = register(client, 'diver@reefmag.com', firstName='Dory')

        assert response.status_code == 201
        add.assert_called_with('diver@reefmag.com', 'Dory')


class TestLogin:

    def test_login_success_returns_user(self, client):
        register(client, 'diver@reefmag.com')
        response = login(client, 'diver@reefmag.com')

        assert response.status_code == 200
        user = response.get_json()['user']
        assert user['email'] == 'diver@reefmag.com'
        assert user['isAdmin'] is False
        assert 'password' not in user

    def test_wrong_password_and_unknown_email_look_identical(self, client):
        register(client, 'diver@reefmag.com')
        wrong_password = login(client, 'diver@reefmag.com', 'wrong-pass')
        unknown_email = login(client, 'nobody@reefmag.com')

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.get_json() == unknown_email.get_json() == {'error': 'Invalid email or password'}

    def test_admin_flag_for_configured_email(self, client):
        register(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        response = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        assert response.get_json()['user']['isAdmin'] is True

    def test_admin_match_is_case_sensitive(self, client):
        register(client, 'Admin@reefmag.com')
        response = login(client, 'Admin@reefmag.com')
        assert response.get_json()['user']['isAdmin'] is False

    def test_session_cookie_flags(self, client):
        register(client, 'diver@reefmag.com')
        response = login(client, 'diver@reefmag.com')

        cookie = response.headers['Set-Cookie']
        assert cookie.startswith('reefmag_session=')
        assert 'HttpOnly' in cookie
        assert 'SameSite=Lax' in cookie

    def test_login_issues_a_fresh_session_id(self, client):
        register(client, 'diver@reefmag.com')
        login(client, 'diver@reefmag.com')
        first = client.get_cookie('reefmag_session').value

        login(client, 'diver@reefmag.com')
        second = client.get_cookie('reefmag_session').value

        assert first != second
        assert client.get('/api/user').status_code == 200


class TestSession:

    def test_current_user_requires_login(self, client):
        response = client.get('/api/user')
        assert response.status_code == 401

    def test_current_user_after_login(self, member_client):
        response = member_client.get('/api/user')
        assert response.status_code == 200
        assert response.get_json() == {
            'id': response.get_json()['id'],
            'email': 'diver@reefmag.com',
            'isAdmin': False,
        }

    def test_logout_is_idempotent(self, member_client):
        assert member_client.post('/api/logout').status_code == 200
        assert member_client.get('/api/user').status_code == 401
        assert member_client.post('/api/logout').status_code == 200

    def test_logout_without_session(self, client):
        response = client.post('/api/logout')
        assert response.status_code == 200
        assert response.get_json() == {'success': True}

    def test_expired_session_is_rejected(self, member_client, app):
        store = app.session_interface.store
        sid = member_client.get_cookie('reefmag_session').value
        data, _expires = store.get(sid)
        store.set(sid, data, _expires - app.permanent_session_lifetime)

        assert member_client.get('/api/user').status_code == 401


class TestRecovery:

    def test_unknown_email_is_not_found(self, client):
        response = client.post('/api/recoverAccount', json={'email': 'nobody@reefmag.com'})
        assert response.status_code == 404

    def test_recovery_replaces_password(self, client, app):
        register(client, 'diver@reefmag.com')
        sent = {}

        def fake_send(to_email, new_password):
            sent['to'] = to_email
            sent['password'] = new_password
            return True

        with mock.patch('reefmag.blueprints.auth.send_password_reset_email', side_effect=fake_send):
            response = client.post('/api/recoverAccount', json={'email': 'diver@reefmag.com'})

        assert response.status_code == 200
        assert sent['to'] == 'diver@reefmag.com'
        assert login(client, 'diver@reefmag.com').status_code == 401
        assert login(client, 'diver@reefmag.com', sent['password']).status_code == 200

        user = app.extensions['reefmag']['store'].load('users')[0]
        assert user['resetAt'].endswith('Z')

    def test_mail_failure_keeps_old_password(self, client):
        register(client, 'diver@reefmag.com')

        with mock.patch('reefmag.blueprints.auth.send_password_reset_email', return_value=False):
            response = client.post('/api/recoverAccount', json={'email': 'diver@reefmag.com'})

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Mail delivery failed'}
        assert login(client, 'diver@reefmag.com').status_code == 200

    def test_disabled_mail_keeps_old_password(self, client, app):
        register(client, 'diver@reefmag.com')
        assert app.config['MAIL_ENABLED'] is False

        response = client.post('/api/recoverAccount', json={'email': 'diver@reefmag.com'})

        assert response.status_code == 500
        assert login(client, 'diver@reefmag.com').status_code == 200
        assert 'resetAt' not in app.extensions['reefmag']['store'].load('users')[0]


class TestPages:

    def test_archive_redirects_anonymous_visitors(self, client):
        response = client.get('/archive')
        assert response.status_code == 302
        assert '/login' in response.headers['Location']

    def test_admin_page_requires_admin_claim(self, member_client):
        response = member_client.get('/admin')
        assert response.status_code == 302

    def test_admin_page_for_admin(self, admin_client):
        response = admin_client.get('/admin')
        assert response.status_code == 200
        assert ADMIN_EMAIL.encode() in response.data

    def test_archive_for_member(self, member_client):
        assert member_client.get('/archive').status_code == 200

"""Shared fixtures for the Reef Magazine test suite."""

import io

import pytest

from reefmag import create_app
from reefmag.config import TestConfig
from reefmag.errors import UpstreamFailure
from reefmag.services.flipbook import Flipbook

ADMIN_EMAIL = 'admin@reefmag.com'
ADMIN_PASSWORD = 'coral-reef-1'


class FakeFlipbookClient:
    """Records calls instead of talking to the rendering service."""

    def __init__(self):
        self.created = []
        self.deleted = []
        self.fail = False

    def create(self, pdf_url):
        if self.fail:
            raise UpstreamFailure('Flip-book embed missing')
        self.created.append(pdf_url)
        number = len(self.created)
        return Flipbook(id=f'fb-{number}', embed_url=f'https://flipbook.test/embed/fb-{number}')

    def delete(self, flipbook_id):
        self.deleted.append(flipbook_id)


@pytest.fixture
def app(tmp_path):
    """Create and configure a test application instance."""

    class Config(TestConfig):
        DATA_DIR = str(tmp_path / 'data')
        UPLOAD_ROOT = str(tmp_path / 'uploads')

    app = create_app(Config)
    app.extensions['reefmag']['flipbook'] = FakeFlipbookClient()
    yield app
    app.extensions['reefmag']['tasks'].shutdown()


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def flipbook(app):
    return app.extensions['reefmag']['flipbook']


def register(client, email, password='secret-pass', **extra):
    return client.post('/api/register', json={'email': email, 'password': password, **extra})


def login(client, email, password='secret-pass'):
    return client.post('/api/login', json={'email': email, 'password': password})


@pytest.fixture
def admin_client(client):
    """A client logged in as the configured administrator."""
    register(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    response = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert response.status_code == 200
    return client


@pytest.fixture
def member_client(client):
    """A client logged in as an ordinary registered user."""
    register(client, 'diver@reefmag.com')
    response = login(client, 'diver@reefmag.com')
    assert response.status_code == 200
    return client


def pdf_file(name='issue.pdf'):
    return (io.BytesIO(b'%PDF-1.4 reef magazine'), name)


def image_file(name='cover.png'):
    return (io.BytesIO(b'\x89PNG\r\n\x1a\nreef'), name)


def create_magazine(client, title='Spring Issue', **fields):
    data = {'title': title, 'pdf': pdf_file(), 'cover': image_file(), **fields}
    return client.post('/api/admin/magazines', data=data, content_type='multipart/form-data')

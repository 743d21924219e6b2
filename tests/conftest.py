import re

import pytest

from app import create_app, db
from app.auth.user import User, Role
from app.content.post import Post, PostMeta, PostStatus
from post_notes.access import AccessGuard
from post_notes.repository import NOTE_META_KEY

PASSWORD = 'correct horse'
TOKEN_RE = re.compile(r'name="spnotes_nonce" value="([^"]+)"')


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def app():
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        Role.insert_default_roles()

        manager = app.extensions['plugin_manager']
        manager.discover_plugins()
        manager.activate_plugin('post-notes')

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


@pytest.fixture()
def users(app):
    """IDs of an administrator, an editor and a subscriber"""
    with app.app_context():
        admin = User.create_user('admin@example.com', 'admin', PASSWORD, is_admin=True)
        editor = User.create_user('editor@example.com', 'editor', PASSWORD, roles=['Editor'])
        reader = User.create_user('reader@example.com', 'reader', PASSWORD, roles=['Subscriber'])
        return {'admin': admin.id, 'editor': editor.id, 'reader': reader.id}


class AuthActions:
    def __init__(self, client):
        self._client = client

    def login(self, username='editor', password=PASSWORD):
        return self._client.post('/auth/login', data={'username': username, 'password': password})

    def logout(self):
        return self._client.get('/auth/logout')


@pytest.fixture()
def auth(client, users):
    return AuthActions(client)


@pytest.fixture()
def make_post(app, users):
    """Create a post, optionally with a stored note, and return its ID"""
    def _make_post(title='Hello', content='', post_type='post',
                   status=PostStatus.PUBLISHED, note=None):
        with app.app_context():
            post = Post.create_post(title, content, post_type, users['admin'], status)
            if note is not None:
                PostMeta.set_value(post.id, NOTE_META_KEY, note)
            return post.id
    return _make_post


@pytest.fixture()
def stored_note(app):
    """Read the raw stored note of a post"""
    def _stored_note(post_id):
        with app.app_context():
            return PostMeta.get_value(post_id, NOTE_META_KEY)
    return _stored_note


@pytest.fixture()
def issue_token(app, users):
    """Issue a note token for one of the test users"""
    def _issue_token(scope, username='editor'):
        with app.app_context():
            user = db.session.get(User, users[username])
            return AccessGuard(app.config['SECRET_KEY'], user).issue(scope)
    return _issue_token

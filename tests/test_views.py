"""Post Notes behaviour through the CMS admin and public routes."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.content.option import Option
from app.content.post import PostMeta, PostStatus
from post_notes.access import BULK_SCOPE, note_scope
from post_notes.settings import SETTINGS_OPTION

from conftest import TOKEN_RE

BULK_URL = '/plugins/post-notes/bulk-edit'
SETTINGS_URL = '/plugins/post-notes/settings'


def edit_token(client, post_id):
    response = client.get(f'/admin/posts/{post_id}/edit')
    assert response.status_code == 200
    return TOKEN_RE.search(response.get_data(as_text=True)).group(1)


# ===================================================================
# List table
# ===================================================================

class TestListColumn:
    def test_column_shows_note(self, client, auth, make_post):
        post_id = make_post('Post A', note='first\nsecond')
        auth.login()

        html = client.get('/admin/posts/?post_type=post').get_data(as_text=True)

        assert 'class="column-spnote"' in html
        assert f'<div id="spnote-{post_id}">first<br />\nsecond</div>' in html

    def test_note_text_is_escaped(self, client, auth, make_post):
        make_post('Post A', note='a < b & c')
        auth.login()

        html = client.get('/admin/posts/?post_type=post').get_data(as_text=True)

        assert 'a &lt; b &amp; c' in html

    def test_column_is_sortable(self, client, auth, make_post):
        make_post('Post A')
        auth.login()

        html = client.get('/admin/posts/?post_type=post').get_data(as_text=True)

        assert 'orderby=spnote' in html

    def test_column_hidden_for_disabled_type(self, client, auth, make_post):
        make_post('Upload', post_type='attachment')
        auth.login()

        html = client.get('/admin/posts/?post_type=attachment').get_data(as_text=True)

        assert 'column-spnote' not in html
        assert 'inline-edit-col-right' not in html

    def test_quick_edit_field(self, client, auth, make_post):
        make_post('Post A')
        auth.login()

        html = client.get('/admin/posts/?post_type=post').get_data(as_text=True)

        assert '<fieldset class="inline-edit-col-right">' in html
        assert '<textarea name="spnote"' in html

    @pytest.mark.parametrize('order, expected', [
        ('asc', ['Post C', 'Post B', 'Post A']),
        ('desc', ['Post A', 'Post B', 'Post C']),
    ])
    def test_sort_by_note(self, client, auth, make_post, order, expected):
        make_post('Post A', note='b note')
        make_post('Post B', note='a note')
        make_post('Post C')
        auth.login()

        html = client.get(f'/admin/posts/?post_type=post&orderby=spnote&order={order}').get_data(as_text=True)

        positions = [html.index(title) for title in expected]
        assert positions == sorted(positions)

    def test_requires_login(self, client, users):
        response = client.get('/admin/posts/?post_type=post')
        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']

    def test_requires_edit_permission(self, client, auth):
        auth.login('reader')
        assert client.get('/admin/posts/?post_type=post').status_code == 403


# ===================================================================
# Edit screen
# ===================================================================

class TestMetabox:
    def test_edit_screen_has_note_box(self, client, auth, make_post):
        post_id = make_post('Post A', note='current note')
        auth.login()

        html = client.get(f'/admin/posts/{post_id}/edit').get_data(as_text=True)

        assert 'id="spnotes"' in html
        assert 'name="spnotes_nonce"' in html
        assert '>current note</textarea>' in html

    def test_no_box_for_disabled_type(self, client, auth, make_post):
        post_id = make_post('Upload', post_type='attachment')
        auth.login()

        html = client.get(f'/admin/posts/{post_id}/edit').get_data(as_text=True)

        assert 'spnotes_nonce' not in html

    def test_save_note(self, client, auth, make_post, stored_note):
        post_id = make_post('Post A')
        auth.login()
        token = edit_token(client, post_id)

        response = client.post(f'/admin/posts/{post_id}/edit', data={
            'title': 'Post A',
            'content': '',
            'status': PostStatus.PUBLISHED,
            'spnote': '<p>Check <b>images</b></p>\r\nthen publish ',
            'spnotes_nonce': token,
        })

        assert response.status_code == 302
        assert stored_note(post_id) == 'Check images\nthen publish'

    def test_token_for_other_post_is_rejected(self, client, auth, make_post, stored_note):
        post_id = make_post('Post A')
        other_id = make_post('Post B')
        auth.login()
        token = edit_token(client, other_id)

        client.post(f'/admin/posts/{post_id}/edit', data={
            'title': 'Post A', 'spnote': 'sneaky', 'spnotes_nonce': token,
        })

        assert stored_note(post_id) is None

    def test_token_of_other_user_is_rejected(self, client, auth, make_post, stored_note, issue_token):
        post_id = make_post('Post A')
        auth.login()

        client.post(f'/admin/posts/{post_id}/edit', data={
            'title': 'Post A', 'spnote': 'sneaky',
            'spnotes_nonce': issue_token(note_scope(post_id), username='admin'),
        })

        assert stored_note(post_id) is None

    def test_missing_token_keeps_note(self, client, auth, make_post, stored_note):
        post_id = make_post('Post A', note='keep')
        auth.login()

        client.post(f'/admin/posts/{post_id}/edit', data={'title': 'Renamed', 'spnote': 'lost'})

        assert stored_note(post_id) == 'keep'

    def test_storage_failure_is_server_error(self, client, auth, make_post, monkeypatch):
        post_id = make_post('Post A')
        auth.login()
        token = edit_token(client, post_id)

        def fail(post_id, meta_key, meta_value):
            raise SQLAlchemyError('database is locked')
        monkeypatch.setattr(PostMeta, 'set_value', staticmethod(fail))

        response = client.post(f'/admin/posts/{post_id}/edit', data={
            'title': 'Post A', 'spnote': 'text', 'spnotes_nonce': token,
        })

        assert response.status_code == 500


# ===================================================================
# Quick and bulk edit
# ===================================================================

class TestQuickEdit:
    def test_inline_save(self, client, auth, make_post, stored_note, issue_token):
        post_id = make_post('Post A')
        auth.login()

        response = client.post(f'/admin/posts/{post_id}/inline-save', data={
            'action': 'inline-save',
            'post_type': 'post',
            'title': 'Post A',
            'spnote': 'quick\nnote',
            'spnotes_nonce': issue_token(BULK_SCOPE),
        })

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['columns']['spnote'] == f'<div id="spnote-{post_id}">quick<br />\nnote</div>'
        assert stored_note(post_id) == 'quick\nnote'

    def test_item_token_not_accepted(self, client, auth, make_post, stored_note, issue_token):
        post_id = make_post('Post A')
        auth.login()

        client.post(f'/admin/posts/{post_id}/inline-save', data={
            'action': 'inline-save',
            'spnote': 'quick',
            'spnotes_nonce': issue_token(note_scope(post_id)),
        })

        assert stored_note(post_id) is None

    def test_missing_post(self, client, auth):
        auth.login()
        response = client.post('/admin/posts/999/inline-save', data={'action': 'inline-save'})

        assert response.status_code == 404
        assert response.get_json()['status'] == 'error'


class TestBulkEdit:
    def test_applies_note(self, client, auth, make_post, stored_note, issue_token):
        first = make_post('Post A')
        second = make_post('Post B', note='old')
        auth.login()

        response = client.post(BULK_URL, data={
            'post_ids[]': [str(first), str(second)],
            'post_type': 'post',
            'spnote': 'Needs <em>review</em>',
            'nonce': issue_token(BULK_SCOPE),
        })

        assert response.get_json() == {
            'status': 'success',
            'data': {'updated': [first, second], 'failed': []},
        }
        assert stored_note(first) == 'Needs review'
        assert stored_note(second) == 'Needs review'

    def test_empty_note_leaves_posts_unchanged(self, client, auth, make_post, stored_note, issue_token):
        post_id = make_post('Post A', note='keep')
        auth.login()

        response = client.post(BULK_URL, data={
            'post_ids[]': [str(post_id)],
            'post_type': 'post',
            'spnote': '',
            'nonce': issue_token(BULK_SCOPE),
        })

        assert response.get_json()['data'] == {'updated': [], 'failed': []}
        assert stored_note(post_id) == 'keep'

    def test_invalid_token_is_ignored(self, client, auth, make_post, stored_note):
        post_id = make_post('Post A')
        auth.login()

        response = client.post(BULK_URL, data={
            'post_ids[]': [str(post_id)], 'post_type': 'post', 'spnote': 'x', 'nonce': 'bogus',
        })

        assert response.get_json() == {'status': 'ignored'}
        assert stored_note(post_id) is None

    def test_reports_failed_items(self, client, auth, make_post, stored_note, issue_token, monkeypatch):
        first = make_post('Post A')
        second = make_post('Post B', note='old')
        auth.login()

        original = PostMeta.set_value

        def flaky(post_id, meta_key, meta_value):
            if post_id == second:
                raise SQLAlchemyError('database is locked')
            return original(post_id, meta_key, meta_value)
        monkeypatch.setattr(PostMeta, 'set_value', staticmethod(flaky))

        response = client.post(BULK_URL, data={
            'post_ids[]': [str(first), str(second)],
            'post_type': 'post',
            'spnote': 'shared',
            'nonce': issue_token(BULK_SCOPE),
        })

        assert response.get_json()['data'] == {'updated': [first], 'failed': [second]}
        assert stored_note(first) == 'shared'
        assert stored_note(second) == 'old'

    def test_skips_posts_that_cannot_have_notes(self, app, client, auth, make_post, stored_note, issue_token):
        post_id = make_post('Post A')
        page_id = make_post('About', post_type='page')
        with app.app_context():
            Option.set_value(SETTINGS_OPTION, {'post_types': ['post']})
        auth.login()

        response = client.post(BULK_URL, data={
            'post_ids[]': [str(post_id), str(page_id), '99999'],
            'post_type': 'post',
            'spnote': 'shared',
            'nonce': issue_token(BULK_SCOPE),
        })

        assert response.get_json()['data'] == {'updated': [post_id], 'failed': [page_id, 99999]}
        assert stored_note(post_id) == 'shared'
        assert stored_note(page_id) is None
        assert stored_note(99999) is None

    def test_reader_cannot_write(self, client, auth, make_post, stored_note, issue_token):
        post_id = make_post('Post A')
        auth.login('reader')

        response = client.post(BULK_URL, data={
            'post_ids[]': [str(post_id)],
            'post_type': 'post',
            'spnote': 'x',
            'nonce': issue_token(BULK_SCOPE, username='reader'),
        })

        assert response.get_json() == {'status': 'ignored'}
        assert stored_note(post_id) is None


# ===================================================================
# Shortcode
# ===================================================================

class TestShortcode:
    def test_renders_current_post_note(self, client, make_post):
        post_id = make_post('Post A', content='Intro [spnote] outro', note='Remember\nthis')

        html = client.get(f'/posts/{post_id}').get_data(as_text=True)

        assert f'<div class="simple-post-notes note note-{post_id}">Remember<br />\nthis</div>' in html
        assert 'Intro ' in html

    def test_explicit_id(self, client, make_post):
        other_id = make_post('Post B', note='from B')
        post_id = make_post('Post A', content=f'[spnote id="{other_id}"]')

        html = client.get(f'/posts/{post_id}').get_data(as_text=True)

        assert f'<div class="simple-post-notes note note-{other_id}">from B</div>' in html

    def test_invalid_id_renders_nothing(self, client, make_post):
        post_id = make_post('Post A', content='[spnote id="abc"]', note='hidden')

        html = client.get(f'/posts/{post_id}').get_data(as_text=True)

        assert 'simple-post-notes' not in html
        assert 'hidden' not in html

    def test_escaped_shortcode_is_literal(self, client, make_post):
        post_id = make_post('Post A', content='Use [[spnote]] in posts')

        html = client.get(f'/posts/{post_id}').get_data(as_text=True)

        assert 'Use [spnote] in posts' in html

    def test_draft_is_not_public(self, client, make_post):
        post_id = make_post('Post A', status=PostStatus.DRAFT)
        assert client.get(f'/posts/{post_id}').status_code == 404


# ===================================================================
# Settings page
# ===================================================================

class TestSettingsPage:
    def test_form_shows_current_settings(self, client, auth):
        auth.login('admin')

        html = client.get(SETTINGS_URL).get_data(as_text=True)

        assert 'Simple Post Notes Settings' in html
        assert 'value="Notes"' in html
        assert 'attachment' not in html

    def test_requires_manage_options(self, client, auth):
        auth.login('editor')
        assert client.get(SETTINGS_URL).status_code == 403

    def test_save(self, app, client, auth):
        auth.login('admin')

        response = client.post(SETTINGS_URL, data={
            'post_types': ['post'],
            'notes_label': '<b>Remarks</b>',
            'notes_placeholder': 'Type here',
        })

        assert response.status_code == 302
        with app.app_context():
            assert Option.get_value(SETTINGS_OPTION) == {
                'post_types': ['post'],
                'notes_label': '<b>Remarks</b>',
                'notes_placeholder': 'Type here',
            }

        post_list = client.get('/admin/posts/?post_type=post').get_data(as_text=True)
        page_list = client.get('/admin/posts/?post_type=page').get_data(as_text=True)
        assert 'Remarks' in post_list
        assert '<b>Remarks</b>' not in post_list
        assert 'column-spnote' not in page_list

    def test_unknown_post_type_is_rejected(self, app, client, auth):
        auth.login('admin')

        response = client.post(SETTINGS_URL, data={'post_types': ['nope'], 'notes_label': 'X'})

        assert response.status_code == 200
        with app.app_context():
            assert Option.get_value(SETTINGS_OPTION)['notes_label'] == 'Notes'


# ===================================================================
# Plugin activation
# ===================================================================

class TestInactivePlugin:
    @pytest.fixture(autouse=True)
    def deactivate(self, app):
        with app.app_context():
            app.extensions['plugin_manager'].deactivate_plugin('post-notes')

    def test_routes_are_gone(self, client, auth):
        auth.login('admin')
        assert client.get(SETTINGS_URL).status_code == 404
        assert client.post(BULK_URL, data={}).status_code == 404

    def test_no_column(self, client, auth, make_post):
        make_post('Post A', note='note')
        auth.login()

        html = client.get('/admin/posts/?post_type=post').get_data(as_text=True)

        assert 'column-spnote' not in html

    def test_shortcode_left_as_text(self, client, make_post):
        post_id = make_post('Post A', content='[spnote]', note='note')

        html = client.get(f'/posts/{post_id}').get_data(as_text=True)

        assert '[spnote]' in html
        assert 'simple-post-notes' not in html

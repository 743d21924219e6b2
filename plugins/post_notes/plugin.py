"""Post Notes plugin implementation"""
from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app, g, abort, jsonify
from flask_login import current_user
from sqlalchemy import and_
from sqlalchemy.orm import aliased
from app.auth.permission import Permission
from app.auth.rbac import permission_required
from app.content.content_type import get_content_types
from app.content.post import Post, PostMeta
from app.core.error_handlers import error_response
import logging

from .access import AccessGuard, DEFAULT_TOKEN_TTL
from .errors import StorageError
from .forms import SettingsForm
from .inputs import BulkEditInput, MetaboxSaveInput, QuickEditInput, ShortcodeInput
from .repository import NoteRepository, NOTE_META_KEY
from .service import NoteService
from .settings import Settings, SettingsStore
from .storage import MetaStore, OptionStore

logger = logging.getLogger(__name__)

PLUGIN_SLUG = 'post-notes'
COLUMN_KEY = 'spnote'
SHORTCODE_TAG = 'spnote'

class PostNotesPlugin:
    """Post Notes plugin class"""

    def __init__(self, config=None):
        """Initialize the plugin with configuration"""
        self.config = config or {}
        self.blueprint = self._create_blueprint()

        # Get configuration values with defaults
        self.columns_display = self.config.get('columns_display', True)
        self.hidden_column_types = set(self.config.get('hidden_column_types', []))
        self.unsortable_types = set(self.config.get('unsortable_types', []))

    # Request-scoped services

    def get_settings_store(self):
        """Settings store for the current request"""
        if 'post_notes_settings' not in g:
            g.post_notes_settings = SettingsStore(OptionStore())
        return g.post_notes_settings

    def get_note_service(self):
        """Note service for the current request, settings loaded once"""
        if 'post_notes_service' not in g:
            guard = AccessGuard(
                current_app.config['SECRET_KEY'],
                current_user._get_current_object(),
                ttl=current_app.config.get('POST_NOTES_TOKEN_TTL', DEFAULT_TOKEN_TTL)
            )
            g.post_notes_service = NoteService(
                NoteRepository(MetaStore()),
                self.get_settings_store().load(),
                guard
            )
        return g.post_notes_service

    def _create_blueprint(self):
        """Create a Flask blueprint for the plugin"""
        bp = Blueprint(
            'post_notes',
            __name__,
            template_folder='templates',
            url_prefix='/plugins/post-notes'
        )

        @bp.before_request
        def require_active():
            """Plugin routes only answer while the plugin is active"""
            manager = current_app.extensions.get('plugin_manager')
            if manager is None or not manager.is_active(PLUGIN_SLUG):
                abort(404)

        @bp.app_errorhandler(StorageError)
        def storage_error(error):
            """Note storage outages surface as a generic failure"""
            logger.error(f"Post Notes storage error: {str(error)}")
            return error_response(500, 'Internal server error')

        @bp.route('/bulk-edit', methods=['POST'])
        def bulk_edit():
            """Apply one note to the posts selected in the list table"""
            data = BulkEditInput.from_form(request.form)
            result = self.get_note_service().save_bulk_edit_note(data)

            if result is None:
                return jsonify({'status': 'ignored'})

            return jsonify({
                'status': 'success',
                'data': result.to_dict()
            })

        @bp.route('/settings', methods=['GET', 'POST'])
        @permission_required(Permission.MANAGE_OPTIONS)
        def settings():
            """Post Notes settings page"""
            store = self.get_settings_store()
            current = store.load()

            form = SettingsForm()
            form.post_types.choices = [
                (content_type.name, content_type.label)
                for content_type in get_content_types().get_post_types(public=True)
                if content_type.name != 'attachment'
            ]

            if form.validate_on_submit():
                store.save(Settings(
                    enabled_types=form.post_types.data,
                    label=form.notes_label.data,
                    placeholder=form.notes_placeholder.data
                ))
                g.pop('post_notes_service', None)

                flash('Settings saved.', 'success')
                return redirect(url_for('post_notes.settings'))

            if request.method == 'GET':
                form.post_types.data = current.enabled_types
                form.notes_label.data = current.display_label
                form.notes_placeholder.data = current.display_placeholder

            return render_template(
                'post_notes/settings.html',
                title='Simple Post Notes Settings',
                form=form
            )

        return bp

    def get_blueprint(self):
        """Get the plugin's blueprint"""
        return self.blueprint

    def get_menu_items(self):
        """Get menu items for the sidebar"""
        return [
            {
                'name': 'Post Notes',
                'url': '/plugins/post-notes/settings',
                'icon': 'note',
                'permission': Permission.MANAGE_OPTIONS
            }
        ]

    # List table hooks

    def _shows_column(self, post_type):
        if not self.columns_display or post_type in self.hidden_column_types:
            return False
        return self.get_note_service().settings.is_enabled(post_type)

    def get_list_columns(self, post_type, columns):
        """Insert the note column right after the title column"""
        if not self._shows_column(post_type):
            return columns

        column = (COLUMN_KEY, self.get_note_service().settings.display_label)
        keys = [key for key, _ in columns]
        position = keys.index('title') + 1 if 'title' in keys else len(columns)
        return columns[:position] + [column] + columns[position:]

    def get_sortable_columns(self, post_type, sortable):
        """Register the note column as sortable"""
        if post_type in self.unsortable_types:
            return sortable
        if not self.get_note_service().settings.is_enabled(post_type):
            return sortable
        return dict(sortable, **{COLUMN_KEY: COLUMN_KEY})

    def apply_orderby(self, query, orderby, order='asc'):
        """Order the list query by note text when sorting on the note column"""
        if orderby != COLUMN_KEY:
            return query

        note = aliased(PostMeta)
        query = query.outerjoin(note, and_(note.post_id == Post.id, note.meta_key == NOTE_META_KEY))
        value = note.meta_value.desc() if order == 'desc' else note.meta_value.asc()
        return query.order_by(value, Post.id)

    def render_list_column(self, column, post):
        """Output the note column content for one row"""
        if column != COLUMN_KEY:
            return None
        return self.get_note_service().column_html(post.id)

    def get_inline_edit_fields(self, post_type):
        """Fields added to the quick/bulk edit row"""
        if not self._shows_column(post_type):
            return []
        return [self.get_note_service().quick_edit_html(post_type)]

    # Edit screen hooks

    def get_meta_boxes(self, post):
        """Note meta box for the post edit screen"""
        service = self.get_note_service()
        if not service.settings.is_enabled(post.post_type):
            return []

        return [{
            'id': 'spnotes',
            'title': service.settings.display_label,
            'context': 'side',
            'html': service.metabox_html(post.id)
        }]

    def save_post(self, post, form):
        """Save the note sent with a post edit or quick edit submission"""
        service = self.get_note_service()

        if form.get('action') == 'inline-save':
            return service.save_quick_edit_note(QuickEditInput.from_form(post.id, post.post_type, form))

        return service.save_metabox_note(MetaboxSaveInput.from_form(post.id, post.post_type, form))

    # Front end hooks

    def get_shortcodes(self):
        """Shortcodes provided by the plugin"""
        return {SHORTCODE_TAG: self.render_shortcode}

    def render_shortcode(self, attrs):
        """Render ``[spnote]``, defaulting to the post being displayed"""
        current_post = g.get('current_post')
        ambient_id = current_post.id if current_post is not None else None
        return self.get_note_service().shortcode_html(ShortcodeInput.from_attrs(attrs), ambient_id)

    # Lifecycle

    def install(self):
        """Create the default settings on activation"""
        self.get_settings_store().install()
        logger.info("Post Notes plugin installed successfully")
        return True

    def uninstall(self):
        """Remove the plugin settings"""
        self.get_settings_store().uninstall()
        g.pop('post_notes_settings', None)
        g.pop('post_notes_service', None)
        logger.info("Post Notes plugin uninstalled successfully")
        return True

"""Note entry points

``NoteService`` exposes the five places notes are read or written (metabox
save, quick edit save, bulk edit save, list column, shortcode) plus the edit
fields. It is built once per request with the settings already loaded.
"""
import logging

from markupsafe import Markup

from .access import BULK_SCOPE, note_scope
from .errors import AuthorizationError, ValidationError
from .presenter import (
    render_column,
    render_metabox_field,
    render_quick_edit_field,
    render_shortcode,
    render_token_field,
    resolve_item_id,
)
from .repository import SetManyResult
from .sanitizer import sanitize

logger = logging.getLogger(__name__)


class NoteService:
    """Note reads, writes and rendering for one request"""

    def __init__(self, repository, settings, guard):
        self.repository = repository
        self.settings = settings
        self.guard = guard

    def _authorize(self, scope, token):
        try:
            self.guard.authorize(scope, token)
        except AuthorizationError as e:
            logger.info(f"Note write rejected at {e.stage.value}: {e.message}")
            return False
        return True

    # Writes

    def save_metabox_note(self, data):
        """Save the note sent with the post edit form

        Returns the stored text, or None when nothing was written.
        """
        if data.token is None:
            return None

        if not self.settings.is_enabled(data.post_type):
            logger.debug(f"Notes are not enabled for post type {data.post_type}")
            return None

        if not self._authorize(note_scope(data.item_id), data.token):
            return None

        if data.text is None:
            return None

        text = sanitize(data.text)
        self.repository.set(data.item_id, text)
        return text

    def save_quick_edit_note(self, data):
        """Save the note sent from the inline edit row

        Returns the stored text, or None when nothing was written.
        """
        if not data.is_inline_save:
            return None

        if not self.settings.is_enabled(data.post_type):
            logger.debug(f"Notes are not enabled for post type {data.post_type}")
            return None

        if not self._authorize(BULK_SCOPE, data.token):
            return None

        if data.text is None:
            return None

        text = sanitize(data.text)
        self.repository.set(data.item_id, text)
        return text

    def save_bulk_edit_note(self, data):
        """Apply one note to every selected post

        Returns a SetManyResult, or None when the request was rejected. An
        empty note leaves the selected posts unchanged. Posts that do not
        exist or whose type is not enabled are reported as failed.
        """
        if not self.settings.is_enabled(data.post_type):
            logger.debug(f"Notes are not enabled for post type {data.post_type}")
            return None

        if not self._authorize(BULK_SCOPE, data.token):
            return None

        text = sanitize(data.text)
        if not data.item_ids or not text:
            return SetManyResult()

        item_types = self.repository.get_types(data.item_ids)
        writable = [
            item_id for item_id in data.item_ids
            if self.settings.is_enabled(item_types.get(item_id))
        ]

        result = self.repository.set_many(writable, text)
        for item_id in data.item_ids:
            if item_id not in item_types:
                result.failed[item_id] = ValidationError('post_ids', f"post {item_id} does not exist")
            elif item_id not in writable:
                result.failed[item_id] = ValidationError(
                    'post_ids', f"notes are not enabled for post type {item_types[item_id]}"
                )

        if len(writable) < len(data.item_ids):
            logger.warning(f"Bulk note skipped {len(data.item_ids) - len(writable)} posts that cannot have notes")
        return result

    # Reads

    def column_html(self, item_id):
        return render_column(self.repository.get(item_id), item_id)

    def metabox_html(self, item_id):
        """Token field plus the note textarea; the textarea needs edit permission"""
        token_field = render_token_field(self.guard.issue(note_scope(item_id)))
        if not self.guard.can_edit():
            return token_field

        return token_field + render_metabox_field(
            self.repository.get(item_id),
            self.settings.display_placeholder
        )

    def quick_edit_html(self, post_type):
        if not self.settings.is_enabled(post_type):
            return Markup('')

        return render_quick_edit_field(
            self.settings.display_label,
            self.settings.display_placeholder,
            self.guard.issue(BULK_SCOPE)
        )

    def shortcode_html(self, data, ambient_item_id=None):
        """Render ``[spnote]`` for an explicit id or the current item"""
        item_id = resolve_item_id(data.item_id, ambient_item_id)
        if item_id is None:
            return render_shortcode('', None)

        return render_shortcode(self.repository.get(item_id), item_id)

"""Typed inputs for the note entry points

The host hands over form data as a werkzeug ``MultiDict`` (or any mapping
with ``get``/``getlist``); these classes pull out the fields each entry point
needs before anything reaches the note service.
"""
import logging

from app.content.shortcodes import shortcode_atts

logger = logging.getLogger(__name__)

NOTE_FIELD = 'spnote'
TOKEN_FIELD = 'spnotes_nonce'
BULK_TOKEN_FIELD = 'nonce'
INLINE_SAVE_ACTION = 'inline-save'


def parse_item_id(value):
    """Parse a post ID from a form value, None if it is not a positive integer"""
    try:
        item_id = int(value)
    except (TypeError, ValueError):
        return None
    return item_id if item_id > 0 else None


def _getlist(form, key):
    if hasattr(form, 'getlist'):
        return form.getlist(key)
    value = form.get(key)
    if value is None:
        return []
    return list(value) if isinstance(value, (list, tuple)) else [value]


class MetaboxSaveInput:
    """Note submitted with the post edit form"""

    def __init__(self, item_id, post_type, text, token):
        self.item_id = item_id
        self.post_type = post_type
        self.text = text
        self.token = token

    @classmethod
    def from_form(cls, item_id, post_type, form):
        return cls(
            item_id=item_id,
            post_type=post_type,
            text=form.get(NOTE_FIELD),
            token=form.get(TOKEN_FIELD),
        )


class QuickEditInput:
    """Note submitted from the inline (quick) edit row"""

    def __init__(self, item_id, post_type, text, token, action=None):
        self.item_id = item_id
        self.post_type = post_type
        self.text = text
        self.token = token
        self.action = action

    @property
    def is_inline_save(self):
        return self.action == INLINE_SAVE_ACTION

    @classmethod
    def from_form(cls, item_id, post_type, form):
        return cls(
            item_id=item_id,
            post_type=post_type or form.get('post_type'),
            text=form.get(NOTE_FIELD),
            token=form.get(TOKEN_FIELD),
            action=form.get('action'),
        )


class BulkEditInput:
    """Note applied to several posts from the bulk edit row"""

    def __init__(self, item_ids, post_type, text, token):
        self.item_ids = item_ids
        self.post_type = post_type
        self.text = text
        self.token = token

    @classmethod
    def from_form(cls, form):
        raw_ids = _getlist(form, 'post_ids[]') or _getlist(form, 'post_ids')

        item_ids = []
        for value in raw_ids:
            item_id = parse_item_id(value)
            if item_id is None:
                logger.warning(f"Ignoring invalid post id in bulk edit: {value!r}")
                continue
            if item_id not in item_ids:
                item_ids.append(item_id)

        return cls(
            item_ids=item_ids,
            post_type=form.get('post_type'),
            text=form.get(NOTE_FIELD),
            token=form.get(BULK_TOKEN_FIELD),
        )


class ShortcodeInput:
    """Attributes of a ``[spnote]`` shortcode"""

    def __init__(self, item_id=None):
        self.item_id = item_id

    @classmethod
    def from_attrs(cls, attrs):
        return cls(item_id=shortcode_atts({'id': None}, attrs)['id'])

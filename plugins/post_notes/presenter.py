"""HTML fragments for notes

Each display context escapes differently:

* list column and edit fields escape the stored text;
* the shortcode trusts storage, which only ever holds sanitized text.
"""
from markupsafe import Markup, escape

LINE_BREAK = Markup('<br />\n')


def nl2br(text, escape_text=True):
    """Join the lines of ``text`` with line-break markup"""
    lines = str(text).split('\n')
    if escape_text:
        return LINE_BREAK.join(escape(line) for line in lines)
    return LINE_BREAK.join(Markup(line) for line in lines)


def resolve_item_id(explicit=None, ambient=None):
    """Pick the item a shortcode refers to

    An explicit id wins over the item being rendered. Returns None when
    neither is a usable positive integer id.
    """
    for candidate in (explicit, ambient):
        if candidate is None or candidate == '':
            continue
        try:
            item_id = int(candidate)
        except (TypeError, ValueError):
            return None
        return item_id if item_id > 0 else None
    return None


def render_column(note, item_id=None):
    """List table cell content; empty when there is no note"""
    if not note:
        return Markup('')

    body = nl2br(note)
    if item_id is None:
        return body
    return Markup('<div id="spnote-{}">{}</div>').format(item_id, body)


def render_metabox_field(note, placeholder=''):
    """Editable note field for the post edit screen"""
    return Markup(
        '<textarea style="display: block; width: 100%;" rows="5" name="spnote" '
        'placeholder="{}">{}</textarea>'
    ).format(placeholder or '', note or '')


def render_token_field(token, name='spnotes_nonce'):
    """Hidden input carrying a note write token"""
    return Markup('<input type="hidden" name="{}" value="{}" />').format(name, token)


def render_quick_edit_field(label, placeholder, token):
    """Note field for the quick/bulk edit row of the list table"""
    return Markup(
        '<fieldset class="inline-edit-col-right">'
        '{}'
        '<div class="inline-edit-group">'
        '<label>'
        '<span class="title">{}</span>'
        '<textarea name="spnote" placeholder="{}"></textarea>'
        '</label>'
        '</div>'
        '</fieldset>'
    ).format(render_token_field(token), label, placeholder or '')


def render_shortcode(note, item_id):
    """Front-end note container, styled per item"""
    if item_id is None:
        return Markup('')

    return Markup('<div class="simple-post-notes note note-{}">{}</div>').format(
        int(item_id), nl2br(note or '', escape_text=False)
    )

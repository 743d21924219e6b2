"""Plain-text sanitization for note text and settings strings

Everything that reaches note storage, and every settings string before it is
displayed, goes through one of these functions. Both return text without any
markup and are idempotent.
"""
import html
import re

SCRIPT_STYLE_RE = re.compile(r'<(script|style)[^>]*?>.*?</\1\s*>', re.IGNORECASE | re.DOTALL)
COMMENT_RE = re.compile(r'<!--.*?(-->|$)', re.DOTALL)
TAG_RE = re.compile(r'<[a-zA-Z/!?][^<>]*>')
WHITESPACE_RE = re.compile(r'\s+')


def _to_text(raw):
    if raw is None:
        return ''
    if isinstance(raw, bytes):
        return raw.decode('utf-8', errors='replace')
    return str(raw)


def _strip_markup(text):
    text = SCRIPT_STYLE_RE.sub('', text)
    text = COMMENT_RE.sub('', text)
    text = TAG_RE.sub('', text)
    return text.replace('<', '').replace('>', '')


def _clean_once(text):
    text = html.unescape(text)
    text = _strip_markup(text)
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    # Trim each line's trailing blanks, then the whole value
    text = '\n'.join(line.rstrip(' \t\x0b\x0c') for line in text.split('\n'))
    return text.strip()


def sanitize(raw):
    """Turn raw input into a plain-text note

    Entities are decoded, tags (and script/style bodies) removed and the
    result trimmed. Internal newlines are kept.
    """
    text = _to_text(raw)
    # Decoding can expose new entities or tags (e.g. "&amp;lt;b&amp;gt;"),
    # so clean until nothing changes.
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def sanitize_line(raw):
    """Sanitize a single-line settings value such as the notes label"""
    return WHITESPACE_RE.sub(' ', sanitize(raw)).strip()

"""Tests for note and settings text sanitization."""

import pytest

from post_notes.sanitizer import sanitize, sanitize_line


class TestSanitize:
    def test_none_is_empty(self):
        assert sanitize(None) == ''

    def test_plain_text_is_unchanged(self):
        assert sanitize('Call the author back') == 'Call the author back'

    def test_strips_tags(self):
        assert sanitize('<b>bold</b> and <a href="#">link</a>') == 'bold and link'

    def test_drops_script_and_style_bodies(self):
        assert sanitize('<script>alert(1)</script>hi<style>p {}</style>') == 'hi'

    def test_drops_comments(self):
        assert sanitize('before<!-- hidden -->after') == 'beforeafter'

    def test_decodes_entities(self):
        assert sanitize('Fish &amp; chips') == 'Fish & chips'

    def test_encoded_tags_do_not_survive(self):
        assert sanitize('&lt;b&gt;bold&lt;/b&gt;') == 'bold'

    def test_stray_angle_brackets_are_removed(self):
        result = sanitize('a < b > c')
        assert '<' not in result
        assert '>' not in result
        assert result.startswith('a')
        assert result.endswith('c')

    def test_keeps_internal_newlines(self):
        assert sanitize('first line\nsecond line') == 'first line\nsecond line'

    def test_normalizes_line_endings_and_trims(self):
        assert sanitize('  first  \r\nsecond\rthird\n\n') == 'first\nsecond\nthird'

    def test_decodes_bytes(self):
        assert sanitize('café'.encode('utf-8')) == 'café'

    @pytest.mark.parametrize('raw', [
        '<p>Hello</p>\n<p>World</p>',
        '&amp;lt;script&amp;gt;x',
        '  padded  ',
        'a < b',
        '<<b>>nested<</b>>',
        'line\r\n\r\nafter blank',
    ])
    def test_is_idempotent(self, raw):
        once = sanitize(raw)
        assert sanitize(once) == once
        assert '<' not in once and '>' not in once


class TestSanitizeLine:
    def test_collapses_whitespace(self):
        assert sanitize_line('  Post\n  Notes\t ') == 'Post Notes'

    def test_strips_markup(self):
        assert sanitize_line('<em>Remarks</em>') == 'Remarks'

    def test_empty(self):
        assert sanitize_line('') == ''

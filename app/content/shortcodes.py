"""Shortcode expansion for post content

Plugins register handlers for tags such as ``[spnote id="5"]``; the public
post view expands them while rendering the post body.
"""
from markupsafe import Markup, escape
import logging
import re

logger = logging.getLogger(__name__)

SHORTCODE_RE = re.compile(r'\[(\[?)([\w-]+)((?:\s[^\]]*)?)\](\]?)')
ATTR_RE = re.compile(r'([\w-]+)\s*=\s*"([^"]*)"|([\w-]+)\s*=\s*\'([^\']*)\'|([\w-]+)\s*=\s*([^\s\'"]+)')

def parse_attrs(text):
    """Parse shortcode attributes into a dict"""
    attrs = {}
    for match in ATTR_RE.finditer(text or ''):
        if match.group(1):
            attrs[match.group(1).lower()] = match.group(2)
        elif match.group(3):
            attrs[match.group(3).lower()] = match.group(4)
        elif match.group(5):
            attrs[match.group(5).lower()] = match.group(6)
    return attrs

def shortcode_atts(defaults, attrs):
    """Combine user attributes with known attributes and fill in defaults"""
    attrs = attrs or {}
    return {key: attrs.get(key, default) for key, default in defaults.items()}

class ShortcodeRegistry:
    """Maps shortcode tags to handler callables"""

    def __init__(self):
        self.handlers = {}

    def add(self, tag, handler):
        """Register a handler called as ``handler(attrs)``"""
        self.handlers[tag] = handler
        logger.debug(f"Shortcode registered: [{tag}]")

    def expand(self, content):
        """Escape post content and replace registered shortcodes

        Unknown tags are left as text. ``[[tag]]`` renders a literal ``[tag]``.
        """
        parts = []
        position = 0

        for match in SHORTCODE_RE.finditer(content or ''):
            parts.append(escape(content[position:match.start()]))
            position = match.end()

            opening, tag, attr_text, closing = match.groups()
            handler = self.handlers.get(tag)

            if handler is None:
                parts.append(escape(match.group(0)))
            elif opening and closing:
                parts.append(escape(match.group(0)[1:-1]))
            else:
                try:
                    parts.append(Markup(handler(parse_attrs(attr_text))))
                except Exception as e:
                    logger.error(f"Error rendering shortcode [{tag}]: {str(e)}")
                    raise

        parts.append(escape((content or '')[position:]))
        return Markup('').join(parts)

"""Registry of content types known to the site"""
from flask import current_app
import logging

logger = logging.getLogger(__name__)

class ContentType:
    """A registered content type such as 'post' or 'page'"""

    def __init__(self, name, label, public=True):
        self.name = name
        self.label = label
        self.public = public

    def __repr__(self):
        return f'<ContentType {self.name}>'

class ContentTypeRegistry:
    """Content types available to the admin screens and plugins"""

    DEFAULT_TYPES = (
        ('post', 'Posts', True),
        ('page', 'Pages', True),
        ('attachment', 'Media', True),
    )

    def __init__(self, app=None):
        self.types = {}
        for name, label, public in self.DEFAULT_TYPES:
            self.register(name, label, public)

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Register configured custom types and attach to the app"""
        for name, options in app.config.get('CUSTOM_POST_TYPES', {}).items():
            self.register(name, options.get('label', name.title()), options.get('public', True))
        app.extensions['content_types'] = self

    def register(self, name, label, public=True):
        """Register or replace a content type"""
        self.types[name] = ContentType(name, label, public)
        logger.debug(f"Content type registered: {name}")
        return self.types[name]

    def get(self, name):
        return self.types.get(name)

    def get_post_types(self, public=None):
        """Get registered types, optionally filtered by visibility"""
        return [
            content_type for content_type in self.types.values()
            if public is None or content_type.public == public
        ]

def get_content_types():
    """Get the registry of the current app"""
    return current_app.extensions['content_types']

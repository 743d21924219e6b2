"""Plugin settings and their persistence"""
import logging

from .errors import ValidationError
from .sanitizer import sanitize_line

logger = logging.getLogger(__name__)

SETTINGS_OPTION = 'spnotes_settings'
DEFAULT_POST_TYPES = ('post', 'page')
DEFAULT_LABEL = 'Notes'
DEFAULT_PLACEHOLDER = ''


class Settings:
    """Post Notes settings value

    Strings are kept as stored; use ``display_label`` and
    ``display_placeholder`` when showing them.
    """

    def __init__(self, enabled_types=None, label=DEFAULT_LABEL, placeholder=DEFAULT_PLACEHOLDER):
        self.enabled_types = list(enabled_types) if enabled_types else list(DEFAULT_POST_TYPES)
        self.label = label
        self.placeholder = placeholder

    def __repr__(self):
        return f'<Settings types={self.enabled_types} label={self.label!r}>'

    def __eq__(self, other):
        if not isinstance(other, Settings):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @property
    def display_label(self):
        return sanitize_line(self.label)

    @property
    def display_placeholder(self):
        return sanitize_line(self.placeholder)

    def is_enabled(self, post_type):
        """Check if notes are enabled for a content type"""
        return post_type in self.enabled_types

    def to_dict(self):
        """Persisted layout of the settings option"""
        return {
            'post_types': list(self.enabled_types),
            'notes_label': self.label,
            'notes_placeholder': self.placeholder,
        }

    @classmethod
    def defaults(cls):
        return cls()


def coerce_post_types(value, field='post_types'):
    """Coerce a stored or submitted post type list

    Returns an ordered list of unique names, empty if nothing was given.
    """
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValidationError(field, f"expected a list, got {type(value).__name__}")

    post_types = []
    for name in value:
        if not isinstance(name, str):
            raise ValidationError(field, f"expected strings, got {type(name).__name__}")
        name = name.strip()
        if name and name not in post_types:
            post_types.append(name)
    return post_types


def coerce_text(value, field='text'):
    """Coerce a stored or submitted text field, empty if missing"""
    if value is None:
        return ''
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValidationError(field, f"expected a string, got {type(value).__name__}")
    return str(value)


class SettingsStore:
    """Loads and saves Post Notes settings through an option store

    The store must provide ``get_option``, ``set_option``, ``add_option`` and
    ``delete_option``. One instance lives for one request: the first
    ``load()`` reads storage, later calls return the cached value.
    """

    def __init__(self, options, option_name=SETTINGS_OPTION):
        self.options = options
        self.option_name = option_name
        self._settings = None

    def load(self):
        """Get the settings, applying defaults to missing or empty fields"""
        if self._settings is None:
            raw = self.options.get_option(self.option_name)
            if raw is not None and not isinstance(raw, dict):
                logger.warning(f"Ignoring malformed {self.option_name} option of type {type(raw).__name__}")
                raw = None
            self._settings = self._from_raw(raw or {})
        return self._settings

    def _from_raw(self, raw):
        return Settings(
            enabled_types=self._read_field(raw, 'post_types', coerce_post_types),
            label=self._read_field(raw, 'notes_label', coerce_text) or DEFAULT_LABEL,
            placeholder=self._read_field(raw, 'notes_placeholder', coerce_text) or DEFAULT_PLACEHOLDER,
        )

    def _read_field(self, raw, field, coerce):
        try:
            return coerce(raw.get(field), field)
        except ValidationError as e:
            logger.warning(f"Invalid Post Notes setting, using default: {e}")
            return None

    def save(self, candidate):
        """Persist settings after type coercion

        Values are stored as submitted; sanitizing happens when they are
        displayed.
        """
        raw = {
            'post_types': coerce_post_types(candidate.enabled_types),
            'notes_label': coerce_text(candidate.label, 'notes_label'),
            'notes_placeholder': coerce_text(candidate.placeholder, 'notes_placeholder'),
        }
        self.options.set_option(self.option_name, raw)
        logger.info(f"Post Notes settings saved for post types {raw['post_types']}")

        self._settings = self._from_raw(raw)
        return self._settings

    def install(self):
        """Store the default settings unless settings already exist"""
        created = self.options.add_option(self.option_name, Settings.defaults().to_dict())
        if created:
            logger.info(f"Created default {self.option_name} option")
        return created

    def uninstall(self):
        """Remove the stored settings"""
        self.options.delete_option(self.option_name)
        self._settings = None
        logger.info(f"Deleted {self.option_name} option")

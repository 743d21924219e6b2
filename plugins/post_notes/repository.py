"""Note storage keyed by post ID"""
import logging

from .errors import StorageError

logger = logging.getLogger(__name__)

NOTE_META_KEY = '_spnote'


class SetManyResult:
    """Per-item outcome of a bulk note write"""

    def __init__(self):
        self.succeeded = []
        self.failed = {}

    def __repr__(self):
        return f'<SetManyResult ok={len(self.succeeded)} failed={len(self.failed)}>'

    @property
    def ok(self):
        """True when no item failed"""
        return not self.failed

    def to_dict(self):
        """Serializable form; failure details stay server side"""
        return {
            'updated': list(self.succeeded),
            'failed': list(self.failed),
        }


class NoteRepository:
    """Reads and writes note text through a meta store

    The store must provide ``get_meta(item_id, key)``,
    ``set_meta(item_id, key, value)`` and ``get_item_types(item_ids)``. Text
    is stored exactly as given; callers sanitize before writing.
    """

    def __init__(self, store, meta_key=NOTE_META_KEY):
        self.store = store
        self.meta_key = meta_key

    def get(self, item_id):
        """Get the note for an item, or an empty string"""
        value = self.store.get_meta(item_id, self.meta_key)
        if value is None:
            return ''
        return value if isinstance(value, str) else str(value)

    def set(self, item_id, text):
        """Store the note for an item, replacing any previous value"""
        self.store.set_meta(item_id, self.meta_key, text)
        logger.debug(f"Note saved for item {item_id}")

    def get_types(self, item_ids):
        """Content type of each existing item; unknown IDs are left out"""
        return self.store.get_item_types(item_ids)

    def set_many(self, item_ids, text):
        """Store the same note on several items

        Items are written one by one; a storage failure on one item is
        recorded and the loop carries on with the next.
        """
        result = SetManyResult()

        for item_id in item_ids:
            try:
                self.set(item_id, text)
            except StorageError as e:
                logger.error(f"Error saving note for item {item_id}: {str(e)}")
                result.failed[item_id] = e
            else:
                result.succeeded.append(item_id)

        logger.info(f"Bulk note update: {len(result.succeeded)} saved, {len(result.failed)} failed")
        return result

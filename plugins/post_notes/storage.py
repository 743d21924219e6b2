"""Meta and option stores backed by the site database"""
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.content.option import Option
from app.content.post import Post, PostMeta
from .errors import StorageError

logger = logging.getLogger(__name__)


class MetaStore:
    """Post meta access for NoteRepository"""

    def get_meta(self, item_id, key):
        try:
            return PostMeta.get_value(item_id, key)
        except SQLAlchemyError as e:
            logger.error(f"Error reading meta {key} for post {item_id}: {str(e)}")
            raise StorageError(f"Could not read {key} for post {item_id}") from e

    def set_meta(self, item_id, key, value):
        try:
            PostMeta.set_value(item_id, key, value)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not save {key} for post {item_id}") from e

    def get_item_types(self, item_ids):
        try:
            return Post.get_types(list(item_ids))
        except SQLAlchemyError as e:
            logger.error(f"Error reading post types: {str(e)}")
            raise StorageError("Could not read post types") from e


class OptionStore:
    """Option access for SettingsStore"""

    def get_option(self, name):
        try:
            return Option.get_value(name)
        except SQLAlchemyError as e:
            logger.error(f"Error reading option {name}: {str(e)}")
            raise StorageError(f"Could not read option {name}") from e

    def set_option(self, name, value):
        try:
            Option.set_value(name, value)
        except SQLAlchemyError as e:
            logger.error(f"Error saving option {name}: {str(e)}")
            raise StorageError(f"Could not save option {name}") from e

    def add_option(self, name, value):
        try:
            return Option.add_value(name, value)
        except SQLAlchemyError as e:
            logger.error(f"Error adding option {name}: {str(e)}")
            raise StorageError(f"Could not add option {name}") from e

    def delete_option(self, name):
        try:
            return Option.delete_value(name)
        except SQLAlchemyError as e:
            logger.error(f"Error deleting option {name}: {str(e)}")
            raise StorageError(f"Could not delete option {name}") from e

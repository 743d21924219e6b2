from app import db
from app.core.db import BaseModel, Database, JSONType
import logging

logger = logging.getLogger(__name__)

class Option(BaseModel):
    """Site-wide named setting"""
    __tablename__ = 'options'

    name = db.Column(db.String(191), nullable=False, unique=True, index=True)
    value = db.Column(JSONType, nullable=True)

    def __repr__(self):
        return f'<Option {self.name}>'

    @staticmethod
    def get_value(name, default=None):
        """Get an option value"""
        option = Option.query.filter_by(name=name).first()
        return option.value if option else default

    @staticmethod
    def set_value(name, value):
        """Create or replace an option"""
        with Database.get_session() as session:
            option = Option.query.filter_by(name=name).first()
            if option is None:
                option = Option(name=name)
                session.add(option)
            option.value = value
        logger.debug(f"Option saved: {name}")
        return option

    @staticmethod
    def add_value(name, value):
        """Create an option only if it does not exist yet"""
        if Option.query.filter_by(name=name).first() is not None:
            return False

        with Database.get_session() as session:
            session.add(Option(name=name, value=value))
        logger.info(f"Option added: {name}")
        return True

    @staticmethod
    def delete_value(name):
        """Delete an option"""
        with Database.get_session():
            deleted = Option.query.filter_by(name=name).delete()
        if deleted:
            logger.info(f"Option deleted: {name}")
        return bool(deleted)

"""Plugin model and plugin registration"""
from app import db
from app.core.db import BaseModel, JSONType
from enum import Enum
import importlib
import logging

logger = logging.getLogger(__name__)

class PluginStatus(Enum):
    """Plugin status enumeration"""
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    ERROR = 'error'

def load_entry_point(entry_point):
    """Import the object named by a 'module:attribute' entry point"""
    module_path, _, attr = entry_point.partition(':')
    module = importlib.import_module(module_path)
    return getattr(module, attr or 'plugin')

class Plugin(BaseModel):
    """Plugin model for registering available plugins"""
    __tablename__ = 'plugins'

    # Plugin identification
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(100), nullable=False, unique=True, index=True)
    version = db.Column(db.String(20), nullable=False)

    # Plugin details
    description = db.Column(db.Text, nullable=True)
    author = db.Column(db.String(100), nullable=True)
    homepage = db.Column(db.String(255), nullable=True)

    # Plugin configuration
    entry_point = db.Column(db.String(255), nullable=False)
    config_schema = db.Column(JSONType, default=dict)

    # Plugin status
    status = db.Column(db.String(20), default=PluginStatus.INACTIVE.value)
    is_system = db.Column(db.Boolean, default=False)

    def __repr__(self):
        return f'<Plugin {self.name} v{self.version}>'

    @property
    def is_active(self):
        return self.status == PluginStatus.ACTIVE.value

    def set_status(self, status):
        """Update and commit the plugin status"""
        self.status = status.value
        try:
            db.session.commit()
            logger.info(f"Plugin {self.slug} is now {self.status}")
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating status of plugin {self.slug}: {str(e)}")
            raise

    @staticmethod
    def register_plugin(name, slug, version, entry_point, description=None,
                        author=None, homepage=None, config_schema=None,
                        is_system=False):
        """Register a new plugin or refresh an existing registration"""
        plugin = Plugin.query.filter_by(slug=slug).first()
        if plugin is None:
            plugin = Plugin(slug=slug, status=PluginStatus.INACTIVE.value)
            db.session.add(plugin)
            action = 'Registered'
        else:
            action = 'Updated'

        plugin.name = name
        plugin.version = version
        plugin.description = description
        plugin.author = author
        plugin.homepage = homepage
        plugin.entry_point = entry_point
        plugin.config_schema = config_schema or {}
        plugin.is_system = is_system

        try:
            db.session.commit()
            logger.info(f"{action} plugin: {name} v{version}")
            return plugin
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error registering plugin {name}: {str(e)}")
            raise

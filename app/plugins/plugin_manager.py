"""Plugin discovery, registration, and lifecycle management"""
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app.plugins.plugin import Plugin, PluginStatus, load_entry_point
import importlib
import logging
import os
import sys
import traceback

logger = logging.getLogger(__name__)

class PluginManager:
    """Manages plugin discovery, registration, and lifecycle

    Every plugin package found in the plugins directory is imported and
    instantiated when the app is created, so its blueprint is registered
    before the first request. The ``plugins`` table decides which of them
    are active.
    """

    def __init__(self, app=None):
        """Initialize the plugin manager"""
        self.metadata = {}
        self.instances = {}

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Load plugin packages and register their blueprints"""
        plugins_dir = app.config.get('PLUGINS_DIR')
        plugin_config = app.config.get('PLUGIN_CONFIG', {})

        for metadata in self._scan(plugins_dir):
            slug = metadata['slug']
            try:
                plugin_class = load_entry_point(metadata['entry_point'])
                instance = plugin_class(plugin_config.get(slug))
            except Exception as e:
                app.logger.error(f"Error loading plugin {slug}: {str(e)}")
                app.logger.error(traceback.format_exc())
                continue

            self.metadata[slug] = metadata
            self.instances[slug] = instance

            if hasattr(instance, 'get_blueprint'):
                blueprint = instance.get_blueprint()
                if blueprint and blueprint.name not in app.blueprints:
                    app.register_blueprint(blueprint)
                    app.logger.info(f"Registered blueprint for plugin {slug}")

        app.extensions['plugin_manager'] = self

    def _scan(self, plugins_dir):
        """Yield setup() metadata of every plugin package in a directory"""
        if not plugins_dir or not os.path.isdir(plugins_dir):
            logger.warning(f"Plugins directory does not exist: {plugins_dir}")
            return

        # Add plugins directory to Python path if not already there
        if plugins_dir not in sys.path:
            sys.path.insert(0, plugins_dir)
            logger.info(f"Added {plugins_dir} to Python path")

        for item in sorted(os.listdir(plugins_dir)):
            item_path = os.path.join(plugins_dir, item)
            if not os.path.isfile(os.path.join(item_path, '__init__.py')):
                continue

            try:
                plugin_module = importlib.import_module(item)
            except Exception as e:
                logger.error(f"Error importing plugin package {item}: {str(e)}")
                continue

            if not hasattr(plugin_module, 'setup'):
                logger.warning(f"Module {item} does not have a setup function")
                continue

            metadata = plugin_module.setup()
            if not metadata:
                logger.warning(f"Plugin {item} setup() function returned no metadata")
                continue

            metadata.setdefault('slug', item.lower())
            metadata.setdefault('entry_point', f"{item}:plugin")
            yield metadata

    def discover_plugins(self):
        """Register every loaded plugin in the database"""
        discovered = []
        for slug, metadata in self.metadata.items():
            Plugin.register_plugin(
                name=metadata.get('name', slug),
                slug=slug,
                version=metadata.get('version', '0.1.0'),
                entry_point=metadata['entry_point'],
                description=metadata.get('description'),
                author=metadata.get('author'),
                homepage=metadata.get('homepage'),
                config_schema=metadata.get('config_schema'),
                is_system=metadata.get('is_system', False)
            )
            discovered.append(metadata)

        logger.info(f"Discovered {len(discovered)} plugins")
        return discovered

    def is_active(self, plugin_slug):
        """Check if a plugin is registered and active"""
        plugin = Plugin.query.filter_by(slug=plugin_slug).first()
        return plugin is not None and plugin.is_active

    def activate_plugin(self, plugin_slug):
        """Activate a plugin and run its install hook"""
        plugin = Plugin.query.filter_by(slug=plugin_slug).first()
        instance = self.instances.get(plugin_slug)
        if not plugin or not instance:
            logger.error(f"Plugin {plugin_slug} not found")
            return False

        try:
            if hasattr(instance, 'install') and not instance.install():
                logger.error(f"Install hook of plugin {plugin_slug} failed")
                plugin.set_status(PluginStatus.ERROR)
                return False

            plugin.set_status(PluginStatus.ACTIVE)
            logger.info(f"Activated plugin: {plugin.name}")
            return True
        except SQLAlchemyError as e:
            logger.error(f"Error activating plugin {plugin_slug}: {str(e)}")
            return False

    def deactivate_plugin(self, plugin_slug):
        """Deactivate a plugin, keeping its data"""
        plugin = Plugin.query.filter_by(slug=plugin_slug).first()
        if not plugin:
            logger.error(f"Plugin {plugin_slug} not found")
            return False

        try:
            plugin.set_status(PluginStatus.INACTIVE)
            logger.info(f"Deactivated plugin: {plugin.name}")
            return True
        except SQLAlchemyError as e:
            logger.error(f"Error deactivating plugin {plugin_slug}: {str(e)}")
            return False

    def uninstall_plugin(self, plugin_slug):
        """Deactivate a plugin and remove its data"""
        if not self.deactivate_plugin(plugin_slug):
            return False

        instance = self.instances.get(plugin_slug)
        if instance is not None and hasattr(instance, 'uninstall'):
            return bool(instance.uninstall())
        return True

    def get_plugin_instance(self, plugin_slug):
        """Get the instance of an active plugin"""
        if not self.is_active(plugin_slug):
            return None
        return self.instances.get(plugin_slug)

    def get_active_instances(self):
        """Get instances of all active plugins, ordered by slug"""
        active = {
            plugin.slug for plugin in
            Plugin.query.filter_by(status=PluginStatus.ACTIVE.value).all()
        }
        return [instance for slug, instance in sorted(self.instances.items()) if slug in active]

    def get_menu_items(self):
        """Get menu items for all active plugins"""
        menu_items = []
        for instance in self.get_active_instances():
            if hasattr(instance, 'get_menu_items'):
                try:
                    menu_items.extend(instance.get_menu_items() or [])
                except Exception as e:
                    logger.error(f"Error getting menu items for plugin {instance}: {str(e)}")
        return menu_items

def get_plugin_manager():
    """Get the plugin manager of the current app"""
    return current_app.extensions['plugin_manager']

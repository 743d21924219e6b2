import os
from flask import Flask, request, redirect, url_for
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect
from flask_login import LoginManager, current_user
import datetime

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
csrf = CSRFProtect()
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please log in to access this page'
login_manager.login_message_category = 'warning'

# Paths reachable without logging in
PUBLIC_PATHS = (
    '/auth/login',
    '/static/',
    '/health',
    '/posts/'
)

def create_app(config_name=None, test_config=None):
    """Application factory pattern for Flask app creation"""

    # Create and configure the app
    app = Flask(__name__)

    # Load configuration
    from app.core.config import config_by_name
    config_obj = config_by_name[config_name or os.getenv('FLASK_ENV', 'development')]
    app.config.from_object(config_obj)
    if test_config:
        app.config.update(test_config)
    config_obj.init_app(app)

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    # Configure login manager
    from app.auth.user import User, AnonymousUser
    login_manager.anonymous_user = AnonymousUser
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Import the remaining models so migrations see every table
    from app.content.post import Post, PostMeta  # noqa: F401
    from app.content.option import Option  # noqa: F401
    from app.plugins.plugin import Plugin  # noqa: F401

    # Content types available to admin screens and plugins
    from app.content.content_type import ContentTypeRegistry
    ContentTypeRegistry(app)

    # Register context processors
    @app.context_processor
    def inject_now():
        return {'now': datetime.datetime.now()}

    @app.context_processor
    def inject_plugin_menu_items():
        """Inject plugin menu items into all templates"""
        plugin_menu_items = []

        if current_user.is_authenticated:
            try:
                from app.plugins.plugin_manager import get_plugin_manager
                plugin_menu_items = [
                    item for item in get_plugin_manager().get_menu_items()
                    if not item.get('permission') or current_user.has_permission(item['permission'])
                ]
            except Exception as e:
                app.logger.error(f"Error getting plugin menu items: {str(e)}")

        return {'plugin_menu_items': plugin_menu_items}

    @app.before_request
    def require_login():
        # Allow access to public routes
        if any(request.path.startswith(path) for path in PUBLIC_PATHS):
            return None

        # Redirect to login for all other routes if not authenticated
        if not current_user.is_authenticated:
            return redirect(url_for('auth.login', next=request.url))

    # Register blueprints
    from app.core.views import main_bp
    from app.auth.views import auth_bp
    from app.content.views import content_bp, site_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(content_bp)
    app.register_blueprint(site_bp)

    # Load plugin packages and register their blueprints
    from app.plugins.plugin_manager import PluginManager
    PluginManager(app)

    # Register CLI commands
    from app.plugins.commands import register_commands as register_plugin_commands
    from app.auth.commands import register_commands as register_user_commands
    register_plugin_commands(app)
    register_user_commands(app)

    # Register error handlers
    from app.core.error_handlers import register_handlers
    register_handlers(app)

    # Insert default roles
    with app.app_context():
        try:
            from sqlalchemy import inspect
            from app.auth.user import Role

            if 'roles' in inspect(db.engine).get_table_names():
                Role.insert_default_roles()
            else:
                app.logger.info("Roles table not yet created - skipping default roles")
        except Exception as e:
            app.logger.error(f"Error inserting default roles: {str(e)}")

    return app

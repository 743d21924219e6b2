"""CLI commands for plugin management"""
import click
from flask.cli import with_appcontext
from app.plugins.plugin_manager import get_plugin_manager
from app.plugins.plugin import Plugin

@click.group()
def plugins_cli():
    """Plugin management commands."""
    pass

@plugins_cli.command('discover')
@with_appcontext
def discover_plugins():
    """Discover and register available plugins."""
    plugins = get_plugin_manager().discover_plugins()
    click.echo(f"Discovered {len(plugins)} plugins.")
    for plugin in plugins:
        click.echo(f" - {plugin.get('name')} ({plugin.get('slug')})")

@plugins_cli.command('list')
@with_appcontext
def list_plugins():
    """List all registered plugins."""
    plugins = Plugin.query.order_by(Plugin.slug).all()
    click.echo(f"Found {len(plugins)} registered plugins:")
    for plugin in plugins:
        click.echo(f" - {plugin.name} ({plugin.slug}): {plugin.status}")

@plugins_cli.command('activate')
@click.argument('slug')
@with_appcontext
def activate_plugin(slug):
    """Activate a plugin."""
    if get_plugin_manager().activate_plugin(slug):
        click.echo(f"Plugin '{slug}' activated successfully.")
    else:
        click.echo(f"Failed to activate plugin '{slug}'.")

@plugins_cli.command('deactivate')
@click.argument('slug')
@with_appcontext
def deactivate_plugin(slug):
    """Deactivate a plugin."""
    if get_plugin_manager().deactivate_plugin(slug):
        click.echo(f"Plugin '{slug}' deactivated successfully.")
    else:
        click.echo(f"Failed to deactivate plugin '{slug}'.")

@plugins_cli.command('uninstall')
@click.argument('slug')
@click.confirmation_option(prompt='This removes the plugin data. Continue?')
@with_appcontext
def uninstall_plugin(slug):
    """Deactivate a plugin and delete its data."""
    if get_plugin_manager().uninstall_plugin(slug):
        click.echo(f"Plugin '{slug}' uninstalled.")
    else:
        click.echo(f"Failed to uninstall plugin '{slug}'.")

def register_commands(app):
    """Register plugin management commands with Flask."""
    app.cli.add_command(plugins_cli, name='plugins')

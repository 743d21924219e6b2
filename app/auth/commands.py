"""CLI commands for user management"""
import click
from flask.cli import with_appcontext
from app.auth.user import User, Role

@click.group()
def users_cli():
    """User management commands."""
    pass

@users_cli.command('create')
@click.argument('username')
@click.argument('email')
@click.password_option()
@click.option('--role', 'roles', multiple=True, help='Role to assign; may be repeated.')
@click.option('--admin', is_flag=True, help='Grant every permission.')
@with_appcontext
def create_user(username, email, password, roles, admin):
    """Create a user."""
    try:
        user = User.create_user(email, username, password, roles=roles, is_admin=admin)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--role')
    click.echo(f"User '{user.username}' created.")

@users_cli.command('roles')
@with_appcontext
def list_roles():
    """List roles and their permissions."""
    for role in Role.query.order_by(Role.name).all():
        click.echo(f" - {role.name}: {', '.join(role.permissions or [])}")

def register_commands(app):
    """Register user management commands with Flask."""
    app.cli.add_command(users_cli, name='users')

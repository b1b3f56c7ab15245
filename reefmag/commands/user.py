"""User management CLI commands."""

import click
from flask import current_app
from flask.cli import with_appcontext

from reefmag.errors import ReefmagError
from reefmag.models import hash_password
from reefmag.services.collections import get_service


def _hash(password: str) -> str:
    return hash_password(password, rounds=current_app.config.get('BCRYPT_ROUNDS', 12))


@click.group('user')
def user_commands():
    """User management commands."""
    pass


@user_commands.command('create')
@click.option('--email', required=True, help='User email')
@click.option('--password', required=True, help='User password')
@with_appcontext
def create_user(email, password):
    """Create a login account.

    The account is an administrator when its email equals ADMIN_EMAIL.
    """
    if len(password) < 6:
        click.echo(click.style('Error: Password must be at least 6 characters', fg='red'))
        return

    users = get_service('users')
    if users.find_by_email(email):
        click.echo(click.style(f'Error: User with email "{email}" already exists', fg='red'))
        return

    try:
        record = users.register(email, _hash(password))
    except ReefmagError as e:
        click.echo(click.style(f'Error: {e.message}', fg='red'))
        return

    click.echo(click.style('User created successfully!', fg='green'))
    click.echo(f'  Id: {record["id"]}')
    click.echo(f'  Email: {email}')
    click.echo(f'  Admin: {email == current_app.config.get("ADMIN_EMAIL")}')


@user_commands.command('set-password')
@click.option('--email', required=True, help='User email')
@click.option('--password', required=True, help='New password')
@with_appcontext
def set_password(email, password):
    """Set or reset a user's password."""
    users = get_service('users')
    record = users.find_by_email(email)
    if not record:
        click.echo(click.style(f'Error: No user {email} found', fg='red'))
        return

    users.set_password(record['id'], _hash(password))
    click.echo(click.style('Password updated.', fg='green'))

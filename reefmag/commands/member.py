"""Member import CLI commands."""

import json

import click
from flask.cli import with_appcontext

from reefmag.services.collections import get_service


@click.group('member')
def member_commands():
    """Member roster commands."""
    pass


@member_commands.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def import_members(path):
    """Import members from a JSON array of objects.

    Each object needs an ``email``; ``country``, ``registration``,
    ``activation`` and ``status`` are copied when present. Rows whose email is
    already on the roster are skipped.

    Example:
        flask member import members.json
    """
    try:
        with open(path, encoding='utf-8') as fh:
            rows = json.load(fh)
    except (OSError, ValueError) as e:
        click.echo(click.style(f'Error: Cannot read {path}: {e}', fg='red'))
        return

    if not isinstance(rows, list):
        click.echo(click.style('Error: Expected a JSON array of member objects', fg='red'))
        return

    created, skipped = get_service('members').import_records(
        [row for row in rows if isinstance(row, dict)]
    )
    click.echo(click.style(f'Imported {created} members ({skipped} skipped)', fg='green'))

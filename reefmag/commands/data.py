"""Data directory CLI commands."""

import click
from flask import current_app
from flask.cli import with_appcontext

from reefmag.services.store import get_store
from reefmag.services.uploads import ensure_upload_dirs, upload_root


@click.group('data')
def data_commands():
    """Data directory commands."""
    pass


@data_commands.command('init')
@with_appcontext
def init_data():
    """Create every collection file and the upload folders."""
    store = get_store()
    for collection in current_app.extensions['reefmag']['collections']:
        path = store.ensure(collection)
        click.echo(f'  {collection}: {path}')
    ensure_upload_dirs()
    click.echo(f'  uploads: {upload_root()}')
    click.echo(click.style('Data directory ready.', fg='green'))

"""CLI commands for Reef Magazine."""

from .data import data_commands
from .member import member_commands
from .user import user_commands


def register_commands(app):
    """Register all CLI command groups with the Flask app."""
    app.cli.add_command(data_commands)
    app.cli.add_command(member_commands)
    app.cli.add_command(user_commands)

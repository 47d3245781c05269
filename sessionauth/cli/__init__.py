"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .keys import init_db_command, keys_cli


def init_app(app: Flask) -> None:
    """Register application-specific CLI commands.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry will receive the
        ``keys`` group and the ``init-db`` command.
    """
    app.cli.add_command(keys_cli)
    app.cli.add_command(init_db_command)

"""Flask CLI commands for key generation and schema creation."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from flask.cli import with_appcontext

from sessionauth.core.extensions import db
from sessionauth.infra.crypto.pem_signing_material import write_rsa_keypair

LOGGER = logging.getLogger(__name__)


@click.group("keys")
def keys_cli() -> None:
    """Manage the RSA key pair used for identity tokens.

    Also installed as ``sessionauth-keys``, which runs without an app so the
    first key pair can be created before ``PRIV_KEY_FILE`` points anywhere.
    """


@keys_cli.command("generate")
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("keys"),
    show_default=True,
    help="Directory receiving rsa_private.pem and rsa_public.pem.",
)
@click.option("--bits", type=click.IntRange(min=2048), default=2048, show_default=True)
@click.option("--force", is_flag=True, help="Overwrite an existing key pair.")
def generate_command(out_dir: Path, bits: int, force: bool) -> None:
    """Write a fresh RSA key pair as PEM files."""
    if not force and (out_dir / "rsa_private.pem").exists():
        raise click.UsageError(f"{out_dir / 'rsa_private.pem'} exists; pass --force to replace it.")
    priv_path, pub_path = write_rsa_keypair(out_dir, key_size=bits)
    LOGGER.info("keys.generated", extra={"event": "keys.generated", "key": str(pub_path)})
    click.echo(f"PRIV_KEY_FILE={priv_path}")
    click.echo(f"PUB_KEY_FILE={pub_path}")


@click.command("init-db")
@with_appcontext
def init_db_command() -> None:
    """Create all database tables."""
    db.create_all()
    click.echo("Database tables created.")

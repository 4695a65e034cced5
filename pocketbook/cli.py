"""``flask pocketbook ...`` maintenance commands."""
from pathlib import Path

import click
from flask.cli import AppGroup

from .extensions import db
from .models import User
from .services.categories import ensure_default_categories
from .vectors import ingest_to_knowledge_base

pocketbook_cli = AppGroup("pocketbook", help="Pocketbook maintenance commands.")


@pocketbook_cli.command("init-db")
def init_db():
    """Create tables directly (use `flask db upgrade` in deployed environments)."""
    db.create_all()
    click.echo("Tables created")


@pocketbook_cli.command("create-user")
@click.argument("email")
@click.password_option()
@click.option("--name", default=None)
def create_user(email, password, name):
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    if not user:
        user = User(email=email)
        db.session.add(user)
    user.name = name or user.name
    user.is_active = True
    user.set_password(password)
    db.session.commit()
    ensure_default_categories(user.id)
    click.echo(f"User upserted: {user.id} {user.email}")


@pocketbook_cli.command("seed-kb")
@click.argument("paths", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strategy", type=click.Choice(["paragraph", "sentence", "fixed"]), default="paragraph")
def seed_kb(paths, strategy):
    """Ingest text/markdown files into the shared knowledge base; doc id is the file stem."""
    if not paths:
        raise click.UsageError("give at least one file")
    for path in paths:
        result = ingest_to_knowledge_base(
            path.stem,
            path.read_text(encoding="utf-8"),
            metadata={"source": path.name},
            chunker_config={"strategy": strategy},
        )
        click.echo(f"{result['doc_id']}: {result['chunks_created']} chunks")

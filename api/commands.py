"""
Maintenance commands for the JSON database:
    flask --app api init-db
    flask --app api import-data users ./seed/users.json
"""
import json

import click
from flask import Flask

from models import storage
from models.file_storage import COLLECTIONS


def register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Create an empty file for every collection that does not exist yet."""
        for name in COLLECTIONS:
            if storage.exists(name):
                click.echo(f"exists   {name}.json")
                continue
            storage.write(name, [])
            click.echo(f"created  {name}.json")

    @app.cli.command("import-data")
    @click.argument("collection", type=click.Choice(COLLECTIONS))
    @click.argument("source", type=click.Path(exists=True, dir_okay=False))
    def import_data(collection, source):
        """Replace COLLECTION with the JSON array found in SOURCE."""
        with open(source, "r", encoding="utf-8") as fh:
            try:
                records = json.load(fh)
            except ValueError as e:
                raise click.ClickException(f"{source} is not valid JSON: {e}")
        if not isinstance(records, list):
            raise click.ClickException(f"{source} must contain a JSON array")
        storage.write(collection, records)
        click.echo(f"imported {len(records)} records into {collection}.json")

"""Command line helpers for EcoStore storage files."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.table import Table

from .cache.manager import CacheManager
from .cache.store import CachedDocumentStore
from .config import EcoStoreConfig
from .storage.json_file import JsonStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage
from .validators import validate_config, validate_storage_file

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True)


def run_inspect(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Print data from an EcoStore JSON file")
    parser.add_argument("file", help="Path to the storage JSON file")
    parser.add_argument("path", nargs="?", help="Dot-path to print, e.g. guild.member.money")
    args = parser.parse_args(argv)

    source = Path(args.file)
    if not source.exists():
        console.print(f"[red]Storage file {source} does not exist.[/red]")
        sys.exit(1)

    store = JsonStore(source, check_storage=False)
    value = store.fetch(args.path) if args.path else store.all()
    if value is None:
        console.print(f"[yellow]Nothing stored at '{args.path}'.[/yellow]")
        sys.exit(1)
    console.print_json(json.dumps(value, ensure_ascii=False))


def run_check(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="EcoStore storage validator")
    parser.add_argument("file", nargs="?", help="Path to the storage JSON file")
    args = parser.parse_args(argv)

    config = EcoStoreConfig.from_env()
    issues = validate_config(config)
    target = Path(args.file) if args.file else Path(config.storage.path)
    issues.extend(validate_storage_file(target))
    if issues:
        table = Table(title=f"Problems in {target}")
        table.add_column("#", justify="right")
        table.add_column("Problem")
        for idx, issue in enumerate(issues, start=1):
            table.add_row(str(idx), issue)
        console.print(table)
        sys.exit(1)
    console.print(f"[green]Storage {target} is valid.[/green]")


def run_migrate(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Copy a JSON storage file into a database")
    parser.add_argument("file", help="Path to the storage JSON file")
    parser.add_argument("dsn", help="SQLAlchemy async DSN, e.g. sqlite+aiosqlite:///eco.db")
    parser.add_argument("--echo-sql", action="store_true", help="Log emitted SQL")
    args = parser.parse_args(argv)

    source = Path(args.file)
    issues = validate_storage_file(source)
    if issues:
        console.print(f"[red]Refusing to migrate {source}:[/red]")
        for issue in issues:
            console.print(f"- {issue}")
        sys.exit(1)

    migrated = asyncio.run(migrate_json_to_sql(source, args.dsn, echo=args.echo_sql))
    console.print(f"[green]Migrated {migrated} document(s) from {source}.[/green]")


async def migrate_json_to_sql(source: str | Path, dsn: str, *, echo: bool = False) -> int:
    """Copy every guild-level entry of ``source`` into the database at ``dsn``."""
    data = JsonStore(source, check_storage=False).all()
    storage = AsyncSQLAlchemyStorage(dsn, echo=echo)
    try:
        await storage.init_models()
        remote = storage.document_store()
        store = CachedDocumentStore(remote, CacheManager(remote))
        migrated = 0
        for guild_id, guild in data.items():
            if not isinstance(guild, dict):
                logger.warning("Skipping guild %s: not an object", guild_id)
                continue
            for key, value in guild.items():
                await store.set(f"{guild_id}.{key}", value)
                migrated += 1
        logger.info("Migrated %d document(s) from %s", migrated, source)
        return migrated
    finally:
        await storage.dispose()

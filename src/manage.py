"""Artistry Gallery database management CLI.

Creates and drops the marketplace database schema: the Protean provider
tables (purchase orders) and, when the SQL snapshot store is configured,
its key/value table.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def _sql_store(settings):
    from marketplace.storage.store import SqlStore

    return SqlStore(settings.database_uri) if settings.store_backend == "sql" else None


def setup_databases():
    from marketplace.config import Settings
    from marketplace.domain import marketplace
    from marketplace.utils.db import setup_db

    settings = Settings.from_env()

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Creating marketplace database schema...")
    setup_db(marketplace, _sql_store(settings))
    print("Done.")


def drop_databases():
    from marketplace.config import Settings
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db

    settings = Settings.from_env()

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Dropping marketplace database schema...")
    drop_db(marketplace, _sql_store(settings))
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Artistry Gallery database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

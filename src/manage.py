"""Fulfillment database management CLI.

Creates and drops the tables for orders, audit entries and shortage flags.
Set PROTEAN_ENV=production and DATABASE_URL to target PostgreSQL.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the fulfillment database schema."""
    from fulfillment.domain import fulfillment
    from fulfillment.utils.db import setup_db

    print("Initializing fulfillment domain...")
    fulfillment.init()
    print("Creating fulfillment database schema...")
    setup_db(fulfillment)
    print("Done.")


def drop_database():
    """Drop the fulfillment database schema."""
    from fulfillment.domain import fulfillment
    from fulfillment.utils.db import drop_db

    print("Initializing fulfillment domain...")
    fulfillment.init()
    print("Dropping fulfillment database schema...")
    drop_db(fulfillment)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Fulfillment database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

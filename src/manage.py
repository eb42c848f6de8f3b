"""Notification hub database management CLI.

Creates and drops the tables backing the Notification and
NotificationSetting aggregates. Only SQL providers are touched; the
in-memory default needs no schema.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the notifications database schema."""
    from notifications.domain import notifications
    from notifications.utils.db import setup_db

    print("Initializing notifications domain...")
    notifications.init()
    print("Creating notifications database schema...")
    setup_db(notifications)
    print("Done.")


def drop_database():
    """Drop the notifications database schema."""
    from notifications.domain import notifications
    from notifications.utils.db import drop_db

    print("Initializing notifications domain...")
    notifications.init()
    print("Dropping notifications database schema...")
    drop_db(notifications)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Notification hub database management")
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

"""AgriMarket database management CLI.

Usage:
    agrimarket-manage setup-db   # Create all tables
    agrimarket-manage drop-db    # Drop all tables

``PROTEAN_ENV`` selects the configuration overlay (``production`` targets
PostgreSQL through ``DATABASE_URL``).
"""

import argparse
import sys

from agrimarket.domain import agrimarket
from agrimarket.utils.db import drop_db, setup_db


def main(argv=None):
    parser = argparse.ArgumentParser(description="AgriMarket database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    print("Initializing agrimarket domain...")
    agrimarket.init()
    if args.command == "setup-db":
        setup_db(agrimarket)
        print("  schema ready.")
    elif args.command == "drop-db":
        drop_db(agrimarket)
        print("  schema dropped.")
    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

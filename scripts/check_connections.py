#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify both database connections are working.
Usage: python scripts/check_connections.py
"""
from marketplace.core.config import get_settings
from marketplace.db.database import ping_database
from marketplace.db.mongodb import ping_mongo


def main():
    settings = get_settings()
    print("=" * 50)
    print("MARKETPLACE - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking relational database...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    print("    CONNECTED" if ping_database() else "    FAILED")

    print("\n[2] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    print("    CONNECTED" if ping_mongo() else "    FAILED")

    print("\n" + "=" * 50)


if __name__ == "__main__":
    main()

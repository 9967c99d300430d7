#!/usr/bin/env python3
"""
Database reset script for the Patient Records API.

This script drops all tables, recreates them from the models and loads the
demo data. Use this to get a clean database state for local development.
"""

import sys
import os

# Add backend/src and backend/scripts to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'backend', 'src'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'backend', 'scripts'))

from sqlalchemy import inspect

from core.config import DATABASE_URL
from core.database import create_tables, drop_tables, engine, get_db_context
from seed_data import seed

EXPECTED_TABLES = ['users', 'addresses', 'patients']


def reset_database():
    """Reset the database by dropping all tables, recreating them and seeding."""

    print("🔄 Resetting patient records database...")
    print(f"Database URL: {DATABASE_URL}")

    if '_dev' not in DATABASE_URL and 'sqlite' not in DATABASE_URL:
        print("❌ ERROR: This script only runs against development databases!")
        return

    try:
        drop_tables()
        create_tables()

        table_names = inspect(engine).get_table_names()
        print("📋 Created tables:")
        for table in EXPECTED_TABLES:
            marker = "✅" if table in table_names else "❌"
            print(f"   {marker} {table}")

        with get_db_context() as db:
            created = seed(db)
        print(f"🎉 Database reset complete with {created} demo patients.")

    except Exception as e:
        print(f"❌ Error resetting database: {e}")
        raise


def show_usage():
    """Show usage information."""
    print("Patient Records Database Reset Script")
    print("=" * 40)
    print()
    print("This script will:")
    print("1. Drop all existing tables")
    print("2. Recreate all tables")
    print("3. Seed the admin user and demo patients")
    print()
    print("Usage:")
    print("  python reset_database.py")
    print()
    print("Note: Refuses to run unless DATABASE_URL names a _dev or SQLite database")


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] in ['--help', '-h']:
        show_usage()
    else:
        reset_database()

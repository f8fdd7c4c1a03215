#!/usr/bin/env python3
"""Utility script to inspect or clear the sale records database."""
import sqlite3
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from salesreport.config import config
from salesreport.store.records import TABLE


def show_stats() -> None:
    """Show statistics about the records database."""
    conn = sqlite3.connect(config.DB_PATH)
    cursor = conn.cursor()

    cursor.execute(f"SELECT COUNT(*) FROM {TABLE}")
    total = cursor.fetchone()[0]

    cursor.execute(f"SELECT sold, COUNT(*) FROM {TABLE} GROUP BY sold")
    by_sold = {("sold" if sold else "not sold"): n for sold, n in cursor.fetchall()}

    cursor.execute(f"SELECT MIN(date_of_sale), MAX(date_of_sale) FROM {TABLE}")
    first, last = cursor.fetchone()

    cursor.execute(
        f"SELECT substr(date_of_sale, 1, 7) AS ym, COUNT(*) FROM {TABLE} "
        f"GROUP BY ym ORDER BY ym"
    )
    by_month = cursor.fetchall()

    print(f"Records database: {config.DB_PATH}")
    print(f"Total records: {total}")
    print(f"Records by status: {by_sold}")
    if first is not None:
        print(f"Date range: {first} - {last}")
        for ym, n in by_month:
            print(f"  {ym}: {n}")
    else:
        print("Date range: (empty)")

    conn.close()


def delete_all() -> None:
    """Delete all records."""
    conn = sqlite3.connect(config.DB_PATH)
    cursor = conn.cursor()

    cursor.execute(f"SELECT COUNT(*) FROM {TABLE}")
    count = cursor.fetchone()[0]

    if count == 0:
        print("Database is already empty")
        conn.close()
        return

    cursor.execute(f"DELETE FROM {TABLE}")
    conn.commit()

    print(f"Deleted all {count} records from {config.DB_PATH}")

    conn.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage:")
        print("  python scripts/manage_records.py stats         # Show statistics")
        print("  python scripts/manage_records.py delete-all    # Delete all records")
        sys.exit(1)

    command = sys.argv[1]

    if command == "stats":
        show_stats()
    elif command == "delete-all":
        confirm = input("Are you sure you want to delete ALL records? (yes/no): ")
        if confirm.lower() == "yes":
            delete_all()
        else:
            print("Cancelled")
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)

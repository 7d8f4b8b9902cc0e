# scripts/add_unique_keys.py
import sys
from pathlib import Path

from gymdesk.models.database import ensure_unique_keys, init_db


def migrate(db_path):
    # Creates any missing tables and the finances.member_id column
    init_db(db_path)

    removed = ensure_unique_keys(db_path)
    for table, count in removed.items():
        if count:
            print(f"{table}: removed {count} duplicate row(s)")
        else:
            print(f"{table}: no duplicates")
    print("Migration complete.")
    return removed


if __name__ == "__main__":
    db_arg = sys.argv[1] if len(sys.argv) > 1 else "gymdesk.db"
    db_path = Path(db_arg)
    if not db_path.exists():
        print(f"ERROR: Database not found at {db_path.resolve()}")
        sys.exit(1)
    migrate(str(db_path))

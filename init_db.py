import logging
import os
import sys

from history_store import HistoryStore


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    db_file = args[0] if args else os.environ.get("DB_FILE", "bmi.db")

    store = HistoryStore(db_file)
    ok = store.initialize()
    count = len(store.load_all()) if ok else 0
    store.close()

    if not ok:
        print(f"❌ Could not initialize database: {db_file}")
        return 1

    print(f"✅ Database initialized: {db_file} ({count} entries)")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())

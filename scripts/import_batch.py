"""
Batch import script — load a roster and its series files into the database.

Usage (local):
    python scripts/import_batch.py                 # settings.import_data_path
    python scripts/import_batch.py fixtures        # explicit directory
    python scripts/import_batch.py fixtures heizung.csv strom.csv

Reads <dir>/<ROSTER_FILENAME> first, then each series file. Commits once at
the end; a missing file aborts without writing anything.
"""

import sys
import os

# Ensure the project root is on the path when run directly
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from meterhub.database import SessionLocal
from meterhub.services.ingestion.base import ImportFailure, SourceNotFoundError
from meterhub.settings import settings
from meterhub.workers.import_jobs import run_batch_import_sync


def main(argv: list[str]) -> int:
    path = argv[0] if argv else settings.import_data_path
    reading_names = argv[1:] or None

    print(f"\n=== meterhub — Batch import from {path} ===\n")

    db = SessionLocal()
    try:
        summary = run_batch_import_sync(db, path=path, reading_names=reading_names)
        db.commit()
    except SourceNotFoundError as e:
        db.rollback()
        print(f"ERROR: {e}")
        return 1
    except ImportFailure as e:
        db.rollback()
        print(f"ERROR: roster import failed — {e}")
        return 1
    except Exception as e:
        db.rollback()
        print(f"\nERROR: {e}")
        return 1
    finally:
        db.close()

    for f in summary["files"]:
        if f["error"]:
            print(f"✗ {f['name']}: {f['error']}")
        else:
            kind = f" [{f['kind_of_meter']}]" if f["kind_of_meter"] else ""
            skipped = len(f["diagnostics"])
            print(f"✓ {f['name']}{kind}: {f['imported']} imported, {skipped} skipped")

    print(
        f"\n✅ Imported {summary['customers_imported']} customers and "
        f"{summary['readings_imported']} readings.\n"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

"""
Batch import jobs.

Supports two entry points:
  - run_batch_import_sync(): called directly from POST /import/batch.
    Uses the caller's DB session; the caller commits.
  - run_batch_import():      RQ background job entry point.
    Opens its own DB session and commits when the batch finishes.

Both return a JSON-serializable summary dict.
"""

import logging
from dataclasses import asdict
from typing import Optional

from meterhub.database import SessionLocal
from meterhub.services.ingestion.orchestrator import BatchImportResult, import_batch
from meterhub.services.ingestion.sources import DirectorySource
from meterhub.services.storage.base import get_store
from meterhub.settings import settings

logger = logging.getLogger(__name__)


def run_batch_import_sync(
    db,
    path: Optional[str] = None,
    roster_name: Optional[str] = None,
    reading_names: Optional[list[str]] = None,
) -> dict:
    """
    Import a roster and its series files using the caller's session.

    Args:
        db:            Caller-provided SQLAlchemy session.
        path:          Directory holding the files (default: settings.import_data_path).
        roster_name:   Roster file name (default: settings.roster_filename).
        reading_names: Series file names (default: settings.reading_filenames).

    Returns:
        Summary dict (see summarize()).

    Raises:
        SourceNotFoundError: a named file is missing (nothing is committed).
    """
    path = path or settings.import_data_path
    roster_name = roster_name or settings.roster_filename
    if reading_names is None:
        reading_names = settings.reading_filenames

    logger.info("Starting batch import from %s", path)
    result = import_batch(
        get_store(db), DirectorySource(path), roster_name, reading_names
    )
    return summarize(result)


def run_batch_import(
    path: Optional[str] = None,
    roster_name: Optional[str] = None,
    reading_names: Optional[list[str]] = None,
) -> dict:
    """RQ background job entry point."""
    with SessionLocal() as db:
        try:
            summary = run_batch_import_sync(db, path, roster_name, reading_names)
            db.commit()
            return summary
        except Exception:
            db.rollback()
            logger.exception("Batch import from %s failed", path)
            raise


def summarize(result: BatchImportResult) -> dict:
    return {
        "customers_imported": result.customers_imported,
        "readings_imported": result.readings_imported,
        "total": result.total,
        "failed_files": result.failed_files,
        "files": [asdict(f) for f in result.files],
    }

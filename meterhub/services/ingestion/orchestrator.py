"""
Import Orchestrator — runs a roster plus N series files as one batch.

Order matters: the roster is imported first so the series files' customer
lookups can succeed. After that, every series file stands on its own:

  - SourceNotFoundError (missing file)     → fatal, the batch aborts
  - ImportFailure (unknown customer, bad
    UUID in the preamble)                  → recorded on that file, batch continues
  - soft failure (no customer/meter id)    → file imports 0, diagnostic recorded

Nothing here is transactional. A failure mid-file leaves the rows created
before it in the session; the caller decides whether to commit.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from meterhub.services.ingestion.base import ImportFailure, RowDiagnostic
from meterhub.services.ingestion.customer_importer import CustomerRosterImporter
from meterhub.services.ingestion.reading_importer import ReadingSeriesImporter
from meterhub.services.ingestion.sources import ImportSource
from meterhub.services.storage.base import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class FileImportResult:
    """Per-file line of the batch report."""
    name: str
    kind: str  # "roster" | "series"
    imported: int = 0
    kind_of_meter: Optional[str] = None
    error: Optional[str] = None
    diagnostics: list[RowDiagnostic] = field(default_factory=list)


@dataclass
class BatchImportResult:
    customers_imported: int = 0
    readings_imported: int = 0
    files: list[FileImportResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.customers_imported + self.readings_imported

    @property
    def failed_files(self) -> list[str]:
        return [f.name for f in self.files if f.error is not None]


class BatchImporter:
    def __init__(self, store: RecordStore, source: ImportSource):
        self.store = store
        self.source = source

    def import_batch(
        self, roster_name: str, reading_names: list[str]
    ) -> BatchImportResult:
        """
        Import the roster, then each series file in order.

        Raises:
            SourceNotFoundError: any named file cannot be resolved.
            ImportFailure:       the roster itself fails (e.g. malformed UUID).
        """
        batch = BatchImportResult()

        # ── Roster ────────────────────────────────────────────────────────────
        roster_text = self.source.read_text(roster_name)
        roster = CustomerRosterImporter(self.store).import_text(roster_text)
        batch.customers_imported = roster.imported
        batch.files.append(
            FileImportResult(
                name=roster_name,
                kind="roster",
                imported=roster.imported,
                diagnostics=roster.diagnostics,
            )
        )

        # ── Series files ──────────────────────────────────────────────────────
        series_importer = ReadingSeriesImporter(self.store)
        for name in reading_names:
            text = self.source.read_text(name)
            file_result = FileImportResult(name=name, kind="series")
            try:
                series = series_importer.import_text(text, source_name=name)
            except ImportFailure as exc:
                logger.error("Series file %s aborted: %s", name, exc)
                file_result.error = str(exc)
            else:
                file_result.imported = series.imported
                file_result.kind_of_meter = series.kind_of_meter
                file_result.diagnostics = series.diagnostics
                batch.readings_imported += series.imported
            batch.files.append(file_result)

        logger.info(
            "Batch import complete: %d customers, %d readings, %d failed files",
            batch.customers_imported,
            batch.readings_imported,
            len(batch.failed_files),
        )
        return batch


def import_batch(
    store: RecordStore,
    source: ImportSource,
    roster_name: str,
    reading_names: list[str],
) -> BatchImportResult:
    """Entry point: import a roster and its series files."""
    return BatchImporter(store, source).import_batch(roster_name, reading_names)


def import_directory(store: RecordStore, path: str) -> BatchImportResult:
    """Import the default batch (configured roster + series names) from a directory."""
    from meterhub.services.ingestion.sources import DirectorySource
    from meterhub.settings import settings

    return import_batch(
        store,
        DirectorySource(path),
        settings.roster_filename,
        settings.reading_filenames,
    )

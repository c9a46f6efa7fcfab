"""
Ingestion abstractions — result types, diagnostics and the error taxonomy.

Error taxonomy (how far a problem is allowed to travel):
  - Tolerated skip:   a malformed row is dropped and recorded as a RowDiagnostic.
  - Soft failure:     a series file without customer/meter metadata imports
                      nothing; the result carries a diagnostic, nothing is raised.
  - Hard failure:     ImportFailure subclasses — abort the current file.
  - Fatal:            SourceNotFoundError — aborts the whole batch.

Cell-level parsers (values.py) never raise; only identity and referential
integrity problems escalate.
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional


class ImportFailure(Exception):
    """Hard failure: the current file cannot be imported any further."""
    pass


class IdentifierFormatError(ImportFailure, ValueError):
    """A customer/meter reference is not a canonical UUID string."""
    pass


class CustomerNotFoundError(ImportFailure):
    """A series file references a customer that does not exist in storage."""

    def __init__(self, customer_id: uuid.UUID):
        self.customer_id = customer_id
        super().__init__(f"Customer {customer_id} referenced by series file does not exist")


class SourceNotFoundError(Exception):
    """A named import source could not be resolved. Fatal for the batch."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Resource not found: {name}")


@dataclass
class RowDiagnostic:
    """Why a line produced no record (or, for line_number None, a whole file)."""
    line_number: Optional[int]
    reason: str


@dataclass
class ImportResult:
    """Outcome of importing one source."""
    imported: int = 0
    diagnostics: list[RowDiagnostic] = field(default_factory=list)

    def skip(self, line_number: Optional[int], reason: str) -> None:
        self.diagnostics.append(RowDiagnostic(line_number=line_number, reason=reason))


@dataclass
class SeriesImportResult(ImportResult):
    """Outcome of importing one reading series file, plus its preamble context."""
    customer_id: Optional[uuid.UUID] = None
    meter_id: Optional[str] = None
    kind_of_meter: Optional[str] = None
    header_found: bool = False

"""
CustomerRosterImporter — turns the customer master list CSV into Customers.

Roster dialect (comma-delimited, header row ignored):
    UUID,Anrede,Vorname,Nachname,Geburtsdatum
    ec617965-88b4-4721-8158-ee36c38e4db3,Herr,Pumukel,Kobold,21.02.1962

Tolerance rules:
  - the first line is consumed as header without looking at it
  - blank lines and rows with fewer than 4 fields are skipped, not fatal
  - the birth date column is optional; unparsable dates become None
  - the salutation maps to a gender code and never fails

The identifier column is the exception: a malformed UUID fails the whole
call, because silently skipping or re-keying a customer would break every
series file that references it.
"""

import logging
from typing import Optional

from meterhub.models.customer import Customer, Gender
from meterhub.services.ingestion.base import ImportResult
from meterhub.services.ingestion.values import extract_identifier, parse_date, strip_quotes
from meterhub.services.storage.base import RecordStore

logger = logging.getLogger(__name__)

MIN_ROSTER_FIELDS = 4

_SALUTATION_TO_GENDER: dict[str, str] = {
    "herr": Gender.MALE,
    "frau": Gender.FEMALE,
    "divers": Gender.DIVERSE,
}


def map_gender(salutation: Optional[str]) -> str:
    """Map a German salutation to a gender code. Unmapped → U."""
    if not salutation:
        return Gender.UNKNOWN
    key = strip_quotes(salutation.strip()).strip().lower()
    return _SALUTATION_TO_GENDER.get(key, Gender.UNKNOWN)


class CustomerRosterImporter:
    def __init__(self, store: RecordStore):
        self.store = store

    def import_text(self, text: str) -> ImportResult:
        """
        Import every valid roster row.

        Returns:
            ImportResult with the number of customers created and one
            diagnostic per skipped row.

        Raises:
            IdentifierFormatError: if a non-empty identifier is not a UUID.
        """
        result = ImportResult()
        lines = text.splitlines()

        # Line 1 is the header, never validated
        for line_number, raw_line in enumerate(lines[1:], start=2):
            line = raw_line.strip()
            if not line:
                continue

            parts = line.split(",")
            if len(parts) < MIN_ROSTER_FIELDS:
                result.skip(
                    line_number,
                    f"expected at least {MIN_ROSTER_FIELDS} fields, got {len(parts)}",
                )
                logger.debug("Roster line %d skipped: too few fields", line_number)
                continue

            customer = self._build_customer(parts)
            self.store.create_customer(customer)
            result.imported += 1

        logger.info(
            "Roster import: %d customers created, %d rows skipped",
            result.imported,
            len(result.diagnostics),
        )
        return result

    # ── Private helpers ───────────────────────────────────────────────────────

    def _build_customer(self, parts: list[str]) -> Customer:
        id_text = parts[0].strip()
        birth_text = parts[4].strip() if len(parts) > 4 else ""

        return Customer(
            # Empty id column → the store assigns one
            id=extract_identifier(id_text) if strip_quotes(id_text) else None,
            first_name=_cell(parts[2]),
            last_name=_cell(parts[3]),
            gender=map_gender(parts[1]),
            birth_date=parse_date(strip_quotes(birth_text)),
        )


def _cell(value: str) -> str:
    return strip_quotes(value.strip()).strip()


def import_customers(store: RecordStore, text: str) -> int:
    """Entry point: import a roster and return the number of customers created."""
    return CustomerRosterImporter(store).import_text(text).imported

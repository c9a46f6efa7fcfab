"""
ReadingSeriesImporter — parses one meter's reading series export.

Series dialect (semicolon-delimited, values optionally quoted):

    "Kunde";"ec617965-88b4-4721-8158-ee36c38e4db3";
    "Zählernummer";"Xr-2018-2312456ab";
    ;;
    "Datum";"Zählerstand in MWh";"Kommentar"
    "01.10.2018";"1,3";""
    "01.04.2019";"2,5";"Zählertausch"

The file is scanned as a two-state machine:

  SCANNING_PREAMBLE ── data header line ──▶ SCANNING_DATA
          │                                     ▲
          └──────────── end of input ───────────┘ (no rows left)

The preamble yields the series context (customer, meter number, meter kind),
which is applied to every data row. A file without customer or meter number
is a soft failure: zero imports, a diagnostic, no exception.

Row rules in SCANNING_DATA:
  - fewer than 2 fields, or an empty date/value cell → skipped
  - a non-empty value that does not parse → record with meter_count None
  - a date that does not parse → record with date_of_reading None
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from meterhub.models.customer import Customer
from meterhub.models.reading import Reading
from meterhub.services.ingestion.base import CustomerNotFoundError, SeriesImportResult
from meterhub.services.ingestion.meter_kind import resolve_meter_kind
from meterhub.services.ingestion.values import (
    extract_identifier,
    parse_date,
    parse_decimal,
    strip_quotes,
)
from meterhub.services.storage.base import RecordStore

logger = logging.getLogger(__name__)

CUSTOMER_MARKERS = {"kunde"}
METER_MARKERS = {"zählernummer", "zaehlernummer"}
HEADER_DATE_TOKEN = "datum"
HEADER_VALUE_TOKENS = ("zählerstand", "zaehlerstand")


class ScanState:
    SCANNING_PREAMBLE = "SCANNING_PREAMBLE"
    SCANNING_DATA = "SCANNING_DATA"


@dataclass
class MeterSeriesContext:
    """Per-file metadata from the preamble, applied to every data row."""
    customer_id: uuid.UUID
    meter_id: str
    kind_of_meter: str


class ReadingSeriesImporter:
    def __init__(self, store: RecordStore):
        self.store = store

    def import_text(
        self, text: str, source_name: Optional[str] = None
    ) -> SeriesImportResult:
        """
        Import one series file.

        Args:
            text:        Full file content.
            source_name: File name, used to classify the meter kind.

        Returns:
            SeriesImportResult — imported count, context and skip diagnostics.

        Raises:
            IdentifierFormatError: the customer marker holds a malformed UUID.
            CustomerNotFoundError: the referenced customer is not in storage.
        """
        result = SeriesImportResult()
        source = source_name or "<upload>"

        state = ScanState.SCANNING_PREAMBLE
        customer_id: Optional[uuid.UUID] = None
        meter_id: Optional[str] = None
        preamble_lines: list[str] = []
        data_lines: list[tuple[int, str]] = []

        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or _is_separator(line):
                continue

            if state == ScanState.SCANNING_DATA:
                data_lines.append((line_number, line))
                continue

            # ── SCANNING_PREAMBLE ─────────────────────────────────────────────
            preamble_lines.append(line)
            parts = line.split(";")
            marker = strip_quotes(parts[0].strip()).strip().lower()

            if marker in CUSTOMER_MARKERS:
                if len(parts) > 1:
                    customer_id = extract_identifier(parts[1])
            elif marker in METER_MARKERS:
                if len(parts) > 1:
                    meter_id = strip_quotes(parts[1].strip()).strip() or None
            elif _is_data_header(line):
                result.header_found = True
                state = ScanState.SCANNING_DATA

        # End of input is treated like a header: the data section is just empty
        if not result.header_found:
            logger.debug("No data header found in %s", source)

        kind = resolve_meter_kind(source_name, "\n".join(preamble_lines))
        result.customer_id = customer_id
        result.meter_id = meter_id
        result.kind_of_meter = kind

        if customer_id is None or meter_id is None:
            message = f"Could not extract customer id or meter id from {source}"
            result.skip(None, message)
            logger.warning(message)
            return result

        context = MeterSeriesContext(
            customer_id=customer_id, meter_id=meter_id, kind_of_meter=kind
        )
        self._import_rows(context, data_lines, result)

        logger.info(
            "Series import %s: %d readings for meter %s (%s), %d rows skipped",
            source,
            result.imported,
            meter_id,
            kind,
            len(result.diagnostics),
        )
        return result

    # ── Private helpers ───────────────────────────────────────────────────────

    def _import_rows(
        self,
        context: MeterSeriesContext,
        data_lines: list[tuple[int, str]],
        result: SeriesImportResult,
    ) -> None:
        customer: Optional[Customer] = None

        for line_number, line in data_lines:
            parts = line.split(";")
            if len(parts) < 2:
                result.skip(line_number, "expected at least 2 fields")
                continue

            date_text = strip_quotes(parts[0].strip())
            value_text = strip_quotes(parts[1].strip())
            comment = strip_quotes(parts[2].strip()) if len(parts) > 2 else ""

            # Empty cell means "no row"; an unparsable one still yields a record
            if not date_text or not value_text:
                result.skip(line_number, "empty date or reading value")
                logger.debug("Series line %d skipped: empty date or value", line_number)
                continue

            if customer is None:
                customer = self.store.find_customer(context.customer_id)
                if customer is None:
                    raise CustomerNotFoundError(context.customer_id)

            reading = Reading(
                id=uuid.uuid4(),
                customer=customer,
                customer_id=customer.id,
                meter_id=context.meter_id,
                kind_of_meter=context.kind_of_meter,
                date_of_reading=parse_date(date_text),
                meter_count=parse_decimal(value_text),
                comment=comment,
                substitute=False,  # imported rows are always real readings
            )
            self.store.create_reading(reading)
            result.imported += 1


def _is_separator(line: str) -> bool:
    return set(line) == {";"}


def _is_data_header(line: str) -> bool:
    lowered = line.lower()
    return HEADER_DATE_TOKEN in lowered and any(t in lowered for t in HEADER_VALUE_TOKENS)


def import_reading_series(
    store: RecordStore, text: str, source_name: Optional[str] = None
) -> int:
    """Entry point: import one series file and return the number of readings created."""
    return ReadingSeriesImporter(store).import_text(text, source_name).imported

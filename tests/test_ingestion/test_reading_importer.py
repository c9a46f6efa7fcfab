"""Tests for ReadingSeriesImporter — one meter's reading series export."""

import pytest
from datetime import date
from decimal import Decimal

from conftest import ERIKA_ID, PUMUKEL_ID, fixture_text, series_csv
from meterhub.models.reading import KindOfMeter
from meterhub.services.ingestion.base import CustomerNotFoundError, IdentifierFormatError
from meterhub.services.ingestion.reading_importer import (
    ReadingSeriesImporter,
    import_reading_series,
)


@pytest.fixture
def importer(memory_store):
    return ReadingSeriesImporter(memory_store)


def _readings(store):
    return sorted(store.list_readings(), key=lambda r: (r.date_of_reading is None, r.date_of_reading))


class TestSeriesHappyPath:
    def test_imports_rows(self, importer, memory_store, known_customer):
        result = importer.import_text(series_csv(PUMUKEL_ID), source_name="strom.csv")

        assert result.imported == 2
        assert result.header_found is True
        assert result.customer_id == PUMUKEL_ID
        assert result.meter_id == "MST-123456"
        assert result.kind_of_meter == KindOfMeter.ELECTRICITY

        first, second = _readings(memory_store)
        assert first.date_of_reading == date(2024, 1, 1)
        assert first.meter_count == Decimal("1234.5")
        assert first.comment == ""
        assert second.comment == "Test comment"

    def test_context_applies_to_every_row(self, importer, memory_store, known_customer):
        importer.import_text(series_csv(PUMUKEL_ID), source_name="strom.csv")
        for reading in memory_store.list_readings():
            assert reading.customer is known_customer
            assert reading.customer_id == PUMUKEL_ID
            assert reading.meter_id == "MST-123456"
            assert reading.kind_of_meter == KindOfMeter.ELECTRICITY
            assert reading.substitute is False

    def test_each_reading_gets_its_own_id(self, importer, memory_store, known_customer):
        importer.import_text(series_csv(PUMUKEL_ID), source_name="strom.csv")
        assert len({r.id for r in memory_store.list_readings()}) == 2

    def test_missing_comment_column(self, importer, memory_store, known_customer):
        text = series_csv(PUMUKEL_ID, rows=['"01.01.2024";"7,5"'])
        importer.import_text(text, source_name="wasser.csv")
        (reading,) = memory_store.list_readings()
        assert reading.comment == ""
        assert reading.kind_of_meter == KindOfMeter.WATER

    def test_unquoted_values(self, importer, memory_store, known_customer):
        text = "Kunde;ec617965-88b4-4721-8158-ee36c38e4db3;\nZählernummer;Xr-1;\n;;\nDatum;Zählerstand in MWh;Kommentar\n01.10.2018;1,3;\n"
        result = importer.import_text(text, source_name="heizung.csv")
        assert result.imported == 1
        assert memory_store.list_readings()[0].meter_count == Decimal("1.3")

    def test_markers_are_case_insensitive(self, importer, known_customer):
        text = series_csv(PUMUKEL_ID).replace('"Kunde"', '"KUNDE"').replace('"Zählernummer"', '"zählernummer"')
        assert importer.import_text(text, source_name="strom.csv").imported == 2

    def test_entry_point_returns_count(self, memory_store, known_customer):
        assert import_reading_series(memory_store, series_csv(PUMUKEL_ID), "strom.csv") == 2


class TestSeriesRowRules:
    def test_empty_value_skips_row(self, importer, memory_store, known_customer):
        text = series_csv(PUMUKEL_ID, rows=['"01.01.2024";"";""', '"02.01.2024";"5";""'])
        result = importer.import_text(text, source_name="strom.csv")
        assert result.imported == 1
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].line_number == 5

    def test_empty_date_skips_row(self, importer, known_customer):
        text = series_csv(PUMUKEL_ID, rows=['"";"12";""'])
        result = importer.import_text(text, source_name="strom.csv")
        assert result.imported == 0
        assert len(result.diagnostics) == 1

    def test_invalid_value_yields_null_count(self, importer, memory_store, known_customer):
        """An unparsable value is not the same as a missing one: the row is kept."""
        text = series_csv(PUMUKEL_ID, rows=['"01.01.2024";"n/a";"Display defekt"'])
        result = importer.import_text(text, source_name="strom.csv")
        assert result.imported == 1
        (reading,) = memory_store.list_readings()
        assert reading.meter_count is None
        assert reading.comment == "Display defekt"

    def test_invalid_date_yields_null_date(self, importer, memory_store, known_customer):
        text = series_csv(PUMUKEL_ID, rows=['"2024-01-01";"12";""'])
        result = importer.import_text(text, source_name="strom.csv")
        assert result.imported == 1
        assert memory_store.list_readings()[0].date_of_reading is None

    def test_single_field_row_is_skipped(self, importer, known_customer):
        text = series_csv(PUMUKEL_ID, rows=['"01.01.2024"'])
        result = importer.import_text(text, source_name="strom.csv")
        assert result.imported == 0
        assert "2 fields" in result.diagnostics[0].reason

    def test_header_only(self, importer, known_customer):
        result = importer.import_text(series_csv(PUMUKEL_ID, rows=[]), source_name="strom.csv")
        assert result.imported == 0
        assert result.header_found is True
        assert result.diagnostics == []


class TestSeriesSoftFailure:
    def test_missing_customer_marker(self, importer, memory_store):
        text = '"Zählernummer";"MST-1";\n"Datum";"Zählerstand"\n"01.01.2024";"1"\n'
        result = importer.import_text(text, source_name="strom.csv")
        assert result.imported == 0
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].line_number is None
        assert "strom.csv" in result.diagnostics[0].reason
        assert memory_store.list_readings() == []

    def test_missing_meter_marker(self, importer, known_customer):
        text = f'"Kunde";"{PUMUKEL_ID}";\n"Datum";"Zählerstand"\n"01.01.2024";"1"\n'
        result = importer.import_text(text, source_name="strom.csv")
        assert result.imported == 0
        assert result.meter_id is None
        assert len(result.diagnostics) == 1

    def test_empty_file(self, importer):
        result = importer.import_text("", source_name="strom.csv")
        assert result.imported == 0
        assert result.header_found is False

    def test_soft_failure_does_not_look_up_customer(self, importer):
        """No customer in the store and no meter id: soft failure, not CustomerNotFoundError."""
        text = f'"Kunde";"{PUMUKEL_ID}";\n"Datum";"Zählerstand"\n"01.01.2024";"1"\n'
        assert importer.import_text(text).imported == 0


class TestSeriesHardFailure:
    def test_unknown_customer_raises(self, importer, memory_store):
        with pytest.raises(CustomerNotFoundError) as exc_info:
            importer.import_text(series_csv(ERIKA_ID), source_name="strom.csv")
        assert exc_info.value.customer_id == ERIKA_ID
        assert memory_store.list_readings() == []

    def test_malformed_customer_uuid_raises(self, importer):
        with pytest.raises(IdentifierFormatError):
            importer.import_text(series_csv("not-a-uuid"), source_name="strom.csv")

    def test_unknown_customer_with_no_rows_is_not_an_error(self, importer):
        result = importer.import_text(series_csv(ERIKA_ID, rows=[]), source_name="strom.csv")
        assert result.imported == 0


class TestSeriesHeaderNeverFound:
    def test_rows_before_header_are_preamble(self, importer, known_customer):
        """Without a header line nothing after the preamble is treated as data."""
        text = f'"Kunde";"{PUMUKEL_ID}";\n"Zählernummer";"MST-1";\n"01.01.2024";"1"\n'
        result = importer.import_text(text, source_name="strom.csv")
        assert result.header_found is False
        assert result.imported == 0


class TestSeriesMeterKind:
    def test_kind_from_content_when_name_is_neutral(self, importer, memory_store, known_customer):
        text = fixture_text("strom.csv").replace(str(ERIKA_ID), str(PUMUKEL_ID))
        result = importer.import_text(text, source_name="upload.csv")
        assert result.kind_of_meter == KindOfMeter.ELECTRICITY

    def test_kind_unknown_without_hints(self, importer, known_customer):
        result = importer.import_text(series_csv(PUMUKEL_ID, meter_id="123"), source_name=None)
        assert result.kind_of_meter == KindOfMeter.UNKNOWN


class TestSeriesFixtures:
    def test_heizung_fixture(self, importer, memory_store, known_customer):
        result = importer.import_text(fixture_text("heizung.csv"), source_name="heizung.csv")
        assert result.imported == 2
        assert len(result.diagnostics) == 1
        assert {r.kind_of_meter for r in memory_store.list_readings()} == {KindOfMeter.HEATING}
        assert {r.meter_id for r in memory_store.list_readings()} == {"Xr-2018-2312456ab"}
        assert sorted(r.meter_count for r in memory_store.list_readings()) == [
            Decimal("1.3"),
            Decimal("2.5"),
        ]

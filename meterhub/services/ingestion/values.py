"""
Cell-level value parsers for the meter-reading tool exports.

The exports are German-locale: dates are dd.MM.yyyy and decimals use a comma.
Everything here is total (returns None instead of raising) except
extract_identifier, because an unparsable customer reference invalidates the
whole file section it heads.
"""

import re
import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from meterhub.services.ingestion.base import IdentifierFormatError

_DATE_RE = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")
_UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def parse_date(text: Optional[str]) -> Optional[date]:
    """Parse a strict dd.MM.yyyy date. None on empty input or mismatch."""
    if not text:
        return None
    text = text.strip()
    if not _DATE_RE.match(text):
        return None
    try:
        return datetime.strptime(text, "%d.%m.%Y").date()
    except ValueError:
        # e.g. 31.02.2024
        return None


def parse_decimal(text: Optional[str]) -> Optional[Decimal]:
    """Parse a decimal with either ',' or '.' as separator. None on failure."""
    if not text:
        return None
    cleaned = text.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def strip_quotes(text: str) -> str:
    """Remove one leading and one trailing double quote if both are present."""
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def extract_identifier(text: str) -> uuid.UUID:
    """
    Parse a (possibly quoted) canonical UUID string.

    Raises:
        IdentifierFormatError: if the token is not an 8-4-4-4-12 hex UUID.
    """
    cleaned = strip_quotes(text.strip()).strip()
    if not _UUID_RE.match(cleaned):
        raise IdentifierFormatError(f"Invalid identifier: {cleaned!r}")
    return uuid.UUID(cleaned)

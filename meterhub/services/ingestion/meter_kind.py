"""
Meter-kind classification.

Series files carry no explicit meter kind. The tools name their exports
after the utility (heizung.csv, strom.csv, wasser.csv), so the file name is
checked first; uploads with neutral names fall back to keyword heuristics on
the preamble text (meter number prefixes, units in the header).

Both functions are total: no match means UNBEKANNT, never an exception.
"""

from typing import Optional

from meterhub.models.reading import KindOfMeter

# Checked in order; first hit wins
_FILENAME_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    (KindOfMeter.HEATING, ("heizung",)),
    (KindOfMeter.ELECTRICITY, ("strom",)),
    (KindOfMeter.WATER, ("wasser",)),
]

_CONTENT_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    (KindOfMeter.HEATING, ("heizung", "heating", "mwh", "xr-")),
    (KindOfMeter.ELECTRICITY, ("strom", "kwh", "mst-")),
    (KindOfMeter.WATER, ("wasser", "water", "m³", "m3")),
]


def _match(text: Optional[str], table: list[tuple[str, tuple[str, ...]]]) -> str:
    if not text:
        return KindOfMeter.UNKNOWN
    lowered = text.lower()
    for kind, keywords in table:
        if any(k in lowered for k in keywords):
            return kind
    return KindOfMeter.UNKNOWN


def classify_meter_kind(filename: Optional[str]) -> str:
    """Classify by file name: heizung → HEIZUNG, strom → STROM, wasser → WASSER."""
    return _match(filename, _FILENAME_KEYWORDS)


def classify_meter_kind_from_content(content: Optional[str]) -> str:
    """Classify from preamble/header text using unit and meter-number hints."""
    return _match(content, _CONTENT_KEYWORDS)


def resolve_meter_kind(filename: Optional[str], preamble: Optional[str]) -> str:
    """File name first; content heuristics only when the name says nothing."""
    kind = classify_meter_kind(filename)
    if kind == KindOfMeter.UNKNOWN:
        kind = classify_meter_kind_from_content(preamble)
    return kind

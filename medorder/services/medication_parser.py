"""Medication Order String Parser.

Turns one clinician-typed order line into normalized structured fields.
Deterministic rule tables only: every field can be traced back to the rule
that produced it.

Public API
----------
    result: ParsedMedication = parse_medication_string("Sevelamer 500mg/tab BID")
    # name="Sevelamer", dosage="500mg/tab", frequency="BID", route="PO"

Engine summary
--------------
    Route       first matching (pattern, code) rule, default PO
    Frequency   ordered rule table + PRN augmentation + dose-series fallback
    Dosage      compound units before single units, first match wins
    Name        text before the earliest route / frequency / dosage cue
"""
from __future__ import annotations

import logging
import re

from medorder.models.medication import ParsedMedication
from medorder.services.dosage_extractor import find_dosage
from medorder.services.frequency_classifier import match_frequency
from medorder.services.route_classifier import DEFAULT_ROUTE, match_route

logger = logging.getLogger(__name__)

# Separators that commonly trail a drug name before its sig: "Drug - 5mg", "Drug: BID"
_TRAILING_SEPARATORS_RE = re.compile(r"[\s#:;,\-]+$")
_WHITESPACE_RE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_name(text: str) -> str:
    """
    Return the drug name in *text*.

    The cut point is the earliest offset among the dosage token, the frequency
    trigger and the route trigger.  With no cue at all (or a cue at the very
    start, leaving nothing before it) the whole input is the name.
    """
    trimmed = (text or "").strip()
    cues: list[int] = []

    dosage = find_dosage(trimmed)
    if dosage:
        cues.append(dosage.start)
    frequency = match_frequency(trimmed)
    if frequency:
        cues.append(frequency.start)
    route = match_route(trimmed)
    if route:
        cues.append(route.start)

    if not cues:
        return _collapse(trimmed)

    head = _TRAILING_SEPARATORS_RE.sub("", trimmed[: min(cues)])
    name = _collapse(head)
    return name or _collapse(trimmed)


def parse_medication_string(text: str) -> ParsedMedication:
    """
    Parse a free-text medication order into name, dosage, frequency and route.

    Parameters
    ----------
    text : str
        One order line, e.g. "Insulin glargine 10 units SC at bedtime".

    Returns
    -------
    ParsedMedication
        Always returns a value; unrecognized parts are empty strings and the
        route falls back to ``PO``.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        return ParsedMedication()

    route = match_route(trimmed)
    frequency = match_frequency(trimmed)
    dosage = find_dosage(trimmed)

    result = ParsedMedication(
        name=extract_name(trimmed),
        dosage=dosage.text if dosage else "",
        frequency=frequency.value if frequency else "",
        route=route.value if route else DEFAULT_ROUTE,
    )
    logger.debug("parse_medication_string: %r → %s", text, result)
    return result

"""Dosage extractor.

Compound units must be tried before the generic single-unit form, otherwise
``"20mcg/mL"`` would be cut down to ``"20mcg"``.  ``DOSAGE_PATTERNS`` is
therefore ordered most-specific first and the first pattern that matches
anywhere in the text wins.

    "Sevelamer 500mg/tab BID"         → "500mg/tab"
    "Tramadol/APAP 37.5 mg/325 1 tab" → "37.5 mg/325"
    "Vitamin D3 20mcg/mL drops"       → "20mcg/mL"
    "Movicol 1 sachet OD"             → "1 sachet"
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

_NUM = r"\d+(?:\.\d+)?"


@dataclass(frozen=True)
class DosageToken:
    """The matched dosage and its span in the source text."""

    text: str
    start: int
    end: int


# ---------------------------------------------------------------------------
# Dosage patterns, most specific first
# ---------------------------------------------------------------------------
DOSAGE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    # 20mcg/mL, 100mg/5mL, 2 mEq/mL
    (
        "ratio_concentration",
        re.compile(
            rf"\b{_NUM}\s*(?:mg|g|mcg|iu|ml|meq)\s*/\s*(?:{_NUM})?\s*(?:ml|mg|g)\b",
            re.IGNORECASE,
        ),
    ),
    # 37.5 mg/325, 500mg/tab, 1000 IU
    (
        "combination_dose",
        re.compile(
            rf"\b{_NUM}\s*(?:mg|g|mcg|iu)\b"
            rf"(?:\s*/\s*(?:{_NUM}(?:\s*(?:mg|g)\b)?|tab(?:let)?\b|cap(?:sule)?\b))?",
            re.IGNORECASE,
        ),
    ),
    # 1 tab, 2 capsules, 1 sachet, 10 units, 5 mL, 3 doses
    (
        "countable_form",
        re.compile(
            rf"\b{_NUM}\s*(?:tab(?:s|let|lets)?|cap(?:s|sule|sules)?|sachets?|tablets?|capsules?"
            r"|doses?|units?|ml|cc)\b",
            re.IGNORECASE,
        ),
    ),
    # 500mg, 20 mEq
    (
        "plain_dose",
        re.compile(rf"\b{_NUM}\s*(?:mg|g|mcg|iu|meq)\b", re.IGNORECASE),
    ),
)


def find_dosage(text: str) -> Optional[DosageToken]:
    """First dosage token in *text* according to pattern priority, or None."""
    for name, pattern in DOSAGE_PATTERNS:
        m = pattern.search(text)
        if m:
            logger.debug("find_dosage: pattern=%s %r at %d", name, m.group(0), m.start())
            return DosageToken(text=m.group(0).strip(), start=m.start(), end=m.end())
    return None


def extract_dosage(text: str) -> str:
    """Trimmed dosage substring of *text*, or ``""``."""
    token = find_dosage(text or "")
    return token.text if token else ""

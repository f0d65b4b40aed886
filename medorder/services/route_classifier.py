"""Route-of-administration classifier.

Scans the order text against an ordered ``(pattern, code)`` table; the first
rule that matches anywhere wins and later rules are not consulted.  Text
without any route cue is oral (``PO``).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from medorder.services.cues import CueMatch

logger = logging.getLogger(__name__)

DEFAULT_ROUTE = "PO"


@dataclass(frozen=True)
class RouteRule:
    pattern: re.Pattern[str]
    code: str


# ---------------------------------------------------------------------------
# Route rules, evaluated in order (first match wins)
# Short abbreviations are whole words: "Nebivolol" or "Imipramine" carry no
# route.
# ---------------------------------------------------------------------------
ROUTE_RULES: tuple[RouteRule, ...] = (
    RouteRule(re.compile(r"\b(?:intravenous(?:ly)?|iv\b|i\.v\.)", re.IGNORECASE), "IV"),
    RouteRule(re.compile(r"\b(?:intramuscular(?:ly)?|im\b|i\.m\.)", re.IGNORECASE), "IM"),
    RouteRule(re.compile(r"\b(?:subcutaneous(?:ly)?|sc\b|s\.c\.|subq\b)", re.IGNORECASE), "SC"),
    RouteRule(re.compile(r"\b(?:sublingual(?:ly)?|sl\b|s\.l\.)", re.IGNORECASE), "SL"),
    RouteRule(re.compile(r"\b(?:rectal(?:ly)?|per\s+rectum|pr\b|p\.r\.)", re.IGNORECASE), "PR"),
    RouteRule(re.compile(r"\b(?:oral(?:ly)?\b|by\s+mouth|po\b|p\.o\.)", re.IGNORECASE), "PO"),
    RouteRule(
        re.compile(r"\b(?:topical(?:ly)?|apply|ointment|lotion|cream|ung\b|top\b)", re.IGNORECASE),
        "TOP",
    ),
    RouteRule(
        re.compile(r"\b(?:inhal(?:ation|ers?|ed|e)\b|neb\b|nebuliz(?:ed|er)|inh\b)", re.IGNORECASE),
        "INH",
    ),
    RouteRule(re.compile(r"\b(?:nasal\s*cannula|intranasal|nasal)\b", re.IGNORECASE), "INH"),
)


def match_route(text: str) -> Optional[CueMatch]:
    """Return the first route rule hit in *text* with its offset, or None."""
    for rule in ROUTE_RULES:
        m = rule.pattern.search(text)
        if m:
            logger.debug("match_route: %r → %s at %d", m.group(0), rule.code, m.start())
            return CueMatch(value=rule.code, start=m.start())
    return None


def classify_route(text: str) -> str:
    """Standardized route code for *text*; ``PO`` when no cue is present."""
    match = match_route(text or "")
    return match.value if match else DEFAULT_ROUTE

"""Position-aware classifier results.

The route and frequency matchers report where their trigger starts so the
name extractor can cut the drug name at the earliest cue.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CueMatch:
    """A classifier decision plus where its trigger starts in the source text."""

    value: str
    start: int

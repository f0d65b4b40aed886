"""Polars-powered batch parsing of medication lists.

Medication lists arrive as spreadsheets exported from other systems: one
order line per row, sometimes with a dispensed-quantity column next to it.
This module applies :func:`parse_medication_string` to every row and appends
the structured fields, the days supply and the refill date, so a whole list
can be reviewed or re-imported at once.
"""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import polars as pl

from medorder.services.days_supply import days_supply
from medorder.services.medication_parser import parse_medication_string
from medorder.services.refill import refill_date

logger = logging.getLogger(__name__)

PARSED_COLUMNS = ("name", "dosage", "frequency", "route")

PARSED_SCHEMA: dict[str, pl.DataType] = {column: pl.Utf8 for column in PARSED_COLUMNS}

# Column name candidates for the order-text column; the first match wins,
# falling back to the first column of the file.
_ORDER_COLUMNS = [
    "order", "Order", "ORDER",
    "medication", "Medication", "MEDICATION",
    "sig", "Sig", "SIG",
    "name", "Name", "NAME",
    "description", "Description",
]


def read_medication_list(file_path: str | Path, column: Optional[str] = None) -> pl.DataFrame:
    """
    Read a CSV / TSV / Excel medication list.

    Returns the file as a string-typed DataFrame with blank order rows removed.
    The order-text column is *column* when given, else the first recognized
    candidate, else the first column; it is renamed to ``order``.  A
    pre-existing ``order`` column that was not chosen becomes ``order_original``.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix in {".xlsx", ".xls"}:
        df = pl.read_excel(path)
    elif suffix in {".tsv", ".txt"}:
        df = pl.read_csv(path, separator="\t", infer_schema_length=0)
    else:
        df = pl.read_csv(path, infer_schema_length=0)

    if column is not None and column not in df.columns:
        raise ValueError(f"Column {column!r} not found in {path.name}; available: {df.columns}")

    order_col = column or next((c for c in _ORDER_COLUMNS if c in df.columns), df.columns[0])
    df = df.with_columns(pl.col(order_col).cast(pl.Utf8).str.strip_chars().alias(order_col))
    df = df.filter(pl.col(order_col).is_not_null() & (pl.col(order_col) != ""))
    if order_col != "order":
        if "order" in df.columns:
            # e.g. an order-number column next to the chosen sig column
            df = df.rename({"order": "order_original"})
            logger.info("read_medication_list: existing 'order' column kept as 'order_original'")
        df = df.rename({order_col: "order"})

    logger.info("read_medication_list: %s rows from %s (column=%s)", df.height, path.name, order_col)
    return df


def parse_series(series: pl.Series) -> pl.DataFrame:
    """
    Parse every element of a Polars :class:`~polars.Series` of order lines.

    Returns a DataFrame with one row per element and the columns
    ``name, dosage, frequency, route`` (``None`` → parsed as ``""``).
    """
    rows = [
        parse_medication_string(text).model_dump()
        for text in series.cast(pl.Utf8).fill_null("").to_list()
    ]
    return pl.DataFrame(rows, schema=PARSED_SCHEMA)


def _to_quantity(value: object) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError:
        return None


def parse_dataframe_column(
    df: pl.DataFrame,
    col: str,
    quantity_col: Optional[str] = None,
    start_date: Optional[date] = None,
) -> pl.DataFrame:
    """
    Return *df* with the parsed fields of *col* appended.

    When *quantity_col* is given, ``days_supply`` (Float64) and
    ``refill_date`` (Date) are appended too; both are null where the supply
    is unknown or the quantity is missing.
    """
    parsed = parse_series(df[col])
    result = pl.concat([df, parsed.rename({c: f"{col}_{c}" for c in PARSED_COLUMNS})], how="horizontal")

    if quantity_col is None:
        return result

    start = start_date or date.today()
    quantities = [_to_quantity(v) for v in df[quantity_col].to_list()]
    frequencies = parsed["frequency"].to_list()

    supplies: list[Optional[float]] = []
    refills: list[Optional[date]] = []
    for quantity, frequency in zip(quantities, frequencies):
        if quantity is None or not frequency:
            supplies.append(None)
            refills.append(None)
            continue
        supplies.append(days_supply(quantity, frequency))
        refills.append(refill_date(start, quantity, frequency))

    unknown = sum(1 for s in supplies if s is None)
    logger.info("parse_dataframe_column: %s rows, %s without a known days supply", len(supplies), unknown)

    return result.with_columns(
        pl.Series("days_supply", supplies, dtype=pl.Float64),
        pl.Series("refill_date", refills, dtype=pl.Date),
    )


def export_parsed(df: pl.DataFrame, output_path: str | Path) -> Path:
    """Write *df* as Excel (``.xlsx``) or CSV depending on the suffix."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".xlsx":
        df.write_excel(path, worksheet="Medications")
    else:
        df.write_csv(path)
    logger.info("export_parsed: %s rows written to %s", df.height, path)
    return path

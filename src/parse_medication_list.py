import argparse
import logging
from datetime import date
from pathlib import Path

from medorder.core.config import configure_logging
from medorder.services.batch import export_parsed, parse_dataframe_column, read_medication_list

BASE_DIR = Path(__file__).resolve().parent.parent
OUTPUT_DIR = BASE_DIR / "output"

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parse a medication list into structured order fields.")
    parser.add_argument("--input", required=True, help="CSV, TSV or Excel file with one order line per row.")
    parser.add_argument(
        "--output",
        default=None,
        help="Output path (.csv or .xlsx). Defaults to /output/<input stem>_parsed.csv",
    )
    parser.add_argument("--column", default=None, help="Name of the order-text column (auto-detected if omitted).")
    parser.add_argument("--quantity-column", default=None, help="Column with the dispensed quantity.")
    parser.add_argument(
        "--start-date",
        default=None,
        type=date.fromisoformat,
        help="Dispensing date used for refill dates (YYYY-MM-DD, defaults to today).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> Path:
    args = _parse_args(argv)
    configure_logging()

    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else OUTPUT_DIR / f"{input_path.stem}_parsed.csv"

    df = read_medication_list(input_path, column=args.column)
    result = parse_dataframe_column(
        df,
        "order",
        quantity_col=args.quantity_column,
        start_date=args.start_date,
    )
    written = export_parsed(result, output_path)
    print(f"Medication list parsed: {written}")
    return written


if __name__ == "__main__":
    main()

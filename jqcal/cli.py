"""``jq-trading-calendar``: fetch the trading calendar from the command line."""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime
from pathlib import Path

from jqcal.client import JQuantsClient
from jqcal.exceptions import JQuantsError
from jqcal.trading_calendar import CalendarQueryParams, HolidayDivision, to_frame

logger = logging.getLogger(__name__)


def _iso_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from e


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from e
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jq-trading-calendar",
        description="Fetch trading calendar (/v1/markets/trading_calendar)",
    )
    parser.add_argument(
        "--holidaydivision",
        choices=["0", "1", "2", "3"],
        default=None,
        help="Holiday division (optional)",
    )
    parser.add_argument(
        "--from", dest="from_", type=_iso_date, default=None, help="From date YYYY-MM-DD"
    )
    parser.add_argument("--to", type=_iso_date, default=None, help="To date YYYY-MM-DD")
    parser.add_argument(
        "--limit", type=_non_negative_int, default=20, help="Rows to display (0 for all)"
    )
    parser.add_argument("--save", default="", help="Path to save CSV/Parquet (by extension)")
    parser.add_argument("--env-file", default=".env", help="Credentials file (default: .env)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    params = CalendarQueryParams(
        holiday_division=HolidayDivision(int(args.holidaydivision))
        if args.holidaydivision is not None
        else None,
        from_date=args.from_,
        to_date=args.to,
    )

    try:
        with JQuantsClient.from_env(env_file=args.env_file) as client:
            entries = client.trading_calendar(params)
    except JQuantsError as e:
        logger.error(f"Trading calendar request failed: {e}")
        return 1

    df = to_frame(entries)
    if args.save:
        out = Path(args.save)
        out.parent.mkdir(parents=True, exist_ok=True)
        if out.suffix.lower() == ".parquet":
            try:
                df.to_parquet(out, index=False)
            except ImportError as e:
                logger.error(f"Saving Parquet needs the parquet extra (pyarrow): {e}")
                return 1
        else:
            df.to_csv(out, index=False)
        print(f"Saved {len(df)} rows to {out}")

    if args.limit:
        print(df.head(args.limit).to_string(index=False))
    else:
        print(df.to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

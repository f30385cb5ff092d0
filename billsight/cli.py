#!/usr/bin/env python3
"""
Billsight CLI — summarize or export bill files, or start the API server.

USAGE:
  python -m billsight.cli summary 微信支付账单.xlsx 支付宝交易明细.csv
  python -m billsight.cli summary alipay.csv --start 2024-01-01 --end 2024-01-31
  python -m billsight.cli export alipay.csv --output report.xlsx
  python -m billsight.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import asyncio
import datetime as dt
import os
import sys
from pathlib import Path

from billsight.analytics.summary import category_stats, date_range_label, weekly_series
from billsight.config import CURRENCY_SYMBOL, REPORTS_FOLDER
from billsight.data.loader import LocalFile
from billsight.data.schemas import DateRange, MergeMode, SessionSnapshot, TransactionType
from billsight.data.store import SessionStore
from billsight.errors import BillsightError
from billsight.logging_setup import configure_logging
from billsight.reports.export import build_export_snapshot, export_to_file, export_with_retry


def _iso_date(value: str) -> dt.date:
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value}")


def _load_session(args) -> SessionSnapshot:
    """Upload the given files into a fresh store and apply the date range."""
    store = SessionStore()
    files = [LocalFile(Path(p)) for p in args.files]
    asyncio.run(store.upload(files, MergeMode.CUMULATIVE))
    return store.set_date_range(DateRange(start=args.start, end=args.end))


def _money(value: float) -> str:
    return f"{CURRENCY_SYMBOL}{value:>12,.2f}"


def cmd_summary(args):
    """Print totals, top expense categories, and the weekly series."""
    snapshot = _load_session(args)
    s = snapshot.summary
    tx = snapshot.filtered

    print("\n" + "=" * 60)
    print("  BILLSIGHT — SUMMARY")
    print("=" * 60)
    print(f"  Period:        {date_range_label(tx) or 'N/A'}  ({snapshot.date_range.label})")
    print(f"  Income:        {_money(s.total_income)}")
    print(f"  Expense:       {_money(s.total_expense)}")
    print(f"  Net:           {_money(s.net_income)}")
    print(f"  Transactions:  {s.transaction_count:,}")

    stats = category_stats(tx, TransactionType.EXPENSE)
    if stats:
        print("\n  EXPENSE CATEGORIES\n")
        for i, c in enumerate(stats[:10], 1):
            print(f"  {i:<4}{c.category[:24]:<26}{_money(c.amount)}  {c.percentage:5.1f}%  ({c.count})")

    weeks = weekly_series(tx)
    if weeks:
        print("\n  WEEKLY\n")
        for w in weeks:
            print(f"  {w.week:<10}{w.week_start.isoformat():<12}in {_money(w.income)}   out {_money(w.expense)}")
    print()


def cmd_export(args):
    """Write the workbook report for the given files."""
    snapshot = _load_session(args)
    output = Path(args.output) if args.output else (
        REPORTS_FOLDER / f"finance_report_{dt.datetime.now():%Y%m%d_%H%M%S}.xlsx"
    )
    path = export_with_retry(lambda snap: export_to_file(snap, output), build_export_snapshot(snapshot))
    print(f"\n  Report saved to: {path}\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Billsight API on port {args.port}...")
    uvicorn.run("billsight.main:app", host="0.0.0.0", port=args.port, reload=args.reload)


def _add_file_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("files", nargs="+", help="WeChat Pay / Alipay export file(s)")
    parser.add_argument("--start", type=_iso_date, help="First day to include (YYYY-MM-DD)")
    parser.add_argument("--end", type=_iso_date, help="Last day to include (YYYY-MM-DD)")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Billsight — personal bill analytics for WeChat Pay / Alipay exports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: BILLSIGHT_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    summary_parser = subparsers.add_parser("summary", help="Print a summary of bill files")
    _add_file_args(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    export_parser = subparsers.add_parser("export", help="Export a workbook report")
    _add_file_args(export_parser)
    export_parser.add_argument("--output", help="Output .xlsx path (default: reports folder)")
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        configure_logging(args.log_level)
        args.func(args)
    except (BillsightError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

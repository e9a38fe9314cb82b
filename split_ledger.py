"""
SplitLedger
- Record who paid what and who owes what share of each shared expense.
- Show net balances and the simplified set of repayments for a group.
- Export a CSV of expenses or an Excel report with balances and settlements.

Run:
  python split_ledger.py debts ledger.json --group trip

Dependencies:
  pip install openpyxl
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from computations import compute_debts, compute_group_debts, filter_expenses, settlement_to_expense
from config import load_ledger
from csv_handler import export_expenses_to_csv
from excel_export import export_excel
from models import Ledger
from utils import parse_date

logger = logging.getLogger(__name__)


def _balances_and_debts(ledger: Ledger, group_id: Optional[str]):
    if group_id is not None:
        return compute_group_debts(ledger, group_id)
    history = ledger.expenses + [settlement_to_expense(s) for s in ledger.settlements]
    return compute_debts(history, ledger.participant_ids())


def _cmd_balances(args, ledger: Ledger) -> None:
    names = ledger.display_names()
    balances, _ = _balances_and_debts(ledger, args.group)
    for p, v in sorted(balances.items(), key=lambda x: (-x[1], x[0])):
        print(f"{names.get(p, p)}\t{v:+.2f} {ledger.currency}")


def _cmd_debts(args, ledger: Ledger) -> None:
    names = ledger.display_names()
    _, debts = _balances_and_debts(ledger, args.group)
    if not debts:
        print("All settled up.")
    for d in debts:
        print(f"{names.get(d.from_id, d.from_id)} pays {names.get(d.to_id, d.to_id)} "
              f"{d.amount:.2f} {ledger.currency}")


def _cmd_export_excel(args, ledger: Ledger) -> None:
    start = parse_date(args.start) if args.start else None
    end = parse_date(args.end) if args.end else None
    export_excel(ledger, args.output, group_id=args.group, start=start, end=end)
    logger.info("wrote %s", args.output)


def _cmd_export_csv(args, ledger: Ledger) -> None:
    if args.group is not None:
        ledger.find_group(args.group)
    exps = filter_expenses(ledger.expenses, group_id=args.group)
    export_expenses_to_csv(exps, args.output, ledger.participants)
    logger.info("wrote %d expenses to %s", len(exps), args.output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="split-ledger", description="Shared expense balances and settlements")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_ in (
        ("balances", _cmd_balances, "net balance per participant"),
        ("debts", _cmd_debts, "simplified repayments"),
    ):
        p = sub.add_parser(name, help=help_)
        p.add_argument("ledger")
        p.add_argument("--group")
        p.set_defaults(func=func)

    p = sub.add_parser("export-excel", help="Excel report")
    p.add_argument("ledger")
    p.add_argument("output")
    p.add_argument("--group")
    p.add_argument("--start", help="YYYY-MM-DD")
    p.add_argument("--end", help="YYYY-MM-DD")
    p.set_defaults(func=_cmd_export_excel)

    p = sub.add_parser("export-csv", help="expenses as CSV")
    p.add_argument("ledger")
    p.add_argument("output")
    p.add_argument("--group")
    p.set_defaults(func=_cmd_export_csv)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        ledger = load_ledger(args.ledger)
        args.func(args, ledger)
    except (OSError, ValueError, KeyError) as ex:
        print(f"error: {ex}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Excel export functionality for SplitLedger
"""
from __future__ import annotations
from datetime import date
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Ledger, category_name
from computations import (
    category_totals,
    compute_debts,
    compute_summary,
    filter_expenses,
    monthly_totals,
    settlement_to_expense,
    validate_pairings,
)


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            v = cell.value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _money_format(ws, columns, first_row=2):
    for r in range(first_row, ws.max_row + 1):
        for c in columns:
            ws.cell(r, c).number_format = "0.00"


def export_excel(
    ledger: Ledger,
    filepath: str,
    group_id: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> None:
    """
    Export ledger report to Excel file with sheets:
    - Expenses
    - Summary (paid / owed / net per participant)
    - Categories
    - Monthly
    - Settlements (simplified debts)
    Restricted to one group when group_id is given.
    """
    names = ledger.display_names()
    pairings = None
    if group_id is not None:
        group = ledger.find_group(group_id)
        people = list(group.members)
        if group.pairing_mode and group.pairings:
            validate_pairings(group.pairings, people)
            pairings = group.pairings
        settlements = [s for s in ledger.settlements if s.group_id == group_id]
    else:
        people = ledger.participant_ids()
        settlements = list(ledger.settlements)

    exps = filter_expenses(ledger.expenses, start, end, group_id=group_id)
    history = exps + filter_expenses([settlement_to_expense(s) for s in settlements], start, end)

    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    # Expenses sheet
    ws = wb.create_sheet("Expenses")
    ws.append(["Date", "Title", "Category", "Amount", "Paid by", "Split", "Notes"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for e in sorted(exps, key=lambda e: (e.date, e.title)):
        paid_by = ", ".join(names.get(p, p) for p in e.payers)
        split = ", ".join(f"{names.get(p, p)} {amt:.2f}" for p, amt in e.splits.items())
        ws.append([e.date, e.title, category_name(e.category), e.amount, paid_by, split, e.notes])
    if ws.max_row >= 2:
        ws.append(["TOTAL", "", "", f"=SUM(D2:D{ws.max_row})"])
        ws.cell(ws.max_row, 1).font = Font(bold=True)
    _money_format(ws, [4])
    _autosize_columns(ws)

    # Summary sheet
    ws = wb.create_sheet("Summary")
    summary = compute_summary(history, people)
    ws.append(["Participant", "Paid", "Owed", "Net (Paid-Owed)"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for p in people:
        s = summary[p]
        ws.append([names.get(p, p), s["paid"], s["owed"], s["net"]])
    _money_format(ws, range(2, 5))
    _autosize_columns(ws)

    # Categories sheet
    ws = wb.create_sheet("Categories")
    ws.append(["Category", "Total"])
    _style_header(ws, 1)
    for cat, total in category_totals(exps):
        ws.append([category_name(cat), total])
    _money_format(ws, [2])
    _autosize_columns(ws)

    # Monthly sheet
    ws = wb.create_sheet("Monthly")
    ws.append(["Month", "Total"])
    _style_header(ws, 1)
    for month, total in monthly_totals(exps):
        ws.append([month, total])
    _money_format(ws, [2])
    _autosize_columns(ws)

    # Settlements sheet
    ws = wb.create_sheet("Settlements")
    ws.append(["From (Debtor)", "To (Creditor)", f"Amount ({ledger.currency})"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    _, debts = compute_debts(history, people, pairings)
    for d in debts:
        ws.append([names.get(d.from_id, d.from_id), names.get(d.to_id, d.to_id), d.amount])
    _money_format(ws, [3])
    _autosize_columns(ws)

    wb.save(filepath)

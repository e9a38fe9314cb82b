"""
CSV export and import functionality for SplitLedger
"""
from __future__ import annotations
import csv
from typing import Dict, List, Optional

from models import Expense, Participant

COLUMNS = ['id', 'date', 'title', 'category', 'group_id', 'amount', 'split_mode',
           'payers', 'splits', 'paid_by', 'notes']


def _format_alloc(alloc: Dict[str, float]) -> str:
    for k in alloc:
        if ';' in k:
            raise ValueError(f"Participant id {k!r} contains ';' and cannot be written to CSV")
    return ';'.join([f"{k}:{v}" for k, v in alloc.items()])


def _parse_alloc(s: str) -> Dict[str, float]:
    out = {}
    if s:
        for pair in s.split(';'):
            if ':' in pair:
                k, v = pair.rsplit(':', 1)
                out[k.strip()] = float(v.strip())
    return out


def export_expenses_to_csv(
    expenses: List[Expense],
    filepath: str,
    participants: Optional[List[Participant]] = None,
) -> None:
    """
    Export expenses list to CSV file.
    Allocations are written as "id:amount;id:amount", so ids must not contain
    ";". paid_by holds display names when participants are given.
    """
    names = {p.id: p.name for p in participants or []}
    rows = []
    for e in expenses:
        paid_by = ', '.join(names.get(p, p) for p in e.payers)
        rows.append([
            e.id,
            e.date,
            e.title,
            e.category,
            e.group_id,
            e.amount,
            e.split_mode,
            _format_alloc(e.payers),
            _format_alloc(e.splits),
            paid_by,
            e.notes,
        ])
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(COLUMNS)
        writer.writerows(rows)


def import_expenses_from_csv(filepath: str) -> List[Expense]:
    """
    Import expenses list from CSV file
    Returns list of Expense objects
    """
    expenses = []
    with open(filepath, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            expenses.append(Expense(
                id=row['id'],
                title=row['title'],
                amount=float(row['amount']),
                date=row['date'],
                payers=_parse_alloc(row['payers']),
                splits=_parse_alloc(row['splits']),
                split_mode=row.get('split_mode') or 'equal',
                group_id=row.get('group_id') or '',
                category=row.get('category') or 'other',
                notes=row.get('notes') or '',
            ))
    return expenses

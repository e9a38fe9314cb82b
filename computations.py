"""
Balance and settlement computations for SplitLedger
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models import SPLIT_MODES, Debt, Expense, Ledger, Pairing, Settlement
from utils import parse_date, today_str

logger = logging.getLogger(__name__)

# Balances within +/- EPSILON of zero are settled.
EPSILON = 0.01


class PairingError(ValueError):
    """Invalid pairing configuration"""


# ---------- Split allocation ----------

def allocate(
    total: float,
    policy: str,
    participant_ids: Sequence[str],
    weights: Optional[Sequence[float]] = None,
) -> List[Tuple[str, float]]:
    """
    Divide total among participants under a split policy.
    Returns list of (participant_id, amount) pairs, or [] on invalid input.
    Equal, percent and shares round each share to 2 decimals independently;
    the rounded shares may drift from total by a cent and are not corrected.
    """
    ids = list(participant_ids)
    if not ids or policy not in SPLIT_MODES:
        return []

    if policy == "equal":
        per = total / len(ids)
        return [(p, round(per, 2)) for p in ids]

    if weights is None or len(weights) != len(ids):
        return []

    if policy == "exact":
        return [(p, float(w)) for p, w in zip(ids, weights)]
    if policy == "percent":
        return [(p, round(total * w / 100.0, 2)) for p, w in zip(ids, weights)]
    if policy == "shares":
        total_shares = sum(weights)
        if total_shares == 0:
            return []
        return [(p, round(total * w / total_shares, 2)) for p, w in zip(ids, weights)]
    return []


def build_expense(
    id: str,
    title: str,
    total: float,
    payer_id: str,
    policy: str,
    participant_ids: Sequence[str],
    weights: Optional[Sequence[float]] = None,
    **fields,
) -> Expense:
    """Create a single-payer expense whose splits come from allocate()"""
    shares = allocate(total, policy, participant_ids, weights)
    if not shares:
        raise ValueError(
            f"Cannot split {total} by '{policy}' among {len(participant_ids)} participants "
            f"with {0 if weights is None else len(weights)} values"
        )
    fields.setdefault("date", today_str())
    splits: Dict[str, float] = {}
    for p, amt in shares:
        splits[p] = splits.get(p, 0.0) + amt
    return Expense(
        id=id,
        title=title,
        amount=float(total),
        payers={payer_id: float(total)},
        splits=splits,
        split_mode=policy,
        **fields,
    )


# ---------- Balances ----------

def aggregate_balances(expenses: Iterable[Expense], participant_ids: Iterable[str]) -> Dict[str, float]:
    """
    Net balance per participant: positive is owed money, negative owes money.
    Ids missing from the roster are skipped.
    """
    balances = {p: 0.0 for p in participant_ids}
    for e in expenses:
        for p, amt in e.payers.items():
            if p in balances:
                balances[p] += float(amt)
            else:
                logger.debug("expense %s: skipping unknown payer %s", e.id, p)
        for p, amt in e.splits.items():
            if p in balances:
                balances[p] -= float(amt)
            else:
                logger.debug("expense %s: skipping unknown participant %s", e.id, p)
    return balances


def round_balances(balances: Dict[str, float]) -> Dict[str, float]:
    # + 0.0 turns -0.0 into 0.0
    return {p: round(v, 2) + 0.0 for p, v in balances.items()}


def participant_balance(participant_id: str, expenses: Iterable[Expense]) -> float:
    """Rounded net balance of one participant over the given expenses"""
    balance = 0.0
    for e in expenses:
        balance += float(e.payers.get(participant_id, 0.0))
        balance -= float(e.splits.get(participant_id, 0.0))
    return round(balance, 2) + 0.0


# ---------- Pairings ----------

def validate_pairings(pairings: Iterable[Pairing], participant_ids: Optional[Iterable[str]] = None) -> None:
    """Reject pairings that overlap, repeat a member or name a foreign representative"""
    roster = set(participant_ids) if participant_ids is not None else None
    seen: Dict[str, Pairing] = {}
    for pr in pairings:
        if pr.member_a == pr.member_b:
            raise PairingError(f"Pairing repeats member '{pr.member_a}'")
        if pr.representative is not None and pr.representative not in pr.members:
            raise PairingError(
                f"Representative '{pr.representative}' is not a member of pairing "
                f"{pr.member_a}/{pr.member_b}"
            )
        for m in pr.members:
            if roster is not None and m not in roster:
                raise PairingError(f"Paired participant '{m}' is not in the roster")
            if m in seen:
                other = seen[m]
                raise PairingError(
                    f"Participant '{m}' is in two pairings: "
                    f"{other.member_a}/{other.member_b} and {pr.member_a}/{pr.member_b}"
                )
            seen[m] = pr


def merge_pairings(balances: Dict[str, float], pairings: Iterable[Pairing]) -> Dict[str, float]:
    """
    Fold each pairing's two balances into one keyed by the pairing label.
    Pairings must already be disjoint (see validate_pairings).
    """
    out = dict(balances)
    for pr in pairings:
        combined = out.pop(pr.member_a, 0.0) + out.pop(pr.member_b, 0.0)
        out[pr.label] = combined
    return out


# ---------- Debt simplification ----------

def simplify_debts(balances: Dict[str, float]) -> List[Debt]:
    """
    Greedy settlement: debtors pay creditors, largest amounts first.
    net>0 creditor; net<0 debtor; |net|<=EPSILON is settled.
    Ties are broken by entity id so the result is deterministic.
    """
    creditors = [[p, v] for p, v in balances.items() if v > EPSILON]
    debtors = [[p, -v] for p, v in balances.items() if v < -EPSILON]
    creditors.sort(key=lambda x: (-x[1], x[0]))
    debtors.sort(key=lambda x: (-x[1], x[0]))

    debts = []
    i = j = 0
    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]
        x = min(creditor[1], debtor[1])
        if x > EPSILON:
            debts.append(Debt(from_id=debtor[0], to_id=creditor[0], amount=round(x, 2)))
        creditor[1] -= x
        debtor[1] -= x
        if creditor[1] < EPSILON:
            i += 1
        if debtor[1] < EPSILON:
            j += 1

    if i < len(creditors) or j < len(debtors):
        logger.debug(
            "unmatched after simplification: %d creditor(s), %d debtor(s)",
            len(creditors) - i, len(debtors) - j,
        )
    return debts


# ---------- Pipeline ----------

def settlement_to_expense(s: Settlement) -> Expense:
    """A recorded repayment as an expense: debtor pays, creditor consumes"""
    return Expense(
        id=s.id,
        title=f"Settlement {s.from_id} -> {s.to_id}",
        amount=float(s.amount),
        date=s.date,
        payers={s.from_id: float(s.amount)},
        splits={s.to_id: float(s.amount)},
        split_mode="exact",
        group_id=s.group_id,
        category="settlement",
        notes=s.notes,
    )


def compute_debts(
    expenses: Iterable[Expense],
    participant_ids: Iterable[str],
    pairings: Optional[Iterable[Pairing]] = None,
) -> Tuple[Dict[str, float], List[Debt]]:
    """
    Aggregate, optionally merge pairings, then simplify.
    Returns (rounded balances per entity, debts).
    """
    balances = aggregate_balances(expenses, participant_ids)
    if pairings:
        balances = merge_pairings(balances, pairings)
    debts = simplify_debts(balances)
    return round_balances(balances), debts


def group_expenses(ledger: Ledger, group_id: str) -> List[Expense]:
    """Expenses of a group plus its recorded settlements"""
    exps = [e for e in ledger.expenses if e.group_id == group_id]
    exps += [settlement_to_expense(s) for s in ledger.settlements if s.group_id == group_id]
    return exps


def compute_group_debts(ledger: Ledger, group_id: str) -> Tuple[Dict[str, float], List[Debt]]:
    """Balances and debts for one group of a ledger snapshot"""
    group = ledger.find_group(group_id)
    pairings = None
    if group.pairing_mode and group.pairings:
        validate_pairings(group.pairings, group.members)
        pairings = group.pairings
    return compute_debts(group_expenses(ledger, group_id), group.members, pairings)


# ---------- Reporting ----------

def filter_expenses(
    expenses: Iterable[Expense],
    start: Optional[date] = None,
    end: Optional[date] = None,
    group_id: Optional[str] = None,
    category: Optional[str] = None,
    participant_id: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Expense]:
    """Filter expenses by inclusive date range, group, category, participant and title"""
    out = []
    needle = search.lower() if search else None
    for e in expenses:
        if start or end:
            ed = parse_date(e.date)
            if start and ed < start:
                continue
            if end and ed > end:
                continue
        if group_id is not None and e.group_id != group_id:
            continue
        if category is not None and e.category != category:
            continue
        if participant_id is not None and participant_id not in e.splits:
            continue
        if needle and needle not in e.title.lower():
            continue
        out.append(e)
    return out


def compute_summary(expenses: Iterable[Expense], participant_ids: Iterable[str]) -> Dict[str, dict]:
    """
    Compute summary statistics for each participant.
    Returns dict mapping participant -> {paid, owed, net}
    """
    people = list(participant_ids)
    paid = {p: 0.0 for p in people}
    owed = {p: 0.0 for p in people}
    for e in expenses:
        for p, amt in e.payers.items():
            if p in paid:
                paid[p] += float(amt)
        for p, amt in e.splits.items():
            if p in owed:
                owed[p] += float(amt)
    return {
        p: {
            "paid": round(paid[p], 2),
            "owed": round(owed[p], 2),
            "net": round(paid[p] - owed[p], 2) + 0.0,
        } for p in people
    }


def category_totals(expenses: Iterable[Expense]) -> List[Tuple[str, float]]:
    """Total amount per category, largest first, empty categories dropped"""
    totals: Dict[str, float] = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, 0.0) + float(e.amount)
    items = [(c, round(t, 2)) for c, t in totals.items() if t > 0]
    items.sort(key=lambda x: (-x[1], x[0]))
    return items


def monthly_totals(expenses: Iterable[Expense]) -> List[Tuple[str, float]]:
    """Total amount per YYYY-MM month, oldest first"""
    totals: Dict[str, float] = {}
    for e in expenses:
        month = e.date[:7]
        totals[month] = totals.get(month, 0.0) + float(e.amount)
    return [(m, round(totals[m], 2)) for m in sorted(totals)]

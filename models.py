"""
Data models for SplitLedger
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


SPLIT_MODES = ("equal", "exact", "percent", "shares")

# category id -> display name
CATEGORIES = {
    "food": "Food & Dining",
    "groceries": "Groceries",
    "home": "Home & Rent",
    "transport": "Transport",
    "travel": "Travel",
    "entertainment": "Entertainment",
    "healthcare": "Healthcare",
    "gifts": "Gifts",
    "utilities": "Utilities",
    "internet": "Internet & Phone",
    "shopping": "Shopping",
    "coffee": "Coffee & Snacks",
    "settlement": "Settlement",
    "other": "Other",
}


def category_name(category_id: str) -> str:
    """Display name for a category id, falling back to the id itself"""
    return CATEGORIES.get(category_id, category_id)


@dataclass
class Participant:
    """Person tracked by the ledger"""
    id: str
    name: str
    email: str = ""


@dataclass
class Pairing:
    """Two participants settled as one financial entity"""
    member_a: str
    member_b: str
    representative: Optional[str] = None  # defaults to member_a

    @property
    def label(self) -> str:
        return self.representative or self.member_a

    @property
    def members(self) -> Tuple[str, str]:
        return (self.member_a, self.member_b)


@dataclass
class Group:
    """Set of participants sharing expenses"""
    id: str
    name: str
    members: List[str]
    pairings: List[Pairing] = field(default_factory=list)
    pairing_mode: bool = False
    description: str = ""


@dataclass
class Expense:
    """Single shared expense"""
    id: str
    title: str
    amount: float
    date: str  # YYYY-MM-DD
    payers: Dict[str, float]  # participant -> amount actually paid
    splits: Dict[str, float]  # participant -> amount owed
    split_mode: str = "equal"
    group_id: str = ""
    category: str = "other"
    notes: str = ""


@dataclass
class Settlement:
    """Recorded real-world repayment"""
    id: str
    from_id: str
    to_id: str
    amount: float
    date: str
    group_id: str = ""
    notes: str = ""


@dataclass(frozen=True)
class Debt:
    """Simplified obligation: from_id pays to_id"""
    from_id: str
    to_id: str
    amount: float


@dataclass
class Ledger:
    """Complete snapshot of ledger data"""
    participants: List[Participant]
    groups: List[Group]
    expenses: List[Expense]
    settlements: List[Settlement] = field(default_factory=list)
    currency: str = "₹"
    version: int = 1

    def participant_ids(self) -> List[str]:
        return [p.id for p in self.participants]

    def display_names(self) -> Dict[str, str]:
        return {p.id: p.name for p in self.participants}

    def find_group(self, group_id: str) -> Group:
        for g in self.groups:
            if g.id == group_id:
                return g
        raise KeyError(f"Unknown group '{group_id}'")

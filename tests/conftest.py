import pytest

from computations import build_expense
from models import Expense, Group, Ledger, Pairing, Participant, Settlement


@pytest.fixture
def abc_expenses():
    """C pays 90 split by A, B, C; A pays 30 split by A, B"""
    return [
        build_expense("e1", "Dinner", 90, "C", "equal", ["A", "B", "C"], date="2024-05-01", group_id="trip"),
        build_expense("e2", "Taxi", 30, "A", "equal", ["A", "B"], date="2024-05-02", group_id="trip",
                      category="transport"),
    ]


@pytest.fixture
def ledger(abc_expenses):
    return Ledger(
        participants=[Participant("A", "Asha"), Participant("B", "Bilal"), Participant("C", "Chen"),
                      Participant("D", "Dana")],
        groups=[
            Group("trip", "Trip", ["A", "B", "C"]),
            Group("flat", "Flat", ["A", "B", "C", "D"], pairings=[Pairing("A", "B", "B")], pairing_mode=True),
        ],
        expenses=abc_expenses + [
            Expense("e3", "Rent", 400.0, "2024-06-01", payers={"D": 400.0},
                    splits={"A": 100.0, "B": 100.0, "C": 100.0, "D": 100.0}, group_id="flat", category="home"),
        ],
        settlements=[],
    )


@pytest.fixture
def settlement():
    return Settlement("s1", "B", "C", 45.0, "2024-05-03", group_id="trip")

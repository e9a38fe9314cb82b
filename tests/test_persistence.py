import json

import pytest
from openpyxl import load_workbook

from config import LedgerFormatError, dict_to_ledger, get_default_ledger, ledger_to_dict, load_ledger, save_ledger
from csv_handler import export_expenses_to_csv, import_expenses_from_csv
from excel_export import export_excel
from models import Pairing


def test_ledger_json_round_trip(tmp_path, ledger, settlement):
    ledger.settlements.append(settlement)
    path = tmp_path / "ledger.json"
    save_ledger(ledger, str(path))

    loaded = load_ledger(str(path))
    assert loaded == ledger
    assert loaded.groups[1].pairings == [Pairing("A", "B", "B")]
    assert json.loads(path.read_text(encoding="utf-8"))["currency"] == "₹"


def test_dict_to_ledger_defaults():
    ledger = dict_to_ledger({"participants": [{"id": "A", "name": "Asha"}]})
    assert ledger.version == 1
    assert ledger.currency == "₹"
    assert ledger.groups == [] and ledger.expenses == [] and ledger.settlements == []


@pytest.mark.parametrize("data", [[], {"expenses": [{"id": "x"}]}, {"groups": ["oops"]}])
def test_dict_to_ledger_rejects_malformed(data):
    with pytest.raises(LedgerFormatError):
        dict_to_ledger(data)


def test_load_ledger_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(LedgerFormatError):
        load_ledger(str(path))


def test_default_ledger_reads_people(tmp_path, monkeypatch):
    monkeypatch.setenv("SPLITLEDGER_HOME", str(tmp_path))
    assert get_default_ledger().participants == []

    (tmp_path / "people.json").write_text(json.dumps({"people": [{"id": "A", "name": "Asha"}]}), encoding="utf-8")
    assert get_default_ledger().participant_ids() == ["A"]


def test_ledger_to_dict_is_json_serializable(ledger):
    assert json.loads(json.dumps(ledger_to_dict(ledger)))["groups"][1]["pairing_mode"] is True


def test_csv_round_trip(tmp_path, ledger):
    path = tmp_path / "expenses.csv"
    export_expenses_to_csv(ledger.expenses, str(path), ledger.participants)

    header = path.read_text(encoding="utf-8").splitlines()[0]
    assert "paid_by" in header
    assert "Chen" in path.read_text(encoding="utf-8")

    imported = import_expenses_from_csv(str(path))
    assert imported == ledger.expenses


def test_csv_export_rejects_separator_in_id(tmp_path, ledger):
    ledger.expenses[0].splits["X;Y"] = 1.0
    path = tmp_path / "expenses.csv"
    with pytest.raises(ValueError):
        export_expenses_to_csv(ledger.expenses, str(path))
    assert not path.exists()


def test_csv_keeps_colon_in_id(tmp_path, ledger):
    ledger.expenses[0].payers = {"team:C": 90.0}
    path = tmp_path / "expenses.csv"
    export_expenses_to_csv(ledger.expenses, str(path))
    assert import_expenses_from_csv(str(path))[0].payers == {"team:C": 90.0}


def test_excel_report_for_group(tmp_path, ledger, settlement):
    ledger.settlements.append(settlement)
    path = tmp_path / "report.xlsx"
    export_excel(ledger, str(path), group_id="trip")

    wb = load_workbook(str(path))
    assert wb.sheetnames == ["Expenses", "Summary", "Categories", "Monthly", "Settlements"]

    rows = list(wb["Settlements"].iter_rows(min_row=2, values_only=True))
    assert rows == [("Asha", "Chen", 15)]

    summary = {r[0]: r[1:] for r in wb["Summary"].iter_rows(min_row=2, values_only=True)}
    assert summary["Bilal"] == (45, 45, 0)

    expenses = list(wb["Expenses"].iter_rows(min_row=2, values_only=True))
    assert [r[1] for r in expenses[:2]] == ["Dinner", "Taxi"]
    assert [r[2] for r in expenses[:2]] == ["Other", "Transport"]
    assert expenses[-1][0] == "TOTAL"

    assert list(wb["Categories"].iter_rows(min_row=2, values_only=True)) == [("Other", 90), ("Transport", 30)]
    assert list(wb["Monthly"].iter_rows(min_row=2, values_only=True)) == [("2024-05", 120)]


def test_excel_report_with_pairings(tmp_path, ledger):
    path = tmp_path / "flat.xlsx"
    export_excel(ledger, str(path), group_id="flat")
    rows = list(load_workbook(str(path))["Settlements"].iter_rows(min_row=2, values_only=True))
    assert rows == [("Bilal", "Dana", 200), ("Chen", "Dana", 100)]

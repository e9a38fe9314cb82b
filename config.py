"""
Configuration and data loading/saving for SplitLedger
"""
from __future__ import annotations
import json
import logging
import os
from typing import List
from dataclasses import asdict

from models import Expense, Group, Ledger, Pairing, Participant, Settlement
from utils import app_dir

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "₹"


class LedgerFormatError(ValueError):
    """Ledger data could not be decoded"""


def load_people(path: str) -> List[Participant]:
    """Load participant list from JSON file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return []
    try:
        return [Participant(**p) for p in data.get("people", [])]
    except (AttributeError, TypeError) as ex:
        raise LedgerFormatError(f"{path}: invalid people list: {ex}") from ex


def get_default_ledger() -> Ledger:
    """Create empty ledger seeded with people.json from the app directory"""
    people = load_people(os.path.join(app_dir(), "people.json"))
    return Ledger(participants=people, groups=[], expenses=[], settlements=[])


def ledger_to_dict(ledger: Ledger) -> dict:
    """Convert Ledger object to dictionary for JSON serialization"""
    return {
        "version": ledger.version,
        "currency": ledger.currency,
        "participants": [asdict(p) for p in ledger.participants],
        "groups": [asdict(g) for g in ledger.groups],
        "expenses": [asdict(e) for e in ledger.expenses],
        "settlements": [asdict(s) for s in ledger.settlements],
    }


def _group_from_dict(d: dict) -> Group:
    d = dict(d)
    d["pairings"] = [Pairing(**p) for p in d.get("pairings", [])]
    return Group(**d)


def dict_to_ledger(d: dict) -> Ledger:
    """Convert dictionary from JSON to Ledger object"""
    if not isinstance(d, dict):
        raise LedgerFormatError(f"Ledger must be a JSON object, got {type(d).__name__}")
    try:
        participants = [Participant(**p) for p in d.get("participants", [])]
        groups = [_group_from_dict(g) for g in d.get("groups", [])]
        exps = [Expense(**e) for e in d.get("expenses", [])]
        settlements = [Settlement(**s) for s in d.get("settlements", [])]
    except (AttributeError, TypeError, ValueError) as ex:
        raise LedgerFormatError(f"Invalid ledger data: {ex}") from ex

    return Ledger(
        version=d.get("version", 1),
        currency=d.get("currency", DEFAULT_CURRENCY),
        participants=participants,
        groups=groups,
        expenses=exps,
        settlements=settlements,
    )


def load_ledger(path: str) -> Ledger:
    """Read a ledger backup"""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as ex:
            raise LedgerFormatError(f"{path}: not valid JSON: {ex}") from ex
    ledger = dict_to_ledger(data)
    logger.debug(
        "loaded %s: %d participants, %d groups, %d expenses, %d settlements",
        path, len(ledger.participants), len(ledger.groups),
        len(ledger.expenses), len(ledger.settlements),
    )
    return ledger


def save_ledger(ledger: Ledger, path: str) -> None:
    """Write a ledger backup"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(ledger_to_dict(ledger), f, ensure_ascii=False, indent=2)
    logger.debug("saved ledger to %s", path)

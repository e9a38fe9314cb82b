"""
Utility functions for SplitLedger
"""
from __future__ import annotations
import os
from datetime import date, datetime


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string"""
    return datetime.strptime(s.strip(), "%Y-%m-%d").date()


def app_dir() -> str:
    """
    Get application data directory: $SPLITLEDGER_HOME or ~/.splitledger
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("SPLITLEDGER_HOME") or os.path.expanduser("~/.splitledger")
    os.makedirs(path, exist_ok=True)
    return path

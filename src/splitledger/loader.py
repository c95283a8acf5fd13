"""Load expense and balance documents from JSON files.

Accepted shapes are a bare list, or an object holding the list under an
``"expenses"`` / ``"balances"`` key. Keys may be snake_case or camelCase.
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .exceptions import LedgerInputError
from .models import ExpenseRecord, UserBalance

logger = logging.getLogger(__name__)

_expenses_adapter = TypeAdapter(list[ExpenseRecord])
_balances_adapter = TypeAdapter(list[UserBalance])


def _extract(document: Any, key: str, source: str) -> Any:
    if isinstance(document, dict):
        if key not in document:
            raise LedgerInputError(source, f"{source}: missing '{key}' key")
        return document[key]
    return document


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f, parse_float=Decimal)
    except FileNotFoundError as e:
        raise LedgerInputError(str(path), f"File not found: {path}") from e
    except json.JSONDecodeError as e:
        raise LedgerInputError(str(path), f"{path} is not valid JSON: {e}") from e


def parse_expenses(document: Any, source: str = "<document>") -> list[ExpenseRecord]:
    """Validate an already-decoded expense document."""
    try:
        expenses = _expenses_adapter.validate_python(
            _extract(document, "expenses", source)
        )
    except ValidationError as e:
        raise LedgerInputError(source, f"{source}: invalid expenses\n{e}") from e

    logger.debug(f"Loaded {len(expenses)} expense(s) from {source}")
    return expenses


def parse_balances(document: Any, source: str = "<document>") -> list[UserBalance]:
    """Validate an already-decoded balance document."""
    try:
        balances = _balances_adapter.validate_python(
            _extract(document, "balances", source)
        )
    except ValidationError as e:
        raise LedgerInputError(source, f"{source}: invalid balances\n{e}") from e

    logger.debug(f"Loaded {len(balances)} balance(s) from {source}")
    return balances


def load_expenses(path: Path) -> list[ExpenseRecord]:
    """Read expense records from a JSON file."""
    return parse_expenses(_read_json(path), source=str(path))


def load_balances(path: Path) -> list[UserBalance]:
    """Read balances from a JSON file."""
    return parse_balances(_read_json(path), source=str(path))

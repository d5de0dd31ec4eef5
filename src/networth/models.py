"""Financial records and the single persisted document.

Pure data model — no I/O. The persistence service treats transactions as
opaque JSON objects; ``Transaction`` is the typed view host code uses to
build and validate them.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class TransactionType(str, Enum):
    ASSET = "asset"
    LIABILITY = "liability"
    INCOME = "income"
    EXPENSE = "expense"


class Currency(str, Enum):
    EUR = "EUR"
    INR = "INR"


# ---------------------------------------------------------------------------
# Transaction
# ---------------------------------------------------------------------------


@dataclass
class Transaction:
    """A single financial record (asset, liability, income or expense).

    ``id`` uniqueness within a document is the caller's responsibility.
    """

    type: TransactionType
    category: str
    description: str
    amount: float
    currency: Currency = Currency.EUR
    date: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        self.type = TransactionType(self.type)
        self.currency = Currency(self.currency)
        if self.amount < 0:
            raise ValueError(f"amount must be non-negative, got {self.amount}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "category": self.category,
            "description": self.description,
            "amount": self.amount,
            "currency": self.currency.value,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Transaction:
        """Build from a stored record. Raises ValueError/KeyError on bad data."""
        return cls(
            id=str(data["id"]),
            type=TransactionType(data["type"]),
            category=str(data.get("category", "")),
            description=str(data.get("description", "")),
            amount=float(data["amount"]),
            currency=Currency(data.get("currency", Currency.EUR.value)),
            date=str(data["date"]),
        )


# ---------------------------------------------------------------------------
# StoredDocument
# ---------------------------------------------------------------------------


@dataclass
class StoredDocument:
    """The whole persisted unit: every transaction the user has recorded.

    Each save replaces the document wholesale; there is no partial write.
    Transactions are kept as plain JSON objects and passed through as-is.
    """

    transactions: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def empty(cls) -> StoredDocument:
        return cls()

    @classmethod
    def from_transactions(cls, transactions: Iterable[Transaction]) -> StoredDocument:
        return cls(transactions=[t.to_dict() for t in transactions])

    def typed_transactions(self) -> list[Transaction]:
        """Parse every record into a ``Transaction``, skipping malformed ones."""
        parsed: list[Transaction] = []
        for raw in self.transactions:
            try:
                parsed.append(Transaction.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed transaction %r", raw.get("id"))
        return parsed

    # -- serialization --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {"transactions": list(self.transactions)}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Any) -> StoredDocument:
        """Validate a decoded JSON value. Raises ValueError if it is not a document."""
        if isinstance(data, StoredDocument):
            return cls(transactions=list(data.transactions))
        if not isinstance(data, Mapping):
            raise ValueError(f"document must be a JSON object, got {type(data).__name__}")
        transactions = data.get("transactions", [])
        if not isinstance(transactions, list):
            raise ValueError("document 'transactions' must be a list")
        if not all(isinstance(t, Mapping) for t in transactions):
            raise ValueError("every transaction must be a JSON object")
        return cls(transactions=[dict(t) for t in transactions])

    @classmethod
    def from_json(cls, data: str) -> StoredDocument:
        """Deserialize from JSON. Raises ValueError on corrupt data.

        An empty string (a freshly created remote file) is the empty document.
        """
        if not data.strip():
            return cls.empty()
        try:
            obj = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ValueError(f"document is not valid JSON: {exc}") from exc
        return cls.from_dict(obj)

"""Tests for Transaction and StoredDocument."""

import json

import pytest

from networth.models import Currency, StoredDocument, Transaction, TransactionType


def _tx(**overrides) -> Transaction:
    fields = dict(
        id="t1",
        type=TransactionType.LIABILITY,
        category="Loan",
        description="Car loan",
        amount=12000.0,
        currency=Currency.INR,
        date="2024-03-01T00:00:00+00:00",
    )
    fields.update(overrides)
    return Transaction(**fields)


class TestTransaction:
    def test_to_dict(self) -> None:
        assert _tx().to_dict() == {
            "id": "t1",
            "type": "liability",
            "category": "Loan",
            "description": "Car loan",
            "amount": 12000.0,
            "currency": "INR",
            "date": "2024-03-01T00:00:00+00:00",
        }

    def test_from_dict(self) -> None:
        assert Transaction.from_dict(_tx().to_dict()) == _tx()

    def test_accepts_string_enums(self) -> None:
        tx = _tx(type="income", currency="EUR")
        assert tx.type is TransactionType.INCOME
        assert tx.currency is Currency.EUR

    def test_rejects_negative_amount(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            _tx(amount=-1)

    def test_rejects_unknown_type(self) -> None:
        with pytest.raises(ValueError):
            _tx(type="gift")

    def test_generated_ids_are_unique(self) -> None:
        a = Transaction(type="asset", category="Cash", description="", amount=1)
        b = Transaction(type="asset", category="Cash", description="", amount=1)
        assert a.id != b.id


class TestStoredDocument:
    def test_empty(self) -> None:
        assert StoredDocument.empty().to_json() == '{"transactions": []}'

    def test_from_transactions(self) -> None:
        doc = StoredDocument.from_transactions([_tx()])
        assert doc.transactions == [_tx().to_dict()]
        assert doc.typed_transactions() == [_tx()]

    def test_typed_transactions_skips_malformed(self) -> None:
        doc = StoredDocument(transactions=[_tx().to_dict(), {"id": "broken"}])
        assert [t.id for t in doc.typed_transactions()] == ["t1"]

    def test_unknown_fields_pass_through(self) -> None:
        raw = {"transactions": [{"id": "x", "custom": {"nested": [1, 2]}}]}
        doc = StoredDocument.from_json(json.dumps(raw))
        assert json.loads(doc.to_json()) == raw

    def test_blank_json_is_empty_document(self) -> None:
        assert StoredDocument.from_json("  \n") == StoredDocument.empty()

    def test_missing_transactions_key_is_empty(self) -> None:
        assert StoredDocument.from_json("{}") == StoredDocument.empty()

    @pytest.mark.parametrize("raw", [
        "not json",
        "[1, 2]",
        '{"transactions": {}}',
        '{"transactions": [1]}',
    ])
    def test_invalid_documents(self, raw: str) -> None:
        with pytest.raises(ValueError):
            StoredDocument.from_json(raw)

    def test_from_dict_copies(self) -> None:
        original = StoredDocument(transactions=[{"id": "a"}])
        copy = StoredDocument.from_dict(original)
        copy.transactions.append({"id": "b"})
        assert original.transactions == [{"id": "a"}]

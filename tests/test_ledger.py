"""Tests for the ledger service."""

import logging
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from obraledger.domain.entities import EntryDraft, Movement, ReferenceType, Side
from obraledger.domain.errors import (
    InvalidRangeError,
    MalformedMovementError,
    NotFoundError,
    StorageError,
    UnbalancedEntryError,
    ValidationError,
)


def _sale(amount=100000):
    return [Movement.debit_line("110000", amount), Movement.credit_line("410000", amount)]


class TestRecordEntry:
    """Tests for recording balanced entries."""

    def test_record_balanced_entry(self, ledger_service):
        entry = ledger_service.record_entry(date(2024, 3, 1), "Venta contado", _sale())

        assert entry.id is not None
        assert entry.date == date(2024, 3, 1)
        assert entry.description == "Venta contado"
        assert entry.total_debit == entry.total_credit == Decimal("100000.00")
        assert [m.account_code for m in entry.movements] == ["110000", "410000"]
        assert entry.reference_type is None

    def test_record_entry_with_reference(self, ledger_service):
        entry = ledger_service.record_entry(
            date(2024, 3, 1), "Factura 12", _sale(), reference_type="invoice", reference_id=12
        )
        assert entry.reference_type is ReferenceType.INVOICE
        assert entry.reference_id == 12

    def test_unbalanced_entry_rejected(self, ledger_service, temp_db):
        movements = [Movement.debit_line("110000", 100000), Movement.credit_line("410000", 99999)]

        with pytest.raises(UnbalancedEntryError) as excinfo:
            ledger_service.record_entry(date(2024, 3, 1), "Descuadrado", movements)

        assert excinfo.value.difference == Decimal("1.00")
        assert temp_db.count_entries() == 0

    def test_one_cent_difference_rejected(self, ledger_service):
        movements = [Movement.debit_line("110000", "100.01"), Movement.credit_line("410000", "100.00")]
        with pytest.raises(UnbalancedEntryError):
            ledger_service.record_entry(date(2024, 3, 1), "Descuadrado", movements)

    def test_single_movement_rejected(self, ledger_service):
        with pytest.raises(ValidationError, match="at least 2"):
            ledger_service.record_entry(
                date(2024, 3, 1), "Solo", [Movement.debit_line("110000", 100)]
            )

    def test_empty_description_rejected(self, ledger_service):
        with pytest.raises(ValidationError, match="description"):
            ledger_service.record_entry(date(2024, 3, 1), "   ", _sale())

    def test_non_movement_item_rejected(self, ledger_service):
        with pytest.raises(MalformedMovementError):
            ledger_service.record_entry(
                date(2024, 3, 1), "Mal", [Movement.debit_line("110000", 100), {"account": "410000"}]
            )

    def test_unknown_reference_type_rejected(self, ledger_service):
        with pytest.raises(ValidationError, match="reference type"):
            ledger_service.record_entry(date(2024, 3, 1), "Ref", _sale(), reference_type="quote")

    def test_reference_id_requires_type(self, ledger_service):
        with pytest.raises(ValidationError, match="reference_type"):
            ledger_service.record_entry(date(2024, 3, 1), "Ref", _sale(), reference_id=3)

    def test_unknown_account_is_recorded_with_warning(self, ledger_service, caplog):
        movements = [Movement.debit_line("190000", 500), Movement.credit_line("410000", 500)]

        with caplog.at_level(logging.WARNING, logger="obraledger.domain.ledger"):
            entry = ledger_service.record_entry(date(2024, 3, 1), "Cuenta externa", movements)

        assert entry.movements[0].account_code == "190000"
        assert "190000" in caplog.text

    def test_storage_failure_records_nothing(self, ledger_service, temp_db):
        """A failed commit leaves no entry and no movements behind."""
        session = temp_db._get_session()
        with patch.object(
            session, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full"))
        ):
            with pytest.raises(StorageError, match="not recorded"):
                ledger_service.record_entry(date(2024, 3, 1), "Venta", _sale())

        assert temp_db.count_entries() == 0
        assert temp_db.count_movements() == 0

        # The store is still usable afterwards
        ledger_service.record_entry(date(2024, 3, 1), "Venta", _sale())
        assert temp_db.count_entries() == 1

    def test_record_draft(self, ledger_service):
        draft = EntryDraft(
            date=date(2024, 3, 1),
            description="Gasto",
            movements=(Movement.debit_line("530000", 1000), Movement.credit_line("110000", 1000)),
            reference_type=ReferenceType.EXPENSE,
            reference_id=4,
        )
        entry = ledger_service.record_draft(draft)
        assert entry.reference_type is ReferenceType.EXPENSE
        assert entry.total_debit == Decimal("1000.00")


class TestReadEntries:
    """Tests for reading entries back."""

    def test_get_entry_missing_returns_none(self, ledger_service):
        assert ledger_service.get_entry(999) is None

    def test_require_entry_missing_raises(self, ledger_service):
        with pytest.raises(NotFoundError, match="999"):
            ledger_service.require_entry(999)

    def test_list_entries_newest_first(self, ledger_service, sample_entries):
        entries = ledger_service.list_entries()
        assert [e.date for e in entries] == sorted((e.date for e in sample_entries), reverse=True)

    def test_list_entries_filters(self, ledger_service, sample_entries):
        january = ledger_service.list_entries(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))
        assert len(january) == 4

        invoices = ledger_service.list_entries(reference_type=ReferenceType.INVOICE)
        assert [e.reference_id for e in invoices] == [1001]

    def test_list_entries_invalid_range(self, ledger_service):
        with pytest.raises(InvalidRangeError):
            ledger_service.list_entries(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))


class TestReverseEntry:
    """Tests for correcting entries by reversal."""

    def test_reverse_entry_mirrors_movements(self, ledger_service):
        original = ledger_service.record_entry(date(2024, 3, 1), "Venta", _sale(5000))

        reversal = ledger_service.reverse_entry(original.id, date(2024, 3, 2))

        assert reversal.id != original.id
        assert reversal.description.startswith(f"Reversal of entry {original.id}")
        assert [(m.account_code, m.side) for m in reversal.movements] == [
            ("110000", Side.CREDIT),
            ("410000", Side.DEBIT),
        ]
        # The original entry is left as it was
        assert ledger_service.require_entry(original.id) == original

    def test_reverse_missing_entry(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.reverse_entry(42, date(2024, 3, 2))


class TestListMovements:
    """Tests for paginated movement listing."""

    def test_default_page(self, ledger_service, sample_entries):
        page = ledger_service.list_movements()

        assert page.page == 1
        assert page.limit == 10
        assert page.total == 11
        assert page.total_pages == 2
        assert len(page.records) == 10
        # Newest entry first
        assert page.records[0].date == date(2024, 2, 5)

    def test_second_page(self, ledger_service, sample_entries):
        page = ledger_service.list_movements(page=2)
        assert len(page.records) == 1
        assert page.records[0].date == date(2024, 1, 2)

    def test_filter_by_account(self, ledger_service, sample_entries):
        page = ledger_service.list_movements(account_code="120000")

        assert page.total == 3
        assert {r.entry_id for r in page.records} == {
            sample_entries[0].id,
            sample_entries[2].id,
            sample_entries[4].id,
        }
        assert sum(r.debit for r in page.records) == Decimal("11190000.00")
        assert sum(r.credit for r in page.records) == Decimal("400000.00")

    def test_filter_by_reference_and_dates(self, ledger_service, sample_entries):
        page = ledger_service.list_movements(
            reference_type="payment", start_date=date(2024, 2, 1), end_date=date(2024, 2, 28)
        )
        assert page.total == 2
        assert all(r.reference_id == 55 for r in page.records)

    @pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 101)])
    def test_bounds(self, ledger_service, page, limit):
        with pytest.raises(ValidationError):
            ledger_service.list_movements(page=page, limit=limit)

    def test_empty(self, ledger_service):
        page = ledger_service.list_movements()
        assert page.records == ()
        assert page.total == 0
        assert page.total_pages == 0


def test_get_stats(ledger_service, sample_entries):
    stats = ledger_service.get_stats(date(2024, 1, 31))

    assert stats.total_entries == 5
    assert stats.month_entries == 4
    assert stats.month_revenue == Decimal("1000000.00")
    assert stats.month_expenses == Decimal("550000.00")
    assert stats.month_net_income == Decimal("450000.00")

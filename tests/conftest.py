"""Shared pytest fixtures for obraledger tests."""

import os
import tempfile
from datetime import date

import pytest

from obraledger.database.factories import create_sqlite_database
from obraledger.domain.chart import DEFAULT_CHART
from obraledger.domain.entities import Movement
from obraledger.domain.ledger import LedgerService
from obraledger.domain.statements import StatementService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def chart():
    """The built-in construction chart of accounts."""
    return DEFAULT_CHART


@pytest.fixture
def ledger_service(temp_db, chart):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db, chart)


@pytest.fixture
def statement_service(temp_db, chart):
    """Create a StatementService with a temporary database."""
    return StatementService(temp_db, chart)


@pytest.fixture
def sample_entries(ledger_service):
    """A small construction-company month.

    - 2024-01-02 capital contribution of 10.000.000 into the bank
    - 2024-01-10 sales invoice: 1.190.000 receivable, 1.000.000 revenue, 190.000 IVA
    - 2024-01-15 materials used on site, 400.000 paid from the bank
    - 2024-01-20 office rent, 150.000 paid in cash
    - 2024-02-05 client pays the invoice by transfer
    """
    return [
        ledger_service.record_entry(
            date(2024, 1, 2),
            "Aporte de capital",
            [Movement.debit_line("120000", 10_000_000), Movement.credit_line("310000", 10_000_000)],
        ),
        ledger_service.record_entry(
            date(2024, 1, 10),
            "Factura 1001 - Constructora Andes",
            [
                Movement.debit_line("130000", 1_190_000),
                Movement.credit_line("410000", 1_000_000),
                Movement.credit_line("240000", 190_000),
            ],
            reference_type="invoice",
            reference_id=1001,
        ),
        ledger_service.record_entry(
            date(2024, 1, 15),
            "Materiales obra Los Aromos",
            [Movement.debit_line("510000", 400_000), Movement.credit_line("120000", 400_000)],
            reference_type="expense",
            reference_id=7,
        ),
        ledger_service.record_entry(
            date(2024, 1, 20),
            "Arriendo oficina",
            [Movement.debit_line("530000", 150_000), Movement.credit_line("110000", 150_000)],
        ),
        ledger_service.record_entry(
            date(2024, 2, 5),
            "Pago Factura 1001",
            [Movement.debit_line("120000", 1_190_000), Movement.credit_line("130000", 1_190_000)],
            reference_type="payment",
            reference_id=55,
        ),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

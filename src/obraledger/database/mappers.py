"""Mapper functions to convert between domain models and SQLAlchemy models.

The database stores movements in two columns (debit, credit); the domain
uses a tagged side. The conversion lives here so neither layer leaks into
the other.
"""

from decimal import Decimal
from typing import Optional

from obraledger.domain import entities as domain
from obraledger.domain.money import ZERO, to_money
from obraledger.database.models import (
    LedgerEntry as ORMLedgerEntry,
    Movement as ORMMovement,
)


def _reference_type(value: Optional[str]) -> Optional[domain.ReferenceType]:
    return domain.ReferenceType(value) if value is not None else None


def movement_to_domain(orm_movement: ORMMovement) -> domain.Movement:
    """Convert SQLAlchemy Movement model to domain Movement entity."""
    debit = to_money(orm_movement.debit or 0)
    if debit > ZERO:
        return domain.Movement.debit_line(orm_movement.account_code, debit)
    return domain.Movement.credit_line(
        orm_movement.account_code, to_money(orm_movement.credit or 0)
    )


def movement_to_orm(movement: domain.Movement) -> ORMMovement:
    """Convert domain Movement entity to a new SQLAlchemy Movement model."""
    return ORMMovement(
        account_code=movement.account_code,
        debit=movement.debit,
        credit=movement.credit,
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        description=orm_entry.description,
        movements=tuple(movement_to_domain(m) for m in orm_entry.movements),
        reference_type=_reference_type(orm_entry.reference_type),
        reference_id=orm_entry.reference_id,
        created_at=orm_entry.created_at,
    )


def movement_record_to_domain(
    orm_movement: ORMMovement, orm_entry: ORMLedgerEntry
) -> domain.MovementRecord:
    """Convert a movement row joined to its entry into a MovementRecord."""
    return domain.MovementRecord(
        id=orm_movement.id,
        entry_id=orm_entry.id,
        date=orm_entry.date,
        description=orm_entry.description,
        account_code=orm_movement.account_code,
        debit=to_money(orm_movement.debit or 0),
        credit=to_money(orm_movement.credit or 0),
        reference_type=_reference_type(orm_entry.reference_type),
        reference_id=orm_entry.reference_id,
    )


def account_totals_to_domain(
    account_code: str, total_debit: Optional[Decimal], total_credit: Optional[Decimal]
) -> domain.AccountTotals:
    """Convert an aggregate row into an AccountTotals entity."""
    return domain.AccountTotals(
        account_code=account_code,
        total_debit=to_money(total_debit or 0),
        total_credit=to_money(total_credit or 0),
    )

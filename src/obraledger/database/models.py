"""SQLAlchemy models for the obraledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class LedgerEntry(Base):
    """Ledger entry model (one business event)."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(String, nullable=False)
    reference_type = Column(String, nullable=True)
    reference_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    movements = relationship(
        "Movement",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="Movement.id",
    )


class Movement(Base):
    """Movement line model; exactly one of debit/credit is positive."""

    __tablename__ = "movements"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("ledger_entries.id"), nullable=False)
    account_code = Column(String, nullable=False)
    debit = Column(Numeric(14, 2), nullable=False, default=0)
    credit = Column(Numeric(14, 2), nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("debit >= 0 AND credit >= 0", name="ck_movement_non_negative"),
        CheckConstraint(
            "(debit > 0 AND credit = 0) OR (credit > 0 AND debit = 0)",
            name="ck_movement_one_side",
        ),
        Index("ix_movements_account_code", "account_code"),
        Index("ix_movements_entry_id", "entry_id"),
    )

    # Relationships
    entry = relationship("LedgerEntry", back_populates="movements")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)

"""SQLAlchemy models for the ledgerit store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Chart of accounts model."""

    __tablename__ = "accounts"

    code = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, default="Uncategorized")
    opening_balance = Column(Numeric(18, 2), nullable=False, default=0)


class Transaction(Base):
    """Canonical transaction model keyed by its external id."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    kind = Column(String, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    counterpart = Column(String, nullable=True)
    account_code = Column(String, nullable=True)
    contra_account_code = Column(String, nullable=True)
    tender = Column(String, nullable=True)
    description = Column(String, nullable=True)
    source = Column(String, nullable=False, default="remote")
    posting_kind = Column(String, nullable=True)
    observed_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    line_items = relationship(
        "LineItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="LineItem.position",
    )


class LineItem(Base):
    """Item line of a transaction."""

    __tablename__ = "line_items"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(String, ForeignKey("transactions.id"), nullable=False)
    position = Column(Integer, nullable=False)
    sku = Column(String, nullable=False, default="")
    name = Column(String, nullable=True)
    qty = Column(Numeric(18, 4), nullable=False)
    unit_price = Column(Numeric(18, 2), nullable=False, default=0)
    unit_cost = Column(Numeric(18, 2), nullable=False, default=0)

    # Relationships
    transaction = relationship("Transaction", back_populates="line_items")


class OverrideLine(Base):
    """Account mapping override for one position of a transaction.

    Overrides are persisted independently of transactions, so there is no
    foreign key: an override may be authored before its transaction arrives.
    """

    __tablename__ = "override_lines"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(String, nullable=False, index=True)
    position = Column(String, nullable=False)
    account_code = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("transaction_id", "position", name="uq_override_position"),)


class Product(Base):
    """Product master entry carrying the standard unit cost."""

    __tablename__ = "products"

    sku = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    unit_cost = Column(Numeric(18, 2), nullable=False, default=0)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)

"""SQLAlchemy models for ledgerline database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Float,
    Numeric,
    Boolean,
    Index,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class ImportRecord(Base):
    """Audit row for one confirmed import."""

    __tablename__ = "import_records"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    file_name = Column(String, nullable=False)
    file_size = Column(Integer, nullable=True)
    source = Column(String, nullable=False)
    bank = Column(String, nullable=True)
    bank_name = Column(String, nullable=True)
    company_id = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    transaction_count = Column(Integer, default=0, nullable=False)
    duplicate_count = Column(Integer, default=0, nullable=False)
    error_count = Column(Integer, default=0, nullable=False)
    date_range_start = Column(Date, nullable=True)
    date_range_end = Column(Date, nullable=True)
    status = Column(String, default="completed", nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="import_record")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=True)
    payee = Column(String, nullable=True)
    type = Column(String, nullable=False)
    section_code = Column(String, nullable=True)
    category = Column(String, nullable=True)
    subcategory = Column(String, nullable=True)
    vendor = Column(String, nullable=True)
    classification_source = Column(String, default="none", nullable=False)
    confidence = Column(Float, default=0.0, nullable=False)
    rule_id = Column(Integer, ForeignKey("classification_rules.id", ondelete="SET NULL"), nullable=True)
    needs_review = Column(Boolean, default=False, nullable=False)
    reference_number = Column(String, nullable=True)
    check_number = Column(String, nullable=True)
    source = Column(String, default="manual", nullable=False)
    import_id = Column(Integer, ForeignKey("import_records.id"), nullable=True)
    company_id = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Same-day lookups drive duplicate detection
    __table_args__ = (Index("ix_transactions_user_date", "user_id", "date"),)

    # Relationships
    import_record = relationship("ImportRecord", back_populates="transactions")


class ClassificationRule(Base):
    """User classification rule model."""

    __tablename__ = "classification_rules"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    pattern = Column(String, nullable=False)
    match_type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    subcategory = Column(String, nullable=True)
    vendor = Column(String, nullable=True)
    priority = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    amount_direction = Column(String, default="any", nullable=False)
    amount_min = Column(Numeric(12, 2), nullable=True)
    amount_max = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


def create_db_engine(database_url: str) -> Engine:
    """Create an engine and make sure all tables exist.

    Store calls run on worker threads, so SQLite connections must not be
    pinned to the thread that opened them.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    return sessionmaker(bind=engine, expire_on_commit=False)

"""SQLAlchemy ORM models."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from xrpfi.infrastructure.database.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BridgeTransaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source_tx_hash = Column(String(64), unique=True, nullable=False, index=True)
    source_address = Column(String(35), nullable=False, index=True)
    source_amount = Column(String(40), nullable=False)
    instruction_type = Column(String(20), nullable=False)
    instruction_data = Column(String(64), nullable=False)
    status = Column(String(24), nullable=False, default="pending", index=True)
    destination_account = Column(String(42))
    destination_tx_hash = Column(Text)
    error_message = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

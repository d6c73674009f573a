"""SQLAlchemy ORM models for the ledger tables.

These map to tables created by Alembic migration 001.
DO NOT add/remove columns here without a corresponding migration.
Column names double as item attribute names in LedgerStoreProtocol.
"""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from src.lg_balance.domain.constants import TRANSACTION_HISTORY_TABLE, USER_BALANCES_TABLE
from src.lg_common.database import Base


class UserBalanceORM(Base):
    __tablename__ = USER_BALANCES_TABLE

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    version: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class TransactionHistoryORM(Base):
    __tablename__ = TRANSACTION_HISTORY_TABLE

    idempotent_key: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    transaction_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    timestamp: Mapped[str] = mapped_column(String(32), nullable=False)
    # NOTE: No updated_at — TransactionHistory is append-only

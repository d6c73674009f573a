"""Ledger table names and balance defaults. Must match alembic/versions/001."""

USER_BALANCES_TABLE = "UserBalances"
TRANSACTION_HISTORY_TABLE = "TransactionHistory"

# Returned by the balance reader for users with no readable balance row
DEFAULT_BALANCE = 100

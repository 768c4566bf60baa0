"""LedgerEntry aggregate — one row per balance movement.

Entries are append-only. They are written by the ``Ledger`` alongside the
User whose balance moved, so the history always reconciles with the balance.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, String

from storefront.domain import storefront


class TransactionType(Enum):
    ORDER_PLACEMENT = "OrderPlacement"
    CHECKOUT_ROLLBACK = "CheckoutRollback"
    CANCELLATION_REFUND = "CancellationRefund"
    RETURN_REFUND = "ReturnRefund"
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"


class Direction(Enum):
    CREDIT = "Credit"
    DEBIT = "Debit"


@storefront.aggregate
class LedgerEntry:
    user_id = Identifier(required=True)
    direction = String(required=True, choices=Direction)
    amount = Float(required=True, min_value=0.0)
    balance_after = Float(required=True, min_value=0.0)
    transaction_type = String(max_length=50)
    reference_id = String(max_length=255)
    created_at = DateTime()

    @classmethod
    def record(cls, user_id, direction, amount, balance_after, transaction_type=None, reference_id=None):
        return cls(
            user_id=str(user_id),
            direction=direction.value,
            amount=amount,
            balance_after=balance_after,
            transaction_type=transaction_type.value if transaction_type else None,
            reference_id=str(reference_id) if reference_id is not None else None,
            created_at=datetime.now(UTC),
        )


@storefront.repository(part_of=LedgerEntry)
class LedgerEntryRepository:
    def history_for(self, user_id) -> list[LedgerEntry]:
        """Entries for ``user_id``, newest first."""
        entries = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(entries, key=lambda entry: entry.created_at, reverse=True)

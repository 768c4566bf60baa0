"""Ledger — the only way a wallet balance changes.

``credit`` and ``debit`` load the user, move the balance through the User
aggregate, persist it and append a ``LedgerEntry``. Inside a command handler
both writes join the handler's unit of work; called directly they commit
immediately.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import StorefrontError, UserNotFoundError
from storefront.identity.user import User
from storefront.utils.logging import get_logger
from storefront.utils.money import money
from storefront.wallet.entry import Direction, LedgerEntry, TransactionType
from storefront.wallet.locks import user_locks

logger = get_logger(__name__)


def _tag(transaction_type: TransactionType | None) -> str | None:
    return transaction_type.value if transaction_type else None


class Ledger:
    def _load(self, user_id) -> User:
        try:
            return current_domain.repository_for(User).get(str(user_id))
        except ObjectNotFoundError:
            raise UserNotFoundError(f"User {user_id} does not exist", entity_id=user_id) from None

    def balance_of(self, user_id) -> float:
        return money(self._load(user_id).wallet_balance)

    def credit(
        self,
        user_id,
        amount,
        transaction_type: TransactionType | None = None,
        reference_id=None,
    ) -> float:
        """Add ``amount`` to the user's balance and return the new balance."""
        return self._move(Direction.CREDIT, user_id, amount, transaction_type, reference_id)

    def debit(
        self,
        user_id,
        amount,
        transaction_type: TransactionType | None = None,
        reference_id=None,
    ) -> float:
        """Take ``amount`` from the user's balance and return the new balance.

        Raises ``InsufficientFundsError`` and leaves the balance untouched when
        the balance does not cover the amount.
        """
        return self._move(Direction.DEBIT, user_id, amount, transaction_type, reference_id)

    def _move(self, direction, user_id, amount, transaction_type, reference_id) -> float:
        with user_locks.hold(user_id):
            user = self._load(user_id)
            operation = user.credit if direction is Direction.CREDIT else user.debit
            try:
                balance = operation(amount, transaction_type=_tag(transaction_type), reference_id=reference_id)
            except StorefrontError as exc:
                logger.warning(
                    "wallet_operation_rejected",
                    user_id=str(user_id),
                    direction=direction.value,
                    amount=amount,
                    transaction_type=_tag(transaction_type),
                    kind=exc.kind,
                    code=exc.code,
                )
                raise

            current_domain.repository_for(User).add(user)
            current_domain.repository_for(LedgerEntry).add(
                LedgerEntry.record(
                    user_id=user_id,
                    direction=direction,
                    amount=money(amount),
                    balance_after=balance,
                    transaction_type=transaction_type,
                    reference_id=reference_id,
                )
            )

        logger.info(
            "wallet_balance_changed",
            user_id=str(user_id),
            direction=direction.value,
            amount=money(amount),
            balance=balance,
            transaction_type=_tag(transaction_type),
            reference_id=str(reference_id) if reference_id is not None else None,
        )
        return balance


ledger = Ledger()


def ledger_history(user_id) -> list[LedgerEntry]:
    """Return the user's balance movements, newest first."""
    ledger._load(user_id)
    return current_domain.repository_for(LedgerEntry).history_for(user_id)

"""User aggregate — shopper account and owner of the wallet balance.

The balance is only ever changed through ``credit`` and ``debit``; both
validate the amount, keep the balance at or above zero and raise a wallet
event naming the transaction that caused the movement.
"""

import math
from datetime import UTC, datetime

from protean.fields import DateTime, Float, String

from storefront.domain import storefront
from storefront.errors import InsufficientFundsError, InvalidAmountError
from storefront.identity.events import UserRegistered
from storefront.utils.money import money
from storefront.wallet.events import WalletCredited, WalletDebited


@storefront.aggregate
class User:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    username = String(required=True, max_length=100)
    credential = String(required=True, max_length=255)  # hashed by the auth layer
    phone = String(max_length=20)
    wallet_balance = Float(default=0.0, min_value=0.0)
    created_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(cls, name, email, username, credential, phone=None):
        now = datetime.now(UTC)
        user = cls(
            name=name,
            email=email.lower(),
            username=username,
            credential=credential,
            phone=phone,
            wallet_balance=0.0,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                name=user.name,
                email=user.email,
                registered_at=now,
            )
        )
        return user

    # -------------------------------------------------------------------
    # Wallet
    # -------------------------------------------------------------------
    def _validated_amount(self, amount):
        if amount is None or not math.isfinite(float(amount)) or money(amount) <= 0:
            raise InvalidAmountError(f"Amount must be a positive number, got {amount!r}", entity_id=self.id)
        return money(amount)

    def credit(self, amount, transaction_type=None, reference_id=None):
        """Add ``amount`` to the wallet and return the new balance. No upper bound applies."""
        amount = self._validated_amount(amount)
        self.wallet_balance = money(self.wallet_balance + amount)

        self.raise_(
            WalletCredited(
                user_id=str(self.id),
                amount=amount,
                balance=self.wallet_balance,
                transaction_type=transaction_type,
                reference_id=str(reference_id) if reference_id is not None else None,
                credited_at=datetime.now(UTC),
            )
        )
        return self.wallet_balance

    def debit(self, amount, transaction_type=None, reference_id=None):
        """Take ``amount`` from the wallet and return the new balance.

        Fails without touching the balance when it does not cover the amount.
        """
        amount = self._validated_amount(amount)
        if money(self.wallet_balance) < amount:
            raise InsufficientFundsError(
                f"Balance {money(self.wallet_balance):.2f} does not cover {amount:.2f}",
                entity_id=self.id,
                balance=money(self.wallet_balance),
                amount=amount,
            )
        self.wallet_balance = money(self.wallet_balance - amount)

        self.raise_(
            WalletDebited(
                user_id=str(self.id),
                amount=amount,
                balance=self.wallet_balance,
                transaction_type=transaction_type,
                reference_id=str(reference_id) if reference_id is not None else None,
                debited_at=datetime.now(UTC),
            )
        )
        return self.wallet_balance


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        matches = self._dao.query.filter(email=email.lower()).all().items
        return matches[0] if matches else None

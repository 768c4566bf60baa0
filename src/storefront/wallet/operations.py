"""Manual wallet operations — deposits and withdrawals.

A deposit and a withdrawal are separate commands, each validated on its own.
There is no direction flag that changes the arithmetic.
"""

from protean import handle
from protean.fields import Float, Identifier

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.wallet.entry import TransactionType
from storefront.wallet.ledger import ledger
from storefront.wallet.locks import process_serialized


@storefront.command(part_of="User")
class DepositFunds:
    user_id = Identifier(required=True)
    amount = Float(required=True)


@storefront.command(part_of="User")
class WithdrawFunds:
    user_id = Identifier(required=True)
    amount = Float(required=True)


@storefront.command_handler(part_of=User)
class WalletOperationsHandler:
    @handle(DepositFunds)
    def deposit_funds(self, command):
        return ledger.credit(command.user_id, command.amount, transaction_type=TransactionType.DEPOSIT)

    @handle(WithdrawFunds)
    def withdraw_funds(self, command):
        return ledger.debit(command.user_id, command.amount, transaction_type=TransactionType.WITHDRAWAL)


def deposit(user_id, amount) -> float:
    """Credit ``amount`` to the user's wallet and return the new balance."""
    return process_serialized(user_id, DepositFunds(user_id=str(user_id), amount=amount))


def withdraw(user_id, amount) -> float:
    """Debit ``amount`` from the user's wallet and return the new balance."""
    return process_serialized(user_id, WithdrawFunds(user_id=str(user_id), amount=amount))

"""Wallet events, raised on the User aggregate that owns the balance.

Each event names the transaction that caused it so every balance movement
can be attributed to an order placement, a refund or a manual top-up.
"""

from protean.fields import DateTime, Float, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class WalletCredited:
    """Funds were added to a user's wallet."""

    __version__ = 1

    user_id = Identifier(required=True)
    amount = Float(required=True)
    balance = Float(required=True)
    transaction_type = String(max_length=50)
    reference_id = String(max_length=255)
    credited_at = DateTime(required=True)


@storefront.event(part_of="User")
class WalletDebited:
    """Funds were taken from a user's wallet."""

    __version__ = 1

    user_id = Identifier(required=True)
    amount = Float(required=True)
    balance = Float(required=True)
    transaction_type = String(max_length=50)
    reference_id = String(max_length=255)
    debited_at = DateTime(required=True)

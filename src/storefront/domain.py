"""Storefront bounded context — wallets, carts, orders and returns.

Moves money between a user's wallet and the orders placed from their cart:
checkout debits the wallet once per batch and holds the funds in escrow,
delivery releases them, and cancellations and approved returns credit the
wallet back.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")

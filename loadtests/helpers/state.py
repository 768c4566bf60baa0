"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks one simulated shopper from registration to returns."""

    user_id: str | None = None
    shop_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    line_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)
    return_ids: list[str] = field(default_factory=list)
    expected_balance: float = 0.0

"""Wallet amounts are floats rounded to whole cents."""

CENT_PLACES = 2


def money(value) -> float:
    """Round ``value`` to cents."""
    return round(float(value), CENT_PLACES)


def money_sum(values) -> float:
    return money(sum(money(v) for v in values))

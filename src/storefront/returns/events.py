"""Domain events for the Return aggregate."""

from protean.fields import DateTime, Float, Identifier, Text

from storefront.domain import storefront


@storefront.event(part_of="Return")
class ReturnRequested:
    __version__ = 1

    return_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = Text()
    refund_amount = Float(required=True)
    requested_at = DateTime(required=True)


@storefront.event(part_of="Return")
class ReturnApproved:
    __version__ = 1

    return_id = Identifier(required=True)
    order_id = Identifier(required=True)
    refund_amount = Float(required=True)
    approved_at = DateTime(required=True)


@storefront.event(part_of="Return")
class ReturnRejected:
    __version__ = 1

    return_id = Identifier(required=True)
    order_id = Identifier(required=True)
    rejected_at = DateTime(required=True)

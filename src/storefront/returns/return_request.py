"""Return aggregate — a buyer's request to send a delivered order back.

A return references its order by id only. It is resolved exactly once:
approval refunds the buyer and moves the order to RETURNED, rejection
changes nothing else. A return still requested when the operator completes
the order is rejected at that point.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.config import RefundBasis
from storefront.domain import storefront
from storefront.errors import AlreadyResolvedError, ReturnNotFoundError
from storefront.returns.events import ReturnApproved, ReturnRejected, ReturnRequested
from storefront.utils.money import money


class ReturnStatus(Enum):
    REQUESTED = "requested"
    APPROVED = "approved"
    REJECTED = "rejected"


# A rejected return does not block a new request for the same order
ACTIVE_STATUSES = frozenset({ReturnStatus.REQUESTED, ReturnStatus.APPROVED})


def refund_for(order, refund_basis: RefundBasis) -> float:
    if refund_basis == RefundBasis.LINE_TOTAL:
        return order.line_total
    return money(order.price)


@storefront.aggregate
class Return:
    order_id = Identifier(required=True)
    reason = Text()
    status = String(choices=ReturnStatus, default=ReturnStatus.REQUESTED.value)
    refund_amount = Float(required=True, min_value=0.0)
    created_at = DateTime()
    resolved_at = DateTime()

    @classmethod
    def request(cls, order, reason, refund_basis: RefundBasis):
        """Open a return for ``order`` with the refund captured now."""
        now = datetime.now(UTC)
        return_request = cls(
            order_id=str(order.id),
            reason=reason,
            status=ReturnStatus.REQUESTED.value,
            refund_amount=refund_for(order, refund_basis),
            created_at=now,
        )
        return_request.raise_(
            ReturnRequested(
                return_id=str(return_request.id),
                order_id=return_request.order_id,
                reason=reason,
                refund_amount=return_request.refund_amount,
                requested_at=now,
            )
        )
        return return_request

    @property
    def is_active(self) -> bool:
        return ReturnStatus(self.status) in ACTIVE_STATUSES

    def _assert_unresolved(self):
        if ReturnStatus(self.status) != ReturnStatus.REQUESTED:
            raise AlreadyResolvedError(
                f"Return {self.id} was already {self.status}",
                entity_id=self.id,
                status=self.status,
            )

    def approve(self):
        self._assert_unresolved()
        now = datetime.now(UTC)
        self.status = ReturnStatus.APPROVED.value
        self.resolved_at = now
        self.raise_(
            ReturnApproved(
                return_id=str(self.id),
                order_id=str(self.order_id),
                refund_amount=self.refund_amount,
                approved_at=now,
            )
        )

    def reject(self):
        self._assert_unresolved()
        now = datetime.now(UTC)
        self.status = ReturnStatus.REJECTED.value
        self.resolved_at = now
        self.raise_(
            ReturnRejected(
                return_id=str(self.id),
                order_id=str(self.order_id),
                rejected_at=now,
            )
        )


@storefront.repository(part_of=Return)
class ReturnRepository:
    def for_order(self, order_id) -> list[Return]:
        return self._dao.query.filter(order_id=str(order_id)).all().items

    def active_for_order(self, order_id) -> Return | None:
        return next((r for r in self.for_order(order_id) if r.is_active), None)

    def everything(self) -> list[Return]:
        """Every return, newest first."""
        returns = self._dao.query.all().items
        return sorted(returns, key=lambda r: r.created_at, reverse=True)


def load_return(return_id) -> Return:
    try:
        return current_domain.repository_for(Return).get(str(return_id))
    except ObjectNotFoundError:
        raise ReturnNotFoundError(f"Return {return_id} does not exist", entity_id=return_id) from None

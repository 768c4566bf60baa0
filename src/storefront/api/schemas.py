"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the internal Protean
commands and read models.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ProductSummary(BaseModel):
    id: str
    name: str
    price: float

    @classmethod
    def from_product(cls, product) -> "ProductSummary | None":
        if product is None:
            return None
        return cls(id=str(product.id), name=product.name, price=product.price)


class ShopSummary(BaseModel):
    id: str
    name: str

    @classmethod
    def from_shop(cls, shop) -> "ShopSummary | None":
        if shop is None:
            return None
        return cls(id=str(shop.id), name=shop.name)


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Users and catalogue
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jane Doe",
                    "email": "jane@example.com",
                    "username": "jane",
                    "credential": "$2b$12$hashedvalue",
                    "phone": "+1-555-0123",
                }
            ]
        }
    }

    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    username: str = Field(..., max_length=100)
    credential: str = Field(..., max_length=255)
    phone: str | None = Field(None, max_length=20)


class UserIdResponse(BaseModel):
    user_id: str


class AddProductRequest(BaseModel):
    name: str = Field(..., max_length=255)
    price: float = Field(ge=0)
    description: str | None = None
    brand: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    regular_price: float | None = Field(None, ge=0)
    stock: int = Field(0, ge=0)


class ChangePriceRequest(BaseModel):
    new_price: float = Field(ge=0)


class ProductIdResponse(BaseModel):
    product_id: str


class RegisterShopRequest(BaseModel):
    name: str = Field(..., max_length=255)
    location: str | None = Field(None, max_length=255)
    description: str | None = None


class ShopIdResponse(BaseModel):
    shop_id: str


# ---------------------------------------------------------------------------
# Wallet
# ---------------------------------------------------------------------------
class WalletAmountRequest(BaseModel):
    """Amount to deposit or withdraw. Sign and size are checked by the ledger."""

    model_config = {"json_schema_extra": {"examples": [{"amount": 50.0}]}}

    amount: float


class BalanceResponse(BaseModel):
    user_id: str
    balance: float


class LedgerEntryResponse(BaseModel):
    id: str
    direction: str
    amount: float
    balance_after: float
    transaction_type: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_entry(cls, entry) -> "LedgerEntryResponse":
        return cls(
            id=str(entry.id),
            direction=entry.direction,
            amount=entry.amount,
            balance_after=entry.balance_after,
            transaction_type=entry.transaction_type,
            reference_id=entry.reference_id,
            created_at=entry.created_at,
        )


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "shop_id": "shop-001",
                    "quantity": 2,
                    "size": "M",
                    "delivery_date": None,
                }
            ]
        }
    }

    product_id: str
    shop_id: str
    quantity: int = Field(ge=1, default=1)
    size: str | None = Field(None, max_length=20)
    delivery_date: datetime | None = None


class UpdateCartLineRequest(BaseModel):
    quantity: int | None = Field(None, ge=1)
    size: str | None = Field(None, max_length=20)
    delivery_date: datetime | None = None


class CartLineIdResponse(BaseModel):
    line_id: str


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    shop_id: str
    quantity: int
    size: str | None = None
    delivery_date: datetime | None = None
    unit_price: float
    line_total: float
    product: ProductSummary | None = None
    shop: ShopSummary | None = None


class CartResponse(BaseModel):
    user_id: str
    lines: list[CartLineResponse]
    total: float

    @classmethod
    def from_view(cls, view) -> "CartResponse":
        return cls(
            user_id=view.user_id,
            lines=[
                CartLineResponse(
                    id=line.id,
                    product_id=line.product_id,
                    shop_id=line.shop_id,
                    quantity=line.quantity,
                    size=line.size,
                    delivery_date=line.delivery_date,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                    product=ProductSummary.from_product(line.product),
                    shop=ShopSummary.from_shop(line.shop),
                )
                for line in view.lines
            ],
            total=view.total,
        )


class ClearCartResponse(BaseModel):
    removed: int


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class SetOrderStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "shipped"}]}}

    status: str = Field(..., max_length=50)


class OrderResponse(BaseModel):
    id: str
    user_id: str
    checkout_id: str
    product_id: str
    shop_id: str
    quantity: int
    price: float
    line_total: float
    size: str | None = None
    status: str
    paid: bool
    delivery_date: datetime
    return_expiry_date: datetime
    created_at: datetime | None = None
    product: ProductSummary | None = None
    shop: ShopSummary | None = None

    @classmethod
    def from_view(cls, view) -> "OrderResponse":
        return cls(
            id=view.id,
            user_id=view.user_id,
            checkout_id=view.checkout_id,
            product_id=view.product_id,
            shop_id=view.shop_id,
            quantity=view.quantity,
            price=view.price,
            line_total=view.line_total,
            size=view.size,
            status=view.status,
            paid=view.paid,
            delivery_date=view.delivery_date,
            return_expiry_date=view.return_expiry_date,
            created_at=view.created_at,
            product=ProductSummary.from_product(view.product),
            shop=ShopSummary.from_shop(view.shop),
        )


# ---------------------------------------------------------------------------
# Returns
# ---------------------------------------------------------------------------
class RequestReturnRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"order_id": "ord-001", "reason": "Wrong size"}]}
    }

    order_id: str
    reason: str | None = Field(None, max_length=2000)


class ResolveReturnRequest(BaseModel):
    approve: bool


class ReturnResponse(BaseModel):
    id: str
    order_id: str
    reason: str | None = None
    status: str
    refund_amount: float
    created_at: datetime | None = None
    resolved_at: datetime | None = None
    order: OrderResponse | None = None

    @classmethod
    def from_view(cls, view) -> "ReturnResponse":
        return cls(
            id=view.id,
            order_id=view.order_id,
            reason=view.reason,
            status=view.status,
            refund_amount=view.refund_amount,
            created_at=view.created_at,
            resolved_at=view.resolved_at,
            order=OrderResponse.from_view(view.order) if view.order else None,
        )

"""FastAPI routes for the Storefront — users, catalogue, wallet, cart, orders, returns.

The caller is identified by the ``X-User-Id`` header, set by the
authenticating gateway in front of this service. Operator endpoints
(status updates, resolving returns) take no user header.
"""

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddProductRequest,
    AddToCartRequest,
    BalanceResponse,
    CartLineIdResponse,
    CartResponse,
    ChangePriceRequest,
    ClearCartResponse,
    LedgerEntryResponse,
    OrderResponse,
    ProductIdResponse,
    RegisterShopRequest,
    RegisterUserRequest,
    RequestReturnRequest,
    ResolveReturnRequest,
    ReturnResponse,
    SetOrderStatusRequest,
    ShopIdResponse,
    StatusResponse,
    UpdateCartLineRequest,
    UserIdResponse,
    WalletAmountRequest,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveCartLine, UpdateCartLine
from storefront.cart.view import cart_view
from storefront.catalogue.management import AddProduct, ChangeProductPrice, RegisterShop
from storefront.identity.registration import RegisterUser
from storefront.order.cancellation import cancel_order
from storefront.order.checkout import checkout
from storefront.order.status import set_order_status
from storefront.order.view import get_order, list_orders, order_view
from storefront.returns.requests import request_return, resolve_return
from storefront.returns.view import list_all_returns, list_returns, return_view
from storefront.wallet.ledger import ledger, ledger_history
from storefront.wallet.operations import deposit, withdraw

# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        username=body.username,
        credential=body.credential,
        phone=body.phone,
    )
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


# ---------------------------------------------------------------------------
# Catalogue Router
# ---------------------------------------------------------------------------
catalogue_router = APIRouter(tags=["catalogue"])


@catalogue_router.post("/products", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        price=body.price,
        description=body.description,
        brand=body.brand,
        category=body.category,
        regular_price=body.regular_price,
        stock=body.stock,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@catalogue_router.put("/products/{product_id}/price", response_model=StatusResponse)
async def change_product_price(product_id: str, body: ChangePriceRequest) -> StatusResponse:
    command = ChangeProductPrice(product_id=product_id, new_price=body.new_price)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@catalogue_router.post("/shops", status_code=201, response_model=ShopIdResponse)
async def register_shop(body: RegisterShopRequest) -> ShopIdResponse:
    command = RegisterShop(name=body.name, location=body.location, description=body.description)
    result = current_domain.process(command, asynchronous=False)
    return ShopIdResponse(shop_id=result)


# ---------------------------------------------------------------------------
# Wallet Router
# ---------------------------------------------------------------------------
wallet_router = APIRouter(prefix="/wallet", tags=["wallet"])


@wallet_router.get("", response_model=BalanceResponse)
async def get_balance(x_user_id: str = Header(...)) -> BalanceResponse:
    return BalanceResponse(user_id=x_user_id, balance=ledger.balance_of(x_user_id))


@wallet_router.post("/deposit", response_model=BalanceResponse)
async def deposit_funds(body: WalletAmountRequest, x_user_id: str = Header(...)) -> BalanceResponse:
    return BalanceResponse(user_id=x_user_id, balance=deposit(x_user_id, body.amount))


@wallet_router.post("/withdraw", response_model=BalanceResponse)
async def withdraw_funds(body: WalletAmountRequest, x_user_id: str = Header(...)) -> BalanceResponse:
    return BalanceResponse(user_id=x_user_id, balance=withdraw(x_user_id, body.amount))


@wallet_router.get("/transactions", response_model=list[LedgerEntryResponse])
async def list_transactions(x_user_id: str = Header(...)) -> list[LedgerEntryResponse]:
    return [LedgerEntryResponse.from_entry(entry) for entry in ledger_history(x_user_id)]


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(x_user_id: str = Header(...)) -> CartResponse:
    return CartResponse.from_view(cart_view(x_user_id))


@cart_router.post("/items", status_code=201, response_model=CartLineIdResponse)
async def add_cart_line(body: AddToCartRequest, x_user_id: str = Header(...)) -> CartLineIdResponse:
    command = AddToCart(
        user_id=x_user_id,
        product_id=body.product_id,
        shop_id=body.shop_id,
        quantity=body.quantity,
        size=body.size,
        delivery_date=body.delivery_date,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartLineIdResponse(line_id=result)


@cart_router.patch("/items/{line_id}", response_model=StatusResponse)
async def update_cart_line(line_id: str, body: UpdateCartLineRequest, x_user_id: str = Header(...)) -> StatusResponse:
    command = UpdateCartLine(
        user_id=x_user_id,
        line_id=line_id,
        quantity=body.quantity,
        size=body.size,
        delivery_date=body.delivery_date,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{line_id}", response_model=StatusResponse)
async def remove_cart_line(line_id: str, x_user_id: str = Header(...)) -> StatusResponse:
    current_domain.process(RemoveCartLine(user_id=x_user_id, line_id=line_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("", response_model=ClearCartResponse)
async def clear_cart(x_user_id: str = Header(...)) -> ClearCartResponse:
    removed = current_domain.process(ClearCart(user_id=x_user_id), asynchronous=False)
    return ClearCartResponse(removed=removed)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("/checkout", status_code=201, response_model=list[OrderResponse])
async def checkout_cart(x_user_id: str = Header(...)) -> list[OrderResponse]:
    return [OrderResponse.from_view(order_view(order)) for order in checkout(x_user_id)]


@order_router.get("", response_model=list[OrderResponse])
async def list_my_orders(x_user_id: str = Header(...)) -> list[OrderResponse]:
    return [OrderResponse.from_view(view) for view in list_orders(x_user_id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_my_order(order_id: str, x_user_id: str = Header(...)) -> OrderResponse:
    return OrderResponse.from_view(get_order(order_id, x_user_id))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_my_order(order_id: str, x_user_id: str = Header(...)) -> OrderResponse:
    return OrderResponse.from_view(order_view(cancel_order(order_id, x_user_id)))


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: SetOrderStatusRequest) -> OrderResponse:
    """Operator status update.

    400 for an unknown status or ``returned``; 409 when the move goes backwards
    or leaves ``completed`` or ``cancelled``.
    """
    return OrderResponse.from_view(order_view(set_order_status(order_id, body.status)))


# ---------------------------------------------------------------------------
# Returns Router
# ---------------------------------------------------------------------------
returns_router = APIRouter(prefix="/returns", tags=["returns"])


@returns_router.post("", status_code=201, response_model=ReturnResponse)
async def request_order_return(body: RequestReturnRequest, x_user_id: str = Header(...)) -> ReturnResponse:
    return ReturnResponse.from_view(return_view(request_return(body.order_id, x_user_id, body.reason)))


@returns_router.get("", response_model=list[ReturnResponse])
async def list_my_returns(x_user_id: str = Header(...)) -> list[ReturnResponse]:
    return [ReturnResponse.from_view(view) for view in list_returns(x_user_id)]


@returns_router.get("/all", response_model=list[ReturnResponse])
async def list_every_return() -> list[ReturnResponse]:
    return [ReturnResponse.from_view(view) for view in list_all_returns()]


@returns_router.post("/{return_id}/resolve", response_model=ReturnResponse)
async def resolve_order_return(return_id: str, body: ResolveReturnRequest) -> ReturnResponse:
    return ReturnResponse.from_view(return_view(resolve_return(return_id, body.approve)))


routers = [user_router, catalogue_router, wallet_router, cart_router, order_router, returns_router]

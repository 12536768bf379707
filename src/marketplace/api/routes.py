"""FastAPI routes for the Marketplace domain — cart, wishlist, checkout and orders.

Every request opens a fresh session on the profile's snapshot, so the store
is the only state shared between requests. The store and the downloader are
taken from ``app.state`` through dependencies.
"""

from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from marketplace.api.schemas import (
    AddToCartRequest,
    AddToCartResponse,
    ArtworkSchema,
    CartResponse,
    CheckoutResponse,
    DownloadResponse,
    LineItemResponse,
    OrderLineResponse,
    OrderResponse,
    StatusResponse,
    ToggleResponse,
    UpdateQuantityRequest,
    WishlistItemRequest,
    WishlistResponse,
)
from marketplace.cart.session import CartSession
from marketplace.checkout.downloads import LinkDownloads
from marketplace.checkout.flow import CheckoutFlow, CheckoutState
from marketplace.order.placement import orders_for, record_purchase
from marketplace.storage.snapshots import artwork_from_payload, artwork_to_payload
from marketplace.ui.reveal import DEFAULT_REVEAL_SECONDS
from marketplace.utils.logging import bind_profile
from marketplace.wishlist.session import WishlistSession


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
def get_store(request: Request):
    return request.app.state.store


def get_downloader(request: Request):
    return getattr(request.app.state, "downloader", None) or LinkDownloads()


def get_reveal_seconds(request: Request) -> float:
    settings = getattr(request.app.state, "settings", None)
    return settings.reveal_seconds if settings is not None else DEFAULT_REVEAL_SECONDS


def cart_session(owner_id: str, store=Depends(get_store)) -> CartSession:
    bind_profile(owner_id)
    return CartSession(store, owner_id=owner_id)


def wishlist_session(owner_id: str, store=Depends(get_store)) -> WishlistSession:
    bind_profile(owner_id)
    return WishlistSession(store, owner_id=owner_id)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"errors": exc.messages})


async def not_found_handler(request: Request, exc: ObjectNotFoundError):
    return JSONResponse(status_code=404, content={"errors": {"detail": [str(exc)]}})


def install_error_handlers(app):
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)


# ---------------------------------------------------------------------------
# Serialisers
# ---------------------------------------------------------------------------
def _artwork_schema(artwork) -> ArtworkSchema:
    return ArtworkSchema.model_validate(artwork_to_payload(artwork))


def _artwork_from_schema(schema: ArtworkSchema):
    return artwork_from_payload(schema.model_dump(by_alias=True))


def _cart_response(session: CartSession, model=CartResponse, **extra) -> CartResponse:
    return model(
        items=[
            LineItemResponse(
                artwork=_artwork_schema(item.artwork),
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=float(item.subtotal),
            )
            for item in session.items
        ],
        count=session.count,
        total=float(session.total),
        **extra,
    )


def _wishlist_response(session: WishlistSession) -> WishlistResponse:
    return WishlistResponse(
        items=[_artwork_schema(artwork) for artwork in session.items],
        count=session.count,
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        checkout_id=str(order.checkout_id),
        status=order.status,
        total=order.total,
        currency=order.currency,
        placed_at=order.placed_at.isoformat() if order.placed_at else None,
        lines=[
            OrderLineResponse(
                artwork_id=line.artwork_id,
                title=line.title,
                unit_price=line.unit_price,
                quantity=line.quantity,
                download_url=line.download_url,
            )
            for line in order.lines
        ],
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/profiles/{owner_id}", tags=["marketplace"])


@router.get("/cart", response_model=CartResponse)
async def get_cart(session: CartSession = Depends(cart_session)) -> CartResponse:
    return _cart_response(session)


@router.post("/cart/items", response_model=AddToCartResponse)
async def add_cart_item(
    body: AddToCartRequest,
    session: CartSession = Depends(cart_session),
    reveal_seconds: float = Depends(get_reveal_seconds),
) -> AddToCartResponse:
    session.add_item(_artwork_from_schema(body.artwork), body.quantity)
    return _cart_response(session, AddToCartResponse, reveal_seconds=reveal_seconds)


@router.put("/cart/items/{artwork_id}", response_model=CartResponse)
async def update_cart_item_quantity(
    artwork_id: str, body: UpdateQuantityRequest, session: CartSession = Depends(cart_session)
) -> CartResponse:
    session.update_quantity(artwork_id, body.quantity)
    return _cart_response(session)


@router.delete("/cart/items/{artwork_id}", response_model=CartResponse)
async def remove_cart_item(artwork_id: str, session: CartSession = Depends(cart_session)) -> CartResponse:
    session.remove_item(artwork_id)
    return _cart_response(session)


@router.delete("/cart", response_model=StatusResponse)
async def clear_cart(session: CartSession = Depends(cart_session)) -> StatusResponse:
    session.clear()
    return StatusResponse()


# ---------------------------------------------------------------------------
# Wishlist Router
# ---------------------------------------------------------------------------
@router.get("/wishlist", response_model=WishlistResponse)
async def get_wishlist(session: WishlistSession = Depends(wishlist_session)) -> WishlistResponse:
    return _wishlist_response(session)


@router.post("/wishlist/items", response_model=WishlistResponse)
async def add_wishlist_item(
    body: WishlistItemRequest, session: WishlistSession = Depends(wishlist_session)
) -> WishlistResponse:
    session.add_item(_artwork_from_schema(body.artwork))
    return _wishlist_response(session)


@router.post("/wishlist/toggle", response_model=ToggleResponse)
async def toggle_wishlist_item(
    body: WishlistItemRequest, session: WishlistSession = Depends(wishlist_session)
) -> ToggleResponse:
    present = session.toggle(_artwork_from_schema(body.artwork))
    return ToggleResponse(present=present, count=session.count)


@router.delete("/wishlist/items/{artwork_id}", response_model=WishlistResponse)
async def remove_wishlist_item(
    artwork_id: str, session: WishlistSession = Depends(wishlist_session)
) -> WishlistResponse:
    session.remove_item(artwork_id)
    return _wishlist_response(session)


@router.delete("/wishlist", response_model=StatusResponse)
async def clear_wishlist(session: WishlistSession = Depends(wishlist_session)) -> StatusResponse:
    session.clear()
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout & Orders
# ---------------------------------------------------------------------------
@router.post("/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout(
    response: Response,
    session: CartSession = Depends(cart_session),
    downloader=Depends(get_downloader),
    idempotency_key: str | None = Header(default=None, max_length=255),
) -> CheckoutResponse:
    """Review the cart and purchase it in one step.

    1. Record a purchase order for the cart contents
    2. Trigger one download per line
    3. Clear the cart

    A client retrying a checkout sends the same ``Idempotency-Key`` header;
    it becomes the checkout id, so the order is recorded only once.
    """
    flow = CheckoutFlow(
        session,
        download=downloader,
        record_order=record_purchase,
        checkout_id=idempotency_key,
    )
    flow.review()
    receipt = flow.purchase()

    if receipt.state == CheckoutState.FAILED:
        response.status_code = 409

    return CheckoutResponse(
        checkout_id=receipt.checkout_id,
        state=receipt.state.value,
        order_id=receipt.order_id,
        total=float(receipt.total),
        message=receipt.message,
        alert=receipt.alert,
        redirect_to=receipt.redirect_to,
        downloads=[
            DownloadResponse(
                artwork_id=download.artwork_id,
                filename=download.filename,
                url=download.url,
                path=download.path,
            )
            for download in receipt.downloads
        ],
        failed_downloads=receipt.failed_downloads,
        failure_reason=receipt.failure_reason,
    )


@router.get("/orders", response_model=list[OrderResponse])
async def list_orders(owner_id: str) -> list[OrderResponse]:
    return [_order_response(order) for order in orders_for(owner_id)]

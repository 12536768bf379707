"""Pydantic request/response schemas for the Marketplace API.

These are external contracts (anti-corruption layer), separate from the
internal Protean aggregates. Artwork objects use the same keys as the stored
snapshots so a client can send back what it received.
"""

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CreatorSchema(BaseModel):
    username: str


class ArtworkSchema(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "art-001",
                    "title": "Harbour at Dusk",
                    "image": "https://cdn.example.com/art-001.jpg",
                    "price": 45.0,
                    "currency": "USD",
                    "creator": {"username": "mira"},
                    "isSold": False,
                }
            ]
        },
    )

    id: str
    title: str
    image: str | None = None
    price: float = Field(ge=0)
    currency: str = "USD"
    creator: CreatorSchema | str | None = None
    is_sold: bool = Field(default=False, alias="isSold")


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    artwork: ArtworkSchema
    quantity: int = Field(ge=1, default=1)


class UpdateQuantityRequest(BaseModel):
    # Zero or less removes the line
    quantity: int


class WishlistItemRequest(BaseModel):
    artwork: ArtworkSchema


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class LineItemResponse(BaseModel):
    artwork: ArtworkSchema
    quantity: int
    unit_price: float
    subtotal: float


class CartResponse(BaseModel):
    items: list[LineItemResponse]
    count: int
    total: float


class AddToCartResponse(CartResponse):
    # Seconds the client keeps the mini-cart open after the add
    reveal_seconds: float


class WishlistResponse(BaseModel):
    items: list[ArtworkSchema]
    count: int


class ToggleResponse(BaseModel):
    present: bool
    count: int


class DownloadResponse(BaseModel):
    artwork_id: str
    filename: str
    url: str | None = None
    path: str | None = None


class CheckoutResponse(BaseModel):
    checkout_id: str
    state: str
    order_id: str | None = None
    total: float
    message: str
    alert: str | None = None
    redirect_to: str | None = None
    downloads: list[DownloadResponse] = []
    failed_downloads: dict[str, str] = {}
    failure_reason: str | None = None


class OrderLineResponse(BaseModel):
    artwork_id: str
    title: str
    unit_price: float
    quantity: int
    download_url: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    checkout_id: str
    status: str
    total: float
    currency: str
    placed_at: str | None = None
    lines: list[OrderLineResponse]

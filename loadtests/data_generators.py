"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the marketplace's validation
rules (non-negative prices, supported currencies, unsold artworks in the
cart) and use the exact keys expected by the API's Pydantic schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

CURRENCIES = ["USD", "EUR", "GBP"]


def profile_id() -> str:
    """Generate unique profile IDs like 'profile-lt-a1b2c3d4'."""
    return f"profile-lt-{uuid.uuid4().hex[:8]}"


def artwork_id() -> str:
    return f"art-{uuid.uuid4().hex[:10]}"


def artwork_data(sold: bool = False, currency: str = "USD") -> dict:
    """Generate an artwork payload in the stored snapshot layout."""
    identifier = artwork_id()
    return {
        "id": identifier,
        "title": " ".join(fake.words(nb=random.randint(1, 4))).title()[:255],
        "image": f"https://cdn.example.com/artworks/{identifier}.jpg",
        "price": round(random.uniform(5.0, 500.0), 2),
        "currency": currency,
        "creator": {"username": fake.user_name()[:100]},
        "isSold": sold,
    }


def add_to_cart_data(artwork: dict | None = None, quantity: int | None = None) -> dict:
    """Generate AddToCartRequest payload."""
    return {
        "artwork": artwork or artwork_data(),
        "quantity": quantity if quantity is not None else random.randint(1, 3),
    }


def wishlist_item_data(artwork: dict | None = None) -> dict:
    """Generate WishlistItemRequest payload. Sold artworks are allowed."""
    return {"artwork": artwork or artwork_data(sold=random.random() < 0.2)}

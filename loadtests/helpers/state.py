"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across users.
State tracks the profile and the artworks it has touched so follow-up
requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ProfileState:
    """Tracks the cart and wishlist of a single simulated profile."""

    profile_id: str | None = None
    cart_artworks: list[dict] = field(default_factory=list)
    wishlist_artworks: list[dict] = field(default_factory=list)
    cart_count: int = 0
    order_ids: list[str] = field(default_factory=list)

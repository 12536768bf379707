"""Marketplace load test scenarios.

Three stateful SequentialTaskSet journeys covering cart browsing with
abandonment, wishlist curation, and the cart-to-checkout purchase flow.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import add_to_cart_data, artwork_data, profile_id, wishlist_item_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ProfileState


class CartBrowsingJourney(SequentialTaskSet):
    """Add Items -> Re-add One -> Update Quantity -> Remove Item -> Walk Away.

    Models a browsing shopper who fills the cart, changes their mind and
    never checks out. Every step rewrites the profile's cart snapshot.
    """

    def on_start(self):
        self.state = ProfileState(profile_id=profile_id())

    def _add(self, payload, label):
        with self.client.post(
            f"/profiles/{self.state.profile_id}/cart/items",
            json=payload,
            catch_response=True,
            name="POST /profiles/{id}/cart/items",
        ) as resp:
            if resp.status_code == 200:
                self.state.cart_count = resp.json()["count"]
                if payload["artwork"] not in self.state.cart_artworks:
                    self.state.cart_artworks.append(payload["artwork"])
            else:
                resp.failure(f"{label} failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def add_item_1(self):
        self._add(add_to_cart_data(), "Add cart item")

    @task
    def add_item_2(self):
        self._add(add_to_cart_data(), "Add cart item 2")

    @task
    def add_same_item_again(self):
        if not self.state.cart_artworks:
            self.interrupt()
        self._add(add_to_cart_data(self.state.cart_artworks[0], 1), "Merge cart item")

    @task
    def update_quantity(self):
        artwork_id = self.state.cart_artworks[0]["id"]
        with self.client.put(
            f"/profiles/{self.state.profile_id}/cart/items/{artwork_id}",
            json={"quantity": random.randint(1, 5)},
            catch_response=True,
            name="PUT /profiles/{id}/cart/items/{artwork_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update quantity failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def remove_item(self):
        artwork_id = self.state.cart_artworks[-1]["id"]
        with self.client.delete(
            f"/profiles/{self.state.profile_id}/cart/items/{artwork_id}",
            catch_response=True,
            name="DELETE /profiles/{id}/cart/items/{artwork_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Remove cart item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        self.client.get(f"/profiles/{self.state.profile_id}/cart", name="GET /profiles/{id}/cart")

    @task
    def done(self):
        self.interrupt()


class WishlistJourney(SequentialTaskSet):
    """Add -> Add Duplicate -> Toggle -> View -> Clear.

    Exercises the idempotent add and the toggle round trip.
    """

    def on_start(self):
        self.state = ProfileState(profile_id=profile_id())

    @task
    def add_to_wishlist(self):
        payload = wishlist_item_data()
        with self.client.post(
            f"/profiles/{self.state.profile_id}/wishlist/items",
            json=payload,
            catch_response=True,
            name="POST /profiles/{id}/wishlist/items",
        ) as resp:
            if resp.status_code == 200:
                self.state.wishlist_artworks.append(payload["artwork"])
            else:
                resp.failure(f"Add to wishlist failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_duplicate(self):
        with self.client.post(
            f"/profiles/{self.state.profile_id}/wishlist/items",
            json={"artwork": self.state.wishlist_artworks[0]},
            catch_response=True,
            name="POST /profiles/{id}/wishlist/items",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Duplicate add failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif resp.json()["count"] != 1:
                resp.failure(f"Duplicate add changed the wishlist: {resp.json()['count']} entries")

    @task
    def toggle_new_artwork(self):
        with self.client.post(
            f"/profiles/{self.state.profile_id}/wishlist/toggle",
            json={"artwork": artwork_data()},
            catch_response=True,
            name="POST /profiles/{id}/wishlist/toggle",
        ) as resp:
            if resp.status_code != 200 or resp.json()["present"] is not True:
                resp.failure(f"Toggle failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_wishlist(self):
        self.client.get(f"/profiles/{self.state.profile_id}/wishlist", name="GET /profiles/{id}/wishlist")

    @task
    def clear_wishlist(self):
        self.client.delete(f"/profiles/{self.state.profile_id}/wishlist", name="DELETE /profiles/{id}/wishlist")

    @task
    def done(self):
        self.interrupt()


class CheckoutJourney(SequentialTaskSet):
    """Add Items -> Checkout -> Verify Empty Cart -> Order History.

    The purchase path: every completed checkout records one order and
    leaves the cart empty.
    """

    def on_start(self):
        self.state = ProfileState(profile_id=profile_id())

    @task
    def fill_cart(self):
        for _ in range(random.randint(1, 4)):
            with self.client.post(
                f"/profiles/{self.state.profile_id}/cart/items",
                json=add_to_cart_data(),
                catch_response=True,
                name="POST /profiles/{id}/cart/items",
            ) as resp:
                if resp.status_code == 200:
                    self.state.cart_count = resp.json()["count"]
                else:
                    resp.failure(f"Add cart item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def checkout(self):
        if not self.state.cart_count:
            self.interrupt()
        with self.client.post(
            f"/profiles/{self.state.profile_id}/checkout",
            catch_response=True,
            name="POST /profiles/{id}/checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["order_id"])
                self.state.cart_count = 0
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def verify_cart_empty(self):
        with self.client.get(
            f"/profiles/{self.state.profile_id}/cart",
            catch_response=True,
            name="GET /profiles/{id}/cart",
        ) as resp:
            if resp.status_code == 200 and resp.json()["count"] != 0:
                resp.failure("Cart not empty after checkout")

    @task
    def order_history(self):
        with self.client.get(
            f"/profiles/{self.state.profile_id}/orders",
            catch_response=True,
            name="GET /profiles/{id}/orders",
        ) as resp:
            if resp.status_code != 200 or len(resp.json()) != len(self.state.order_ids):
                resp.failure(f"Order history mismatch: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class MarketplaceUser(HttpUser):
    """Locust user simulating marketplace shoppers.

    Weighted distribution:
    - 50% Cart browsing (abandonment)
    - 25% Wishlist curation
    - 25% Cart to checkout
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        CartBrowsingJourney: 2,
        WishlistJourney: 1,
        CheckoutJourney: 1,
    }


class CheckoutSpikeUser(HttpUser):
    """Checkout-only burst for stress runs against the order repository."""

    wait_time = between(0.1, 0.3)
    tasks = [CheckoutJourney]

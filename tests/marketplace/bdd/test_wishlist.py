"""BDD tests for the wishlist."""

import json

from pytest_bdd import given, parsers, scenarios, then, when

from marketplace.storage.snapshots import wishlist_key

scenarios("features/wishlist.feature")


@given(parsers.cfparse('artwork "{artwork_id}" is on the wishlist already'))
def wishlisted(wishlist, make_artwork, artwork_id):
    wishlist.add_item(make_artwork(artwork_id))


@when(parsers.cfparse('artwork "{artwork_id}" is added to the wishlist'))
def add_to_wishlist(wishlist, make_artwork, artwork_id):
    wishlist.add_item(make_artwork(artwork_id))


@when(parsers.cfparse('artwork "{artwork_id}" is toggled on the wishlist'))
def toggle(wishlist, make_artwork, artwork_id):
    wishlist.toggle(make_artwork(artwork_id))


@when(parsers.cfparse('artwork "{artwork_id}" is removed from the wishlist'))
def remove_from_wishlist(wishlist, artwork_id):
    wishlist.remove_item(artwork_id)


@then(parsers.cfparse("the wishlist has {count:d} entry"))
def wishlist_has_entry(wishlist, count):
    assert wishlist.count == count


@then(parsers.cfparse("the wishlist has {count:d} entries"))
def wishlist_has_entries(wishlist, count):
    assert wishlist.count == count


@then(parsers.cfparse('artwork "{artwork_id}" is on the wishlist'))
def is_on_wishlist(wishlist, artwork_id):
    assert wishlist.is_present(artwork_id)


@then(parsers.cfparse('artwork "{artwork_id}" is not on the wishlist'))
def is_not_on_wishlist(wishlist, artwork_id):
    assert not wishlist.is_present(artwork_id)


@then("the stored wishlist is empty")
def stored_wishlist_empty(bdd_store, owner_id):
    assert json.loads(bdd_store.get(wishlist_key(owner_id))) == []

from storefront.cart.store import CartStore
from storefront.catalog.repository import get_game
from storefront.entitlements.checker import EntitlementChecker
from storefront.session import Session


def test_is_in_cart_uses_cart_snapshot(cart, entitlements, data):
    assert not entitlements.is_in_cart("g-elden")
    cart.add_item(get_game(data, "g-elden"))
    assert entitlements.is_in_cart("g-elden")


def test_is_owned_reads_library(entitlements, data):
    assert not entitlements.is_owned("u1", "g-portal")
    data.seed("user_library", {"id": "lib-1", "user_id": "u1", "game_id": "g-portal"})
    assert entitlements.is_owned("u1", "g-portal")
    # Possession propre à l'utilisateur
    assert not entitlements.is_owned("u2", "g-portal")


def test_is_owned_with_missing_ids_is_false(entitlements):
    assert entitlements.is_owned("", "g-portal") is False
    assert entitlements.is_owned("u1", "") is False


def test_game_status_combines_cart_library_and_wishlist(cart, entitlements, data):
    cart.add_item(get_game(data, "g-hades"))
    data.seed("user_library", {"id": "lib-1", "user_id": "u1", "game_id": "g-elden"})
    data.seed("wishlist", {"id": "w-1", "user_id": "u1", "game_id": "g-hades"})

    assert entitlements.game_status("g-hades") == {"in_cart": True, "owned": False, "in_wishlist": True}
    assert entitlements.game_status("g-elden") == {"in_cart": False, "owned": True, "in_wishlist": False}


def test_game_status_anonymous_is_all_false(data):
    data.seed("user_library", {"id": "lib-1", "user_id": "u1", "game_id": "g-elden"})
    anon = Session.anonymous()
    checker = EntitlementChecker(anon, CartStore(anon, data), data)

    assert checker.game_status("g-elden") == {"in_cart": False, "owned": False, "in_wishlist": False}

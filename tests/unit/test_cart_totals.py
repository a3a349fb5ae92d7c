from decimal import Decimal

from storefront.cart.models import CartItem
from storefront.cart.totals import DISCOUNT_RATE, CartTotals, compute_totals
from storefront.catalog.models import Game


def _item(game_id, price=None, is_free=False, title=None, game=True):
    g = Game(id=game_id, title=title or game_id, price=Decimal(price) if price is not None else None, is_free=is_free)
    return CartItem(id=f"c-{game_id}", user_id="u1", game_id=game_id, game=g if game else None)


def test_single_paid_game_rounds_discount_to_cents():
    # Arrange: Elden Ring 59.99
    items = [_item("g-elden", "59.99")]
    # Act
    totals = compute_totals(items)
    # Assert
    assert totals.subtotal == Decimal("59.99")
    assert totals.discount == Decimal("6.00")
    assert totals.total == Decimal("53.99")


def test_free_games_and_missing_prices_count_as_zero():
    items = [
        _item("g-elden", "59.99"),
        _item("g-apex", "19.99", is_free=True),  # gratuit: prix ignoré
        _item("g-unknown", None),               # prix absent
        _item("g-deleted", game=False),         # jeu retiré du catalogue
        _item("g-portal", "9.99"),
    ]

    totals = compute_totals(items)

    assert totals.subtotal == Decimal("69.98")
    assert totals.discount == Decimal("7.00")
    assert totals.total == Decimal("62.98")


def test_empty_cart_is_all_zero():
    totals = compute_totals([])
    assert totals == CartTotals()
    assert totals.to_dict() == {"subtotal": 0.0, "discount": 0.0, "total": 0.0}


def test_total_is_subtotal_minus_rounded_discount():
    baskets = [
        ["24.99"],
        ["59.99", "24.99", "9.99"],
        ["0.05"],
        ["10.00", "10.00", "10.00"],
    ]
    for prices in baskets:
        items = [_item(f"g{i}", p) for i, p in enumerate(prices)]
        totals = compute_totals(items)
        expected_discount = (totals.subtotal * DISCOUNT_RATE).quantize(Decimal("0.01"), rounding="ROUND_HALF_UP")
        assert totals.discount == expected_discount
        assert totals.total == totals.subtotal - totals.discount
        assert totals.total >= 0


def test_compute_totals_is_pure():
    items = [_item("g-hades", "24.99")]
    assert compute_totals(items) == compute_totals(items)
    assert len(items) == 1

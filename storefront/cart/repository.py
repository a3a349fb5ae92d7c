"""
Accès aux données pour la feature 'cart' (table 'cart').
"""
from typing import List

from storefront.cart.models import CartItem
from storefront.catalog.repository import get_games_map
from storefront.infra.data_access import DataAccess

CART_COLUMNS = "id, user_id, game_id, added_at, quantity"

# module storefront.cart.repository
def fetch_cart_items(data: DataAccess, user_id: str) -> List[CartItem]:
    """
    Lignes du panier de l'utilisateur, hydratées avec le jeu correspondant.
    - Tri: added_at croissant (ordre d'insertion, déterministe pour le checkout)
    - Les lignes dont le jeu n'existe plus au catalogue sont conservées (game=None)
    """
    rows = data.query("cart", {"user_id": user_id}, order=("added_at", False), columns=CART_COLUMNS)
    games = get_games_map(data, [r.get("game_id") for r in rows])
    return [CartItem.from_row(r, games.get(str(r.get("game_id")))) for r in rows]

def insert_cart_item(data: DataAccess, user_id: str, game_id: str) -> dict:
    return data.insert("cart", {"user_id": user_id, "game_id": game_id, "quantity": 1})

def delete_cart_game(data: DataAccess, user_id: str, game_id: str) -> None:
    data.delete("cart", {"user_id": user_id, "game_id": game_id})

def delete_user_cart(data: DataAccess, user_id: str) -> None:
    data.delete("cart", {"user_id": user_id})

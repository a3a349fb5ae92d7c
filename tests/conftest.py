import os
import itertools
import pytest
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator, List, Optional
from fastapi.testclient import TestClient

# Pas de Redis en tests: le lifespan désactive fastapi-limiter
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from storefront.app import app as fastapi_app
from storefront.cart.store import CartStore
from storefront.checkout.gateway import SimulatedPaymentGateway
from storefront.checkout.pipeline import CheckoutPipeline
from storefront.dependencies import get_data_access, get_payment_gateway
from storefront.entitlements.checker import EntitlementChecker
from storefront.errors import DuplicateKeyError, StorageError
from storefront.infra.data_access import DataAccess, matches
from storefront.session import Session
from storefront.utils.security import optional_session

USER_ID = "u1"
USER_EMAIL = "player@example.com"

GAMES = [
    {"id": "g-elden", "title": "Elden Ring", "price": "59.99", "is_free": False, "genre": "RPG", "rating": 4.8},
    {"id": "g-apex", "title": "Apex Legends", "price": "0", "is_free": True, "genre": "Shooter", "rating": 4.1},
    {"id": "g-portal", "title": "Portal 2", "price": "9.99", "is_free": False, "genre": "Puzzle", "rating": 4.9},
    {"id": "g-hades", "title": "Hades", "price": "24.99", "is_free": False, "genre": "Roguelike", "rating": 4.7},
]

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid or nodeid.startswith("tests/unit/"):
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid or nodeid.startswith("tests/integration/"):
            item.add_marker(pytest.mark.integration)


class InMemoryDataAccess(DataAccess):
    """
    Double en mémoire de l'accès aux données.
    - Unicité (user_id, game_id) sur cart, user_library et wishlist -> DuplicateKeyError
    - Horodatages croissants (added_at, purchase_date, created_at) pour des tris déterministes
    - fail_after(action, collection, after, error): injecte une erreur après N appels réussis
    - calls: journal (action, collection, payload) des écritures
    """

    UNIQUE_KEYS = {
        "cart": ("user_id", "game_id"),
        "user_library": ("user_id", "game_id"),
        "wishlist": ("user_id", "game_id"),
    }
    TIMESTAMP_FIELDS = {
        "cart": "added_at",
        "wishlist": "added_at",
        "user_library": "purchase_date",
        "user_activity": "created_at",
        "payments": "created_at",
    }

    def __init__(self, current_user: Optional[Dict[str, Any]] = None, feed=None):
        super().__init__(feed)
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.current_user = current_user
        self.calls: List[tuple] = []
        self._failures: Dict[tuple, list] = {}
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)
        self._epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def seed(self, collection: str, *rows: Dict[str, Any]) -> None:
        for row in rows:
            self.tables[collection].append(dict(row))

    def fail_after(self, action: str, collection: str, after: int = 0, error: Exception = None) -> None:
        self._failures[(action, collection)] = [after, error or StorageError()]

    def _maybe_fail(self, action: str, collection: str) -> None:
        rule = self._failures.get((action, collection))
        if rule is None:
            return
        if rule[0] > 0:
            rule[0] -= 1
            return
        raise rule[1]

    def _now(self) -> str:
        return (self._epoch + timedelta(seconds=next(self._clock))).isoformat()

    def rows(self, collection: str, **filters) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.tables[collection] if matches(r, filters)]

    def query(self, collection, filters=None, order=None, limit=None, columns="*"):
        self._maybe_fail("query", collection)
        found = [dict(r) for r in self.tables[collection] if matches(r, filters)]
        if order:
            column, descending = order
            found.sort(key=lambda r: str(r.get(column) or ""), reverse=descending)
        if limit:
            found = found[:limit]
        return found

    def insert(self, collection, record):
        self._maybe_fail("insert", collection)
        row = dict(record)
        keys = self.UNIQUE_KEYS.get(collection)
        if keys and self.rows(collection, **{k: row.get(k) for k in keys}):
            raise DuplicateKeyError()
        row.setdefault("id", f"{collection}-{next(self._ids)}")
        ts_field = self.TIMESTAMP_FIELDS.get(collection)
        if ts_field:
            row.setdefault(ts_field, self._now())
        self.tables[collection].append(row)
        self.calls.append(("insert", collection, dict(row)))
        self.feed.publish(collection, "INSERT", dict(row))
        return dict(row)

    def update(self, collection, id, patch):
        self._maybe_fail("update", collection)
        for row in self.tables[collection]:
            if row.get("id") == id:
                row.update(patch)
                self.calls.append(("update", collection, dict(row)))
                self.feed.publish(collection, "UPDATE", dict(row))

    def delete(self, collection, filters):
        if not filters:
            raise ValueError("delete() sans filtre refusé")
        self._maybe_fail("delete", collection)
        removed = [r for r in self.tables[collection] if matches(r, filters)]
        self.tables[collection] = [r for r in self.tables[collection] if not matches(r, filters)]
        for row in removed:
            self.calls.append(("delete", collection, dict(row)))
            self.feed.publish(collection, "DELETE", dict(row))

    def get_current_user(self):
        return self.current_user


@pytest.fixture
def data() -> InMemoryDataAccess:
    d = InMemoryDataAccess(current_user={"id": USER_ID, "email": USER_EMAIL})
    d.seed("games", *GAMES)
    d.seed("profiles", {"id": USER_ID, "username": "player_one", "avatar_url": None})
    return d

@pytest.fixture
def session() -> Session:
    return Session(user_id=USER_ID, email=USER_EMAIL, token="fake-token")

@pytest.fixture
def gateway() -> SimulatedPaymentGateway:
    return SimulatedPaymentGateway(delay_seconds=0)

@pytest.fixture
def cart(session, data) -> CartStore:
    store = CartStore(session, data)
    store.refresh()
    return store

@pytest.fixture
def entitlements(session, cart, data) -> EntitlementChecker:
    return EntitlementChecker(session, cart, data)

@pytest.fixture
def pipeline(session, cart, entitlements, data, gateway) -> CheckoutPipeline:
    return CheckoutPipeline(session, cart, entitlements, data, gateway)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

def _client_for(app, session: Session, data: DataAccess, gateway) -> Generator[TestClient, None, None]:
    app.dependency_overrides[optional_session] = lambda: session
    app.dependency_overrides[get_data_access] = lambda: data
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()

@pytest.fixture()
def client(app, session, data, gateway) -> Generator[TestClient, None, None]:
    """Client API avec un utilisateur authentifié et un stockage en mémoire."""
    yield from _client_for(app, session, data, gateway)

@pytest.fixture()
def anon_client(app, data, gateway) -> Generator[TestClient, None, None]:
    yield from _client_for(app, Session.anonymous(), data, gateway)

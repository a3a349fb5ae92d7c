"""
Interface d'accès aux données (collections nommées) consommée par le panier,
le contrôle des droits et le tunnel d'achat.

- DataAccess: contrat commun (query/insert/update/delete, utilisateur courant,
  nom d'utilisateur, abonnement aux changements).
- SupabaseDataAccess: implémentation PostgREST via supabase-py, liée au JWT de
  l'utilisateur (RLS actif).
- Les erreurs de stockage sont normalisées: 23505 -> DuplicateKeyError,
  timeout httpx -> Timeout, le reste -> StorageError.
"""
import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx
from postgrest import APIError
from supabase import Client

from storefront.errors import DuplicateKeyError, StorageError, Timeout

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

Filters = Mapping[str, Any]
Order = Tuple[str, bool]
ChangeCallback = Callable[[str, Dict[str, Any]], None]


def matches(record: Mapping[str, Any], filters: Optional[Filters]) -> bool:
    """Égalité simple colonne par colonne; une valeur liste/tuple vaut un IN."""
    for column, expected in (filters or {}).items():
        value = record.get(column)
        if isinstance(expected, (list, tuple, set)):
            if value not in expected:
                return False
        elif value != expected:
            return False
    return True


class ChangeFeed:
    """Observateurs des écritures faites au travers de l'interface (insert/update/delete)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: List[Tuple[str, Dict[str, Any], ChangeCallback]] = []

    def subscribe(self, collection: str, filters: Optional[Filters], on_change: ChangeCallback) -> Callable[[], None]:
        entry = (collection, dict(filters or {}), on_change)
        with self._lock:
            self._subscribers.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)

        return unsubscribe

    def publish(self, collection: str, event: str, record: Dict[str, Any]) -> None:
        with self._lock:
            targets = [cb for (coll, flt, cb) in self._subscribers if coll == collection and matches(record, flt)]
        for callback in targets:
            try:
                callback(event, record)
            except Exception:
                # Un observateur défaillant ne doit pas casser l'écriture déjà faite
                logger.exception("change_feed callback failed collection=%s event=%s", collection, event)


class DataAccess:
    """Contrat d'accès aux données, indépendant du transport."""

    def __init__(self, feed: Optional[ChangeFeed] = None):
        self.feed = feed or ChangeFeed()

    def query(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
        columns: str = "*",
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def update(self, collection: str, id: str, patch: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, collection: str, filters: Filters) -> None:
        raise NotImplementedError

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def get_username(self, user_id: str) -> Optional[str]:
        rows = self.query("profiles", {"id": user_id}, limit=1, columns="id, username")
        username = (rows[0].get("username") if rows else None) or ""
        return username.strip() or None

    def subscribe(self, collection: str, filters: Optional[Filters], on_change: ChangeCallback) -> Callable[[], None]:
        return self.feed.subscribe(collection, filters, on_change)


class SupabaseDataAccess(DataAccess):
    """
    Accès PostgREST via supabase-py.
    - client: Client Supabase (généralement get_user_supabase(token) pour respecter la RLS)
    - user_token: JWT de la session, utilisé par get_current_user()
    """

    def __init__(self, client: Client, user_token: Optional[str] = None, feed: Optional[ChangeFeed] = None):
        super().__init__(feed)
        self.client = client
        self.user_token = user_token

    def _call(self, action: str, collection: str, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except httpx.TimeoutException as e:
            logger.exception("data_access.%s timeout collection=%s", action, collection)
            raise Timeout() from e
        except APIError as e:
            if str(getattr(e, "code", "") or "") == UNIQUE_VIOLATION:
                raise DuplicateKeyError(getattr(e, "message", None) or None) from e
            logger.exception("data_access.%s failed collection=%s", action, collection)
            raise StorageError(getattr(e, "message", None) or None) from e
        except Exception as e:
            logger.exception("data_access.%s failed collection=%s", action, collection)
            raise StorageError() from e

    def _apply_filters(self, q, filters: Optional[Filters]):
        for column, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set)):
                q = q.in_(column, [str(v) for v in value])
            else:
                q = q.eq(column, value)
        return q

    def query(self, collection, filters=None, order=None, limit=None, columns="*"):
        if filters and any(isinstance(v, (list, tuple, set)) and not v for v in filters.values()):
            return []

        def _run():
            q = self._apply_filters(self.client.table(collection).select(columns), filters)
            if order:
                column, descending = order
                q = q.order(column, desc=descending)
            if limit:
                q = q.limit(limit)
            return q.execute().data or []

        return self._call("query", collection, _run)

    def insert(self, collection, record):
        def _run():
            res = self.client.table(collection).insert(record).execute()
            rows = res.data or []
            return rows[0] if rows else dict(record)

        row = self._call("insert", collection, _run)
        self.feed.publish(collection, "INSERT", row)
        return row

    def update(self, collection, id, patch):
        def _run():
            return self.client.table(collection).update(patch).eq("id", id).execute().data or []

        rows = self._call("update", collection, _run)
        for row in rows:
            self.feed.publish(collection, "UPDATE", row)

    def delete(self, collection, filters):
        if not filters:
            raise ValueError("delete() sans filtre refusé")

        def _run():
            q = self._apply_filters(self.client.table(collection).delete(), filters)
            return q.execute().data or []

        rows = self._call("delete", collection, _run)
        for row in rows or [dict(filters)]:
            self.feed.publish(collection, "DELETE", row)

    def get_current_user(self):
        if not self.user_token:
            return None
        try:
            res = self.client.auth.get_user(self.user_token)
        except Exception:
            logger.exception("data_access.get_current_user failed")
            return None
        user = getattr(res, "user", None)
        if not user or not getattr(user, "id", None):
            return None
        return {"id": str(user.id), "email": getattr(user, "email", None)}

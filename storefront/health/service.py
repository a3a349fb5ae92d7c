"""
Diagnostic Supabase pour /health/supabase: DNS, connexion et lecture des tables
utilisées par le parcours d'achat.
"""
import socket
import time
from typing import Any, Dict
from urllib.parse import urlparse

from storefront.config import SUPABASE_URL
from storefront.infra.supabase_client import get_supabase

STORE_TABLES = ("games", "cart", "user_library", "payments", "profiles")

def _check_table(client, name: str) -> Dict[str, Any]:
    started = time.perf_counter()
    try:
        client.table(name).select("id").limit(1).execute()
    except Exception as e:
        return {"ok": False, "error": str(e)}
    return {"ok": True, "latency_ms": round((time.perf_counter() - started) * 1000, 1)}

def _check_dns(hostname: str) -> Dict[str, Any]:
    try:
        socket.getaddrinfo(hostname, 443)
    except OSError as e:
        return {"ok": False, "error": str(e)}
    return {"ok": True}

def health_supabase_info() -> Dict[str, Any]:
    hostname = urlparse(SUPABASE_URL).hostname if SUPABASE_URL else None
    info: Dict[str, Any] = {
        "supabase_url": SUPABASE_URL or None,
        "dns": _check_dns(hostname) if hostname else None,
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    try:
        client = get_supabase()
    except Exception as e:
        info["error"] = str(e)
        return info
    info["connect_ok"] = True
    info["tables"] = {name: _check_table(client, name) for name in STORE_TABLES}
    return info

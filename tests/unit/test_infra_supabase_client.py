from unittest.mock import MagicMock

import pytest

from storefront.infra import supabase_client


def test_get_supabase_is_cached(monkeypatch):
    created = []
    monkeypatch.setattr(supabase_client, "_anon_client", None)
    monkeypatch.setattr(supabase_client, "create_client", lambda url, key, options=None: created.append(options) or MagicMock())

    first = supabase_client.get_supabase()
    second = supabase_client.get_supabase()

    assert first is second
    assert len(created) == 1
    assert created[0].postgrest_client_timeout == supabase_client.DATA_ACCESS_TIMEOUT_SECONDS


def test_get_user_supabase_binds_token(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(supabase_client, "create_client", lambda url, key, options=None: client)

    assert supabase_client.get_user_supabase("jwt") is client
    client.postgrest.auth.assert_called_once_with("jwt")


def test_get_user_supabase_requires_token():
    with pytest.raises(ValueError):
        supabase_client.get_user_supabase("")

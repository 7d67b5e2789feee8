# backend/moodguard/adapters/supabase_client.py
from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from supabase import Client, create_client

try:  # supabase>=2.6
    from supabase.lib.client_options import SyncClientOptions as ClientOptions  # type: ignore
except ImportError:  # pragma: no cover
    ClientOptions = None  # type: ignore

from moodguard.core.config import get_settings

__all__ = ["supa", "supa_ping"]

log = logging.getLogger("moodguard.supabase")

_client_lock = threading.Lock()
_client: Optional[Client] = None


def _build_client(url: str, key: str, *, timeout_s: float, schema: Optional[str]) -> Client:
    """
    Build a Supabase Client with timeouts/headers when the SDK supports them.
    """
    headers: Dict[str, str] = {"X-Client-Info": "moodguard-backend"}
    if ClientOptions is not None:
        opts = ClientOptions(
            postgrest_client_timeout=timeout_s,
            storage_client_timeout=timeout_s,
            headers=headers,
            schema=(schema or "public"),
        )
        return create_client(url, key, options=opts)
    return create_client(url, key)


def supa() -> Client:
    """
    Thread-safe singleton Supabase client using the service-role key (server-side writes).
    """
    global _client
    if _client is not None:
        return _client
    with _client_lock:
        if _client is None:
            s = get_settings()
            url = str(s.SUPABASE_URL or "")
            key = s.SUPABASE_SERVICE_ROLE or ""
            if not url or not key:
                raise RuntimeError("Missing required Supabase settings (SUPABASE_URL/SUPABASE_SERVICE_ROLE)")
            _client = _build_client(url, key, timeout_s=s.SUPABASE_TIMEOUT_S, schema=s.SUPABASE_SCHEMA)
    return _client


def supa_ping(table: Optional[str] = None) -> bool:
    """
    Lightweight health check: a zero-row select proves auth + network.
    """
    try:
        client = supa()
        client.table(table or get_settings().T_SAFETY_CHECK_INS).select("*").limit(0).execute()
        return True
    except Exception as e:
        log.warning("supabase ping failed: %s", e)
        return False

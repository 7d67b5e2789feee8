from __future__ import annotations

import logging
from typing import Literal, cast
from fastapi import FastAPI

from moodguard.core.config import get_settings
from moodguard.core.logging import setup_logging

log = logging.getLogger("moodguard.core")


def _startup_health() -> None:
    """
    Best-effort “are the basics alive” checks.
    Never raises; logs warnings so the app still boots in dev.
    """
    s = get_settings()
    if not s.OPENAI_API_KEY:
        log.warning("semantic classifier disabled (keyword scan and statistics only)")

    if not (s.SUPABASE_URL and s.SUPABASE_SERVICE_ROLE):
        log.warning("supabase not configured; using in-memory store")
        return

    from moodguard.adapters.supabase_client import supa_ping

    if not supa_ping():
        log.warning("supabase ping failed (persistence will degrade to logged errors)")


def register_lifecycle(app: FastAPI) -> None:
    """
    Registers startup/shutdown hooks on the FastAPI app.
    """
    settings = get_settings()
    fmt: Literal["console", "json"] = cast(Literal["console", "json"], settings.LOG_FORMAT)
    setup_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO, fmt=fmt)

    @app.on_event("startup")
    async def _on_startup() -> None:  # noqa: D401
        log.info("starting %s (env=%s)", settings.APP_NAME, settings.ENV)
        _startup_health()

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:  # noqa: D401
        log.info("shutting down %s", settings.APP_NAME)

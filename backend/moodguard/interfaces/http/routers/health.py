from __future__ import annotations
from fastapi import APIRouter

from moodguard.core.config import get_settings

router = APIRouter()

@router.get("/healthz")
def healthz():
    s = get_settings()
    ok_db = None
    if s.SUPABASE_URL and s.SUPABASE_SERVICE_ROLE:
        from moodguard.adapters.supabase_client import supa_ping

        ok_db = supa_ping()
    # the keyword scan always answers, so the service is up even without the classifier
    return {"ok": ok_db is not False, "supabase": ok_db, "classifier": bool(s.OPENAI_API_KEY)}

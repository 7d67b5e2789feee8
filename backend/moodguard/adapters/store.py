"""
Data store collaborators.

DataStore is the only persistence surface the analysis code sees. Reads return
newest-first. SupabaseStore is the production backend; MemoryStore keeps
everything in-process (local dev, tests).
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Protocol, TypeVar

from pydantic import ValidationError

from moodguard.core.config import Settings, get_settings
from moodguard.schemas.mood import JournalEntry, MoodForecast, MoodSample
from moodguard.schemas.safety import CrisisLog, SafetyCheckIn

__all__ = ["DataStore", "MemoryStore", "SupabaseStore"]

log = logging.getLogger("moodguard.store")

T = TypeVar("T")


class DataStore(Protocol):
    async def get_mood_samples(self, user_id: str, limit: int) -> List[MoodSample]: ...

    async def get_journal_entries(self, user_id: str, limit: int) -> List[JournalEntry]: ...

    async def get_forecasts(self, user_id: str, limit: int) -> List[MoodForecast]: ...

    async def save_forecast(self, record: MoodForecast) -> MoodForecast: ...

    async def save_crisis_log(self, record: CrisisLog) -> None: ...

    async def save_or_update_safety_check_in(self, record: SafetyCheckIn) -> SafetyCheckIn: ...


def _new_id() -> str:
    return str(uuid.uuid4())


class MemoryStore:
    def __init__(self) -> None:
        self.mood_samples: Dict[str, List[MoodSample]] = defaultdict(list)
        self.journal_entries: Dict[str, List[JournalEntry]] = defaultdict(list)
        self.forecasts: Dict[str, MoodForecast] = {}
        self.crisis_logs: List[CrisisLog] = []
        self.check_ins: Dict[str, SafetyCheckIn] = {}

    # ---- seeding ----
    def add_mood_sample(self, user_id: str, sample: MoodSample) -> None:
        self.mood_samples[user_id].append(sample)

    def add_journal_entry(self, user_id: str, entry: JournalEntry) -> None:
        self.journal_entries[user_id].append(entry)

    # ---- DataStore ----
    async def get_mood_samples(self, user_id: str, limit: int) -> List[MoodSample]:
        rows = sorted(self.mood_samples.get(user_id, []), key=lambda s: s.at, reverse=True)
        return rows[:limit]

    async def get_journal_entries(self, user_id: str, limit: int) -> List[JournalEntry]:
        rows = sorted(self.journal_entries.get(user_id, []), key=lambda j: j.at, reverse=True)
        return rows[:limit]

    async def get_forecasts(self, user_id: str, limit: int) -> List[MoodForecast]:
        rows = [f for f in self.forecasts.values() if f.user_id == user_id]
        rows.sort(key=lambda f: f.forecast_date, reverse=True)
        return rows[:limit]

    async def save_forecast(self, record: MoodForecast) -> MoodForecast:
        saved = record if record.id else record.model_copy(update={"id": _new_id()})
        self.forecasts[saved.id] = saved  # type: ignore[index]
        return saved

    async def save_crisis_log(self, record: CrisisLog) -> None:
        self.crisis_logs.append(record)

    async def save_or_update_safety_check_in(self, record: SafetyCheckIn) -> SafetyCheckIn:
        saved = record if record.id else record.model_copy(update={"id": _new_id()})
        self.check_ins[saved.id] = saved  # type: ignore[index]
        return saved


class SupabaseStore:
    """
    Supabase-backed store. The SDK is synchronous, so every call is pushed
    onto a worker thread to keep the event loop free.
    """

    def __init__(self, client: Any = None, settings: Optional[Settings] = None) -> None:
        self._client = client
        self.settings = settings or get_settings()

    def _db(self) -> Any:
        if self._client is None:
            from moodguard.adapters.supabase_client import supa

            self._client = supa()
        return self._client

    async def _run(self, fn: Callable[[], T]) -> T:
        return await asyncio.to_thread(fn)

    def _select_recent(self, table: str, user_id: str, limit: int) -> List[Dict[str, Any]]:
        res = (
            self._db().table(table)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return list(getattr(res, "data", []) or [])

    def _upsert(self, table: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        res = self._db().table(table).upsert(payload, on_conflict="id").execute()
        rows = list(getattr(res, "data", []) or [])
        return rows[0] if rows else payload

    async def get_mood_samples(self, user_id: str, limit: int) -> List[MoodSample]:
        rows = await self._run(lambda: self._select_recent(self.settings.T_MOOD_ENTRIES, user_id, limit))
        out: List[MoodSample] = []
        for r in rows:
            # a missing reading is not a zero reading
            if r.get("intensity") is None or r.get("created_at") is None:
                log.warning("skipping incomplete mood row %s for %s", r.get("id", "?"), user_id)
                continue
            try:
                out.append(
                    MoodSample(
                        emotion=r.get("emotion"),
                        intensity=r["intensity"],
                        timestamp=r["created_at"],
                        context=r.get("context"),
                    )
                )
            except ValidationError as e:
                log.warning("skipping unreadable mood row %s for %s: %s", r.get("id", "?"), user_id, e)
        return out

    async def get_journal_entries(self, user_id: str, limit: int) -> List[JournalEntry]:
        rows = await self._run(lambda: self._select_recent(self.settings.T_JOURNAL_ENTRIES, user_id, limit))
        out: List[JournalEntry] = []
        for r in rows:
            if r.get("created_at") is None:
                log.warning("skipping undated journal row %s for %s", r.get("id", "?"), user_id)
                continue
            try:
                out.append(
                    JournalEntry(
                        content=r.get("content") or "",
                        created_at=r["created_at"],
                        triggers=r.get("triggers") or [],
                        mood=r.get("mood"),
                    )
                )
            except ValidationError as e:
                log.warning("skipping unreadable journal row %s for %s: %s", r.get("id", "?"), user_id, e)
        return out

    async def get_forecasts(self, user_id: str, limit: int) -> List[MoodForecast]:
        table = self.settings.T_MOOD_FORECASTS

        def _q() -> List[Dict[str, Any]]:
            res = (
                self._db().table(table)
                .select("*")
                .eq("user_id", user_id)
                .order("forecast_date", desc=True)
                .limit(limit)
                .execute()
            )
            return list(getattr(res, "data", []) or [])

        rows = await self._run(_q)
        return [MoodForecast.model_validate(r) for r in rows]

    async def save_forecast(self, record: MoodForecast) -> MoodForecast:
        saved = record if record.id else record.model_copy(update={"id": _new_id()})
        payload = saved.model_dump(mode="json")
        await self._run(lambda: self._upsert(self.settings.T_MOOD_FORECASTS, payload))
        return saved

    async def save_crisis_log(self, record: CrisisLog) -> None:
        payload = record.model_dump(mode="json")
        table = self.settings.T_CRISIS_LOGS
        await self._run(lambda: self._db().table(table).insert(payload).execute())

    async def save_or_update_safety_check_in(self, record: SafetyCheckIn) -> SafetyCheckIn:
        saved = record if record.id else record.model_copy(update={"id": _new_id()})
        payload = saved.model_dump(mode="json")
        await self._run(lambda: self._upsert(self.settings.T_SAFETY_CHECK_INS, payload))
        return saved

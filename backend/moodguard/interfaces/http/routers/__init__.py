from __future__ import annotations
from fastapi import APIRouter

from . import emotion, health, mood, safety

api = APIRouter()
api.include_router(health.router,  prefix="/health", tags=["health"])
api.include_router(safety.router,  prefix="/safety", tags=["safety"])
api.include_router(emotion.router, prefix="/emotion", tags=["emotion"])
api.include_router(mood.router,    prefix="/mood", tags=["mood"])

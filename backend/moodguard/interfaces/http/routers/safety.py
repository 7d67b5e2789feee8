from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query

from moodguard.domain.safety.followup import check_in_message
from moodguard.domain.safety.service import SafetyService
from moodguard.interfaces.http.deps.services import get_safety_service
from moodguard.schemas.common import RiskLevel
from moodguard.schemas.safety import AssessRequest, CrisisAnalysis

router = APIRouter()


@router.post("/assess", response_model=CrisisAnalysis)
async def assess(body: AssessRequest, svc: SafetyService = Depends(get_safety_service)):
    # with a user id the assessment is persisted (crisis log + check-in)
    if body.user_id:
        return await svc.handle_message(
            body.user_id,
            body.message,
            body.conversation_history,
            body.user_context,
            region=body.region,
        )
    return await svc.assess_risk(body.message, body.conversation_history, body.user_context, region=body.region)


@router.get("/check-in-message")
def check_in(
    risk_level: RiskLevel = Query(RiskLevel.MEDIUM, alias="riskLevel"),
    hours: float = Query(0.0, ge=0),
    user_id: Optional[str] = Query(None, alias="userId"),
):
    return {
        "userId": user_id,
        "riskLevel": risk_level.value,
        "message": check_in_message(risk_level, timedelta(hours=hours)),
    }

from fastapi import APIRouter, Depends

from moodguard.domain.emotion.scorer import EmotionalStateScorer, supportive_response
from moodguard.interfaces.http.deps.services import get_emotion_scorer
from moodguard.schemas.emotion import EmotionalState, EmotionRequest

router = APIRouter()


@router.post("/score", response_model=EmotionalState)
async def score(body: EmotionRequest, scorer: EmotionalStateScorer = Depends(get_emotion_scorer)):
    state = await scorer.score(body.message, body.conversation_history, body.user_id)
    return state.model_copy(update={"supportive_response": supportive_response(state)})

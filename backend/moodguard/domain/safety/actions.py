"""
Tier -> support plan lookup.

The catalog message is the fallback support text whenever the classifier did
not author one. An optional region appends that region's crisis line to the
high/critical contacts.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from moodguard.schemas.common import RiskLevel
from moodguard.schemas.safety import SupportPlan

__all__ = ["resolve_actions", "REGION_HOTLINES"]

_IMMEDIATE_ACTIONS: Dict[RiskLevel, Tuple[str, ...]] = {
    RiskLevel.CRITICAL: (
        "Contact emergency services immediately (911)",
        "Go to the nearest emergency room",
        "Call National Suicide Prevention Lifeline: 988",
        "Reach out to a trusted friend or family member immediately",
        "Remove any means of self-harm from your environment",
    ),
    RiskLevel.HIGH: (
        "Contact a mental health professional today",
        "Call National Suicide Prevention Lifeline: 988",
        "Reach out to someone you trust",
        "Consider going to an emergency room if feelings worsen",
        "Create a safety plan with specific coping strategies",
    ),
    RiskLevel.MEDIUM: (
        "Schedule an appointment with a mental health professional",
        "Talk to someone you trust about how you're feeling",
        "Practice grounding techniques and self-care",
        "Consider calling a mental health helpline",
        "Avoid isolation - stay connected with supportive people",
    ),
    RiskLevel.LOW: (
        "Practice self-care and stress management techniques",
        "Maintain regular sleep and exercise routines",
        "Stay connected with supportive friends and family",
        "Consider journaling or mindfulness practices",
    ),
    RiskLevel.NONE: (),
}

_CRISIS_CONTACTS: Tuple[str, ...] = (
    "Emergency Services: 911",
    "National Suicide Prevention Lifeline: 988",
    "Crisis Text Line: Text HOME to 741741",
    "SAMHSA National Helpline: 1-800-662-4357",
)

_SUPPORT_CONTACTS: Tuple[str, ...] = (
    "National Alliance on Mental Illness (NAMI): 1-800-950-NAMI (6264)",
    "Mental Health America Crisis Resources: mhanational.org/find-support-groups",
)

REGION_HOTLINES: Dict[str, str] = {
    "CA": "Canada Suicide Crisis Helpline: call or text 988",
    "UK": "Samaritans (UK & ROI): 116 123",
    "AU": "Lifeline Australia: 13 11 14",
}

_SUPPORT_MESSAGES: Dict[RiskLevel, str] = {
    RiskLevel.CRITICAL: (
        "I'm very concerned about your safety right now. Your life has value and there are people "
        "who want to help. Please reach out to emergency services or a crisis helpline immediately. "
        "You don't have to go through this alone."
    ),
    RiskLevel.HIGH: (
        "I can tell you're going through an incredibly difficult time. These feelings are overwhelming, "
        "but they can change with proper support. Please consider reaching out to a mental health "
        "professional or crisis helpline today."
    ),
    RiskLevel.MEDIUM: (
        "It sounds like you're dealing with some challenging emotions. These feelings are valid, and "
        "seeking support can make a real difference. Consider talking to someone you trust or a mental "
        "health professional."
    ),
    RiskLevel.LOW: (
        "I hear that you're going through a tough time. Remember that it's normal to have difficult "
        "periods, and taking care of your mental health is important."
    ),
    RiskLevel.NONE: (
        "Thank you for sharing your thoughts with me. I'm here to support you in your wellness journey."
    ),
}


def resolve_actions(
    tier: RiskLevel,
    *,
    region: Optional[str] = None,
    support_message: Optional[str] = None,
) -> SupportPlan:
    tier = RiskLevel.coerce(tier)

    contacts: List[str] = []
    if tier >= RiskLevel.HIGH:
        contacts.extend(_CRISIS_CONTACTS)
        hotline = REGION_HOTLINES.get((region or "").strip().upper())
        if hotline:
            contacts.append(hotline)
    if tier >= RiskLevel.MEDIUM:
        contacts.extend(_SUPPORT_CONTACTS)

    return SupportPlan(
        immediate_actions=list(_IMMEDIATE_ACTIONS[tier]),
        emergency_contacts=contacts,
        support_message=(support_message or "").strip() or _SUPPORT_MESSAGES[tier],
    )

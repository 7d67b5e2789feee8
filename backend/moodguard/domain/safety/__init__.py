from .actions import resolve_actions
from .combiner import combine
from .followup import check_in_message, follow_up_delay, schedule_check_in
from .lexicon import DEFAULT_CRISIS_LEXICON, CrisisLexicon
from .scanner import KeywordRiskScanner, scan
from .service import SafetyService

__all__ = [
    "resolve_actions",
    "combine",
    "check_in_message",
    "follow_up_delay",
    "schedule_check_in",
    "DEFAULT_CRISIS_LEXICON",
    "CrisisLexicon",
    "KeywordRiskScanner",
    "scan",
    "SafetyService",
]

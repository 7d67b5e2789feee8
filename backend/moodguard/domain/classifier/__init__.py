from .base import SemanticClassifier, parse_json_object, request_record
from .retry import RetryPolicy, with_retries
from .risk import RiskClassifierAdapter

__all__ = [
    "SemanticClassifier",
    "parse_json_object",
    "request_record",
    "RetryPolicy",
    "with_retries",
    "RiskClassifierAdapter",
]

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RiskLevel(str, Enum):
    """Totally ordered risk tier: none < low < medium < high < critical."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: Any) -> Optional["RiskLevel"]:
        """Known tier name (any case) -> RiskLevel, anything else -> None."""
        if isinstance(value, RiskLevel):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None

    @classmethod
    def coerce(cls, value: Any) -> "RiskLevel":
        return cls.parse(value) or cls.NONE

    @property
    def needs_check_in(self) -> bool:
        return self >= RiskLevel.HIGH


_RANKS: Dict[RiskLevel, int] = {lvl: i for i, lvl in enumerate(RiskLevel)}


def highest(*levels: Optional[RiskLevel]) -> RiskLevel:
    """Upgrade-only reducer over the tier ordering; None counts as NONE."""
    return max((RiskLevel.coerce(lvl) for lvl in levels), key=lambda l: l.rank, default=RiskLevel.NONE)


class CamelModel(BaseModel):
    """Base for wire-facing models: camelCase out, either case in."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


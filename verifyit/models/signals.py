"""
Per-platform normalized signal record.

Exactly one PlatformSignals per attempted platform per run; records are never
merged across platforms.
"""
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

# Confidence values
LOW = 'low'
MEDIUM = 'medium'
HIGH = 'high'


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class PlatformSignals:
    """Normalized evidence about a lead/company from one public source."""
    platform: str
    activity_score: int = 0
    hiring_signals: List[str] = field(default_factory=list)
    growth_signals: List[str] = field(default_factory=list)
    engagement_score: int = 0
    recent_posts_count: int = 0
    confidence: str = LOW
    data_points: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=utc_now_iso)

    @property
    def has_data(self) -> bool:
        return self.recent_posts_count > 0 or bool(self.data_points)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlatformSignals':
        return cls(
            platform=data['platform'],
            activity_score=int(data.get('activity_score') or 0),
            hiring_signals=list(data.get('hiring_signals') or []),
            growth_signals=list(data.get('growth_signals') or []),
            engagement_score=int(data.get('engagement_score') or 0),
            recent_posts_count=int(data.get('recent_posts_count') or 0),
            confidence=data.get('confidence') or LOW,
            data_points=list(data.get('data_points') or []),
            timestamp=data.get('timestamp') or utc_now_iso(),
        )


def empty_signals(platform: str) -> PlatformSignals:
    """Zero-valued placeholder substituted when a platform fails or times out."""
    return PlatformSignals(platform=platform)

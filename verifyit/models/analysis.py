"""
AnalysisResult — the finished verification, consumed as a flat value object by
the store, the report renderers and the HTTP layer.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from verifyit.models.signals import PlatformSignals, utc_now_iso

PITCH = 'pitch'
DONT_PITCH = 'dont_pitch'


@dataclass
class ScoreBreakdown:
    company_growth: int = 0
    social_activity: int = 0
    job_title: int = 0
    hiring_intent: int = 0
    market_fit: int = 0


@dataclass
class CompanyProfile:
    name: str
    location: str
    industry: str
    primary_business: str
    estimated_employees: Optional[int] = None
    recent_milestones: List[str] = field(default_factory=list)


@dataclass
class AnalysisResult:
    verdict: str
    overall_score: int
    confidence: str
    confidence_percent: int
    reasons_for_pitching: List[str]
    reasons_against_pitching: List[str]
    company_profile: CompanyProfile
    recommended_messaging: List[str]
    breakdown: ScoreBreakdown
    scraped_signals: Dict[str, PlatformSignals]
    created_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnalysisResult':
        return cls(
            verdict=data['verdict'],
            overall_score=int(data['overall_score']),
            confidence=data['confidence'],
            confidence_percent=int(data['confidence_percent']),
            reasons_for_pitching=list(data.get('reasons_for_pitching') or []),
            reasons_against_pitching=list(data.get('reasons_against_pitching') or []),
            company_profile=CompanyProfile(**data['company_profile']),
            recommended_messaging=list(data.get('recommended_messaging') or []),
            breakdown=ScoreBreakdown(**data['breakdown']),
            scraped_signals={
                name: PlatformSignals.from_dict(s)
                for name, s in (data.get('scraped_signals') or {}).items()
            },
            created_at=data.get('created_at') or utc_now_iso(),
        )

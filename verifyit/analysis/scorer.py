"""
Lead scoring — five weighted heuristics → overall score, verdict, confidence.

Pure and deterministic: (LeadData, signal map) → AnalysisResult. No I/O apart
from reading scoring_config.yaml once; only created_at depends on the clock.

Sub-scores (each clamped to [0, 100]):
  company_growth   keyword categories over growth signals + data points
  social_activity  post rate per ~30 days, average engagement, follower-growth proxy
  job_title        seniority tier of the lead's title
  hiring_intent    keyword categories over hiring signals + data points
  market_fit       keyword categories over location + all signal text
"""
import copy
import logging
import os
import re
from typing import Dict, List, Tuple

import yaml

from verifyit.models.analysis import AnalysisResult, CompanyProfile, ScoreBreakdown, DONT_PITCH, PITCH
from verifyit.models.lead import LeadData
from verifyit.models.signals import PlatformSignals, HIGH, LOW, MEDIUM
from verifyit.scraping.extract import clamp_score

logger = logging.getLogger('analysis.scorer')


# ── Scoring config (YAML with hardcoded fallback) ────────────────────────────

_scoring_config = None


def _default_config():
    """Hardcoded fallback if YAML is missing."""
    return {
        'version': 'default',
        'weights': {
            'company_growth': 0.25,
            'social_activity': 0.20,
            'job_title': 0.20,
            'hiring_intent': 0.20,
            'market_fit': 0.15,
        },
        'verdict_threshold': 65,
        'company_growth_points': {
            'funding': 60,
            'launch': 48,
            'hiring_growth': 72,
            'revenue': 60,
            'partnership': 40,
        },
        'hiring_intent_points': {
            'direct_hiring': 90,
            'join_us': 75,
            'careers_page': 60,
            'multiple_openings': 75,
            'ats_domain': 50,
        },
        'market_fit_points': {
            'cloud_devops': 60,
            'ai_ml': 60,
            'expansion': 40,
            'research': 50,
            'saas_platform': 35,
        },
        'job_title_points': {
            'c_suite': 100,
            'vp_director': 75,
            'manager_lead': 50,
            'empty': 40,
            'other': 25,
        },
        'social_activity': {
            'posts_per_period': 20,
            'period_days': 30,
            'follower_growth_ratio': 0.75,
            'posts_weight': 0.4,
            'engagement_weight': 0.4,
            'follower_growth_weight': 0.2,
        },
        'confidence': {
            'high': {'min_platforms': 4, 'max_spread': 15, 'percent': 85},
            'medium_consistent': {
                'min_platforms': 2, 'max_platforms': 3,
                'min_spread': 15, 'max_spread': 30, 'percent': 65,
            },
            'medium': {'min_platforms': 2, 'percent': 55},
            'low': {'percent': 35},
        },
        'reasons_for_thresholds': {
            'company_growth': 60,
            'hiring_intent': 60,
            'social_activity': 60,
            'job_title': 75,
            'market_fit': 55,
        },
        'reasons_against_thresholds': {
            'company_growth': 40,
            'hiring_intent': 40,
            'social_activity': 35,
            'job_title': 25,
            'market_fit': 35,
        },
    }


def load_scoring_config():
    """Load scoring config from YAML, with in-memory cache and hardcoded fallback."""
    global _scoring_config
    if _scoring_config is not None:
        return _scoring_config

    config_path = os.path.join(os.path.dirname(__file__), 'scoring_config.yaml')
    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f)
        if not isinstance(loaded, dict):
            raise ValueError('scoring config is not a mapping')
        # Sections missing from the YAML keep their defaults
        config = _default_config()
        config.update(loaded)
        _scoring_config = config
        logger.info("Config loaded from YAML (version=%s)", _scoring_config.get('version', '?'))
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("YAML config not found (%s), using defaults", e)
        _scoring_config = _default_config()

    return _scoring_config


# ── Keyword categories ───────────────────────────────────────────────────────
# (config key, pattern): each matched category adds its configured points once

GROWTH_CATEGORIES = [
    ('funding', re.compile(r'funding|series [a-f]\b|seed round|raised \$|venture', re.I)),
    ('launch', re.compile(r'launch|released|new product|\bbeta\b|general availability|\bga\b', re.I)),
    ('hiring_growth', re.compile(r"hiring|we're hiring|join us|open roles|team is growing|expanding", re.I)),
    ('revenue', re.compile(r'revenue|\barr\b|grew|growth|record quarter', re.I)),
    ('partnership', re.compile(r'partnership|partnered with|collaboration|integration', re.I)),
]

# Matched against hiring signals only
HIRING_MENTION_CATEGORIES = [
    ('direct_hiring', re.compile(r"we're hiring|we are hiring|hiring", re.I)),
    ('join_us', re.compile(r'join us', re.I)),
]

# Matched against hiring signals + data points
HIRING_POINT_CATEGORIES = [
    ('careers_page', re.compile(r'careers|open roles|job openings|apply now', re.I)),
    ('multiple_openings', re.compile(r'multiple roles|several roles|many openings', re.I)),
    ('ats_domain', re.compile(
        r'lever\.co|greenhouse\.io|workable\.com|ashbyhq\.com|smartrecruiters\.com', re.I)),
]

MARKET_FIT_CATEGORIES = [
    ('cloud_devops', re.compile(r'cloud|\baws\b|\bgcp\b|azure|kubernetes|devops', re.I)),
    ('ai_ml', re.compile(r'\bai\b|\bml\b|machine learning|automation|agents', re.I)),
    ('expansion', re.compile(r'expanding|international|new market|market expansion', re.I)),
    ('research', re.compile(r'r&d|research|innovation|new initiative', re.I)),
    ('saas_platform', re.compile(r'\bsaas\b|platform|\bapi\b|\bb2b\b', re.I)),
]

# First matching tier wins, checked in this order
TITLE_TIERS = [
    ('c_suite', re.compile(r'\b(?:ceo|cto|cfo|coo|cmo)\b|chief', re.I)),
    ('vp_director', re.compile(r'\bvp\b|vice president|director|head of', re.I)),
    ('manager_lead', re.compile(r'manager|lead', re.I)),
]

FUNDING_MILESTONE = re.compile(r'funding|raised|series', re.I)
HIRING_MILESTONE = re.compile(r'hiring|join', re.I)


# ── Narrative text ────────────────────────────────────────────────────────────

REASONS_FOR = {
    'company_growth': 'Strong company growth signals detected (funding, launches, partnerships, or expansion).',
    'hiring_intent': 'Hiring intent indicators found (hiring language, careers pages, or job board activity).',
    'social_activity': 'Active recent social presence with meaningful engagement signals.',
    'job_title': 'Seniority suggests buying influence (VP/Director/C-suite).',
    'market_fit': 'Market/tech-fit signals found (cloud, AI, automation, SaaS, innovation).',
}

REASONS_AGAINST = {
    'company_growth': 'Limited publicly visible growth signals (funding/launch/partnership cues were weak or missing).',
    'hiring_intent': 'Hiring intent not clearly visible in the selected time window.',
    'social_activity': 'Low recent social activity; may be inactive or hard to validate publicly.',
    'job_title': 'Title suggests limited purchasing authority (or ambiguous seniority).',
    'market_fit': 'Insufficient market/tech-fit evidence from public signals.',
}

FALLBACK_REASONS_FOR = [
    'Some positive indicators exist, but public signals are limited; use a light-touch, value-led opener.',
    'A short, relevant first touch carries little risk even when public evidence is thin.',
    'Re-running the verification later may surface new public activity that strengthens the case.',
]

FALLBACK_REASONS_AGAINST = [
    'Limited public data available across platforms in the selected window; confidence is reduced.',
    'Public signals are best-effort and may miss private or very recent company activity.',
    'Confirm timing and budget directly before committing to a full pitch.',
]

NO_MILESTONES = 'No specific milestones detected in the selected window.'

SUB_SCORES = ['company_growth', 'hiring_intent', 'social_activity', 'job_title', 'market_fit']


# ── Helpers ──────────────────────────────────────────────────────────────────

def pick_top(items: List[str], n: int) -> List[str]:
    """Trimmed, non-empty, de-duplicated (first occurrence wins), at most n."""
    unique = []
    for item in items:
        item = (item or '').strip()
        if item and item not in unique:
            unique.append(item)
    return unique[:n]


def _pad(items: List[str], fallbacks: List[str], minimum: int = 3) -> List[str]:
    padded = list(items)
    for sentence in fallbacks:
        if len(padded) >= minimum:
            break
        if sentence not in padded:
            padded.append(sentence)
    return padded


def _category_points(text: str, categories, points: Dict[str, int]) -> int:
    return sum(points.get(key, 0) for key, pattern in categories if pattern.search(text))


# ── Sub-scores ───────────────────────────────────────────────────────────────

def score_job_title(title: str) -> int:
    points = load_scoring_config()['job_title_points']
    title = (title or '').strip()
    for key, pattern in TITLE_TIERS:
        if pattern.search(title):
            return points[key]
    if not title:
        return points['empty']
    return points['other']


def score_company_growth(signals: List[PlatformSignals]) -> int:
    text = ' | '.join(t for s in signals for t in s.growth_signals + s.data_points)
    return clamp_score(_category_points(text, GROWTH_CATEGORIES, load_scoring_config()['company_growth_points']))


def score_social_activity(signals: List[PlatformSignals], window_days: int) -> int:
    cfg = load_scoring_config()['social_activity']

    recent_posts = sum(s.recent_posts_count or 0 for s in signals)
    avg_engagement = sum(s.engagement_score or 0 for s in signals) / len(signals) if signals else 0

    periods = max(1, window_days / cfg['period_days'])
    posts_score = clamp_score(recent_posts / periods * cfg['posts_per_period'])
    engagement_score = clamp_score(avg_engagement)
    # Follower growth is not directly observable; activity stands in for it
    follower_growth = clamp_score(posts_score * cfg['follower_growth_ratio'])

    return clamp_score(
        posts_score * cfg['posts_weight']
        + engagement_score * cfg['engagement_weight']
        + follower_growth * cfg['follower_growth_weight']
    )


def score_hiring_intent(signals: List[PlatformSignals]) -> int:
    points = load_scoring_config()['hiring_intent_points']
    mentions = ' | '.join(t for s in signals for t in s.hiring_signals)
    evidence = ' | '.join(t for s in signals for t in s.hiring_signals + s.data_points)
    score = _category_points(mentions, HIRING_MENTION_CATEGORIES, points)
    score += _category_points(evidence, HIRING_POINT_CATEGORIES, points)
    return clamp_score(score)


def score_market_fit(signals: List[PlatformSignals], location: str) -> int:
    text = ' '.join([location or ''] + [
        t for s in signals for t in s.growth_signals + s.hiring_signals + s.data_points
    ])
    return clamp_score(_category_points(text, MARKET_FIT_CATEGORIES, load_scoring_config()['market_fit_points']))


def calculate_confidence(signals_by_platform: Dict[str, PlatformSignals]) -> Tuple[str, int]:
    """
    Confidence from how many platforms returned data and how consistent their
    activity scores are (max − min spread; ≤1 platform counts as spread 100).
    """
    cfg = load_scoring_config()['confidence']
    with_data = [s for s in signals_by_platform.values() if s.has_data]
    count = len(with_data)
    scores = [s.activity_score for s in with_data]
    spread = 100 if count <= 1 else max(scores) - min(scores)

    high = cfg['high']
    if count >= high['min_platforms'] and spread < high['max_spread']:
        return HIGH, high['percent']
    consistent = cfg['medium_consistent']
    if (consistent['min_platforms'] <= count <= consistent['max_platforms']
            and consistent['min_spread'] <= spread <= consistent['max_spread']):
        return MEDIUM, consistent['percent']
    if count >= cfg['medium']['min_platforms']:
        return MEDIUM, cfg['medium']['percent']
    return LOW, cfg['low']['percent']


def _messaging(lead: LeadData, milestones: List[str]) -> List[str]:
    candidates = []
    if any(FUNDING_MILESTONE.search(m) for m in milestones):
        candidates.append(
            f"Congrats on the recent momentum. Curious how you're prioritizing initiatives "
            f"after the funding/news at {lead.company}?"
        )
    if any(HIRING_MILESTONE.search(m) for m in milestones):
        candidates.append(
            f"Noticed the team is growing. Where are the biggest process bottlenecks "
            f"as you scale hiring at {lead.company}?"
        )
    candidates.append(
        f"Quick question: what does success look like for your team this quarter at "
        f"{lead.company} (especially around {lead.location})?"
    )
    return pick_top(candidates, 3)


# ── Public API ────────────────────────────────────────────────────────────────

def analyze_lead(lead: LeadData, signals_by_platform: Dict[str, PlatformSignals]) -> AnalysisResult:
    """Score a lead against its scraped signals and build the full analysis."""
    cfg = load_scoring_config()
    signals = list(signals_by_platform.values())

    breakdown = ScoreBreakdown(
        company_growth=score_company_growth(signals),
        social_activity=score_social_activity(signals, lead.history_window.days),
        job_title=score_job_title(lead.title),
        hiring_intent=score_hiring_intent(signals),
        market_fit=score_market_fit(signals, lead.location),
    )

    weights = cfg['weights']
    overall = clamp_score(sum(getattr(breakdown, key) * weights[key] for key in weights))
    verdict = PITCH if overall >= cfg['verdict_threshold'] else DONT_PITCH
    confidence, confidence_percent = calculate_confidence(signals_by_platform)

    for_thresholds = cfg['reasons_for_thresholds']
    against_thresholds = cfg['reasons_against_thresholds']
    reasons_for = []
    reasons_against = []
    for key in SUB_SCORES:
        value = getattr(breakdown, key)
        if value >= for_thresholds[key]:
            reasons_for.append(REASONS_FOR[key])
        # Job title is "against" at or below its threshold, the rest strictly below
        below = value <= against_thresholds[key] if key == 'job_title' else value < against_thresholds[key]
        if below:
            reasons_against.append(REASONS_AGAINST[key])

    milestones = pick_top(
        [m for s in signals for m in s.growth_signals] + [m for s in signals for m in s.hiring_signals],
        5,
    )

    logger.info("Scored %s @ %s: overall=%d verdict=%s confidence=%s",
                lead.name, lead.company, overall, verdict, confidence)

    return AnalysisResult(
        verdict=verdict,
        overall_score=overall,
        confidence=confidence,
        confidence_percent=confidence_percent,
        reasons_for_pitching=_pad(pick_top(reasons_for, 5), FALLBACK_REASONS_FOR),
        reasons_against_pitching=_pad(pick_top(reasons_against, 5), FALLBACK_REASONS_AGAINST),
        company_profile=CompanyProfile(
            name=lead.company,
            location=lead.location,
            industry=lead.location,
            primary_business=f'Public signals suggest {lead.company} is active in {lead.location}.',
            estimated_employees=None,
            recent_milestones=milestones or [NO_MILESTONES],
        ),
        recommended_messaging=_messaging(lead, milestones),
        breakdown=breakdown,
        scraped_signals=copy.deepcopy(dict(signals_by_platform)),
    )

"""
Mock platform adapters — realistic canned signals for local testing.

Activated with MOCK_SCRAPING=1 env var. Every outbound search is replaced with
canned responses so the verify flow, the scorer and the report exports can be
exercised end to end without network access. Output depends only on the lead
(same lead → same signals), so demo runs are reproducible.
"""
import hashlib
import logging
import random
import time

from verifyit.models.lead import LeadData
from verifyit.models.signals import PlatformSignals, HIGH, LOW, MEDIUM
from verifyit.scraping.base import PlatformAdapter
from verifyit.scraping.extract import clamp_score, extract_keyword_signals

logger = logging.getLogger('scraping.mock')


# ── Canned evidence ──────────────────────────────────────────────────────────

MOCK_HIRING = [
    'Hiring language detected',
    '"Join us" hiring call-to-action detected',
]

MOCK_GROWTH = [
    'Funding/financing signals detected',
    'Product launch/release signals detected',
    'Partnership/integration signals detected',
    'Expansion/growth language detected',
]

MOCK_REDDIT_TITLES = [
    'r/startups: {company} just raised a Series B, AMA',
    "r/cscareerquestions: {company} says we're hiring across platform teams",
    'r/SaaS: {company} launches new API integration',
    'r/devops: How {company} moved to Kubernetes on AWS',
    'r/MachineLearning: {company} open-sources its ML evaluation tooling',
]


def _simulate_delay(min_s=0.05, max_s=0.2):
    """Small delay to simulate network latency."""
    time.sleep(random.uniform(min_s, max_s))


def _seed(lead: LeadData, platform: str) -> int:
    digest = hashlib.sha256(f'{platform}|{lead.name}|{lead.company}'.lower().encode()).hexdigest()
    return int(digest[:8], 16)


class _MockSearchAdapter(PlatformAdapter):
    source = 'Mock'
    max_posts = 20
    activity_per_post = 4

    def scrape(self, lead: LeadData) -> PlatformSignals:
        _simulate_delay()
        seed = _seed(lead, self.platform)
        posts = seed % (self.max_posts + 1)
        hiring = MOCK_HIRING[:seed % 3]
        growth = MOCK_GROWTH[:(seed >> 4) % 5]
        logger.info("[MOCK] %s: %d results for %s @ %s", self.platform, posts, lead.name, lead.company)
        return PlatformSignals(
            platform=self.platform,
            activity_score=clamp_score(posts * self.activity_per_post),
            hiring_signals=list(hiring),
            growth_signals=list(growth),
            engagement_score=clamp_score(((seed >> 8) % 5) * 20),
            recent_posts_count=posts,
            confidence=MEDIUM if posts else LOW,
            data_points=[
                f'Public search results indicate presence on {self.label} (best-effort).'
                if posts else f'No public {self.label} signals found.'
            ],
        )


class MockXAdapter(_MockSearchAdapter):
    platform = 'x'
    label = 'X'
    description = '[MOCK] Simulated X search'
    max_posts = 25
    activity_per_post = 6


class MockInstagramAdapter(_MockSearchAdapter):
    platform = 'instagram'
    label = 'Instagram'
    description = '[MOCK] Simulated Instagram search'
    activity_per_post = 5


class MockLinkedInAdapter(_MockSearchAdapter):
    platform = 'linkedin'
    label = 'LinkedIn'
    description = '[MOCK] Simulated LinkedIn search'
    max_posts = 25


class MockFacebookAdapter(_MockSearchAdapter):
    platform = 'facebook'
    label = 'Facebook'
    description = '[MOCK] Simulated Facebook search'


class MockRedditAdapter(PlatformAdapter):
    platform = 'reddit'
    label = 'Reddit'
    description = '[MOCK] Simulated Reddit search'
    source = 'Mock'

    def scrape(self, lead: LeadData) -> PlatformSignals:
        _simulate_delay()
        count = _seed(lead, self.platform) % (len(MOCK_REDDIT_TITLES) + 1)
        titles = [t.format(company=lead.company) for t in MOCK_REDDIT_TITLES[:count]]
        hiring, growth = extract_keyword_signals(' | '.join(titles))
        logger.info("[MOCK] reddit: %d posts for %s @ %s", count, lead.name, lead.company)
        return PlatformSignals(
            platform=self.platform,
            activity_score=clamp_score(count * 8),
            hiring_signals=hiring,
            growth_signals=growth,
            engagement_score=clamp_score(count * 12),
            recent_posts_count=count,
            confidence=HIGH if count else LOW,
            data_points=titles,
        )


MOCK_ADAPTERS = {
    'x': MockXAdapter,
    'reddit': MockRedditAdapter,
    'instagram': MockInstagramAdapter,
    'linkedin': MockLinkedInAdapter,
    'facebook': MockFacebookAdapter,
}

"""
Platform adapters — X, Reddit, Instagram, LinkedIn, Facebook.

X, Instagram, LinkedIn and Facebook are scraped best-effort through a public
search index (DuckDuckGo HTML) to avoid JS-heavy pages. Reddit has a native
JSON search endpoint and is queried directly.
"""
import logging
import time
from typing import Callable, Dict, List, Optional

from verifyit.config import SCRAPE_REQUEST_TIMEOUT_SECONDS
from verifyit.extensions import new_http_session
from verifyit.models.lead import LeadData
from verifyit.models.signals import PlatformSignals, HIGH, LOW, MEDIUM
from verifyit.scraping.base import PlatformAdapter
from verifyit.scraping.extract import (
    clamp_score,
    count_result_links,
    duckduckgo_search_url,
    estimate_engagement_score,
    extract_keyword_signals,
    fetch_html,
    site_query,
    text_from_html,
)

logger = logging.getLogger('scraping.adapters')

REDDIT_SEARCH_URL = 'https://www.reddit.com/search.json'
REDDIT_USER_AGENT = 'verifyit/1.0 (lead verification tool)'


# ── Search-proxy adapters ─────────────────────────────────────────────────────

class SearchProxyAdapter(PlatformAdapter):
    """Site-restricted search over the DuckDuckGo HTML endpoint."""
    source = 'DuckDuckGo HTML search'

    site: str = ''
    max_posts: int = 20
    activity_per_post: int = 4

    def scrape(self, lead: LeadData) -> PlatformSignals:
        query = site_query(self.site, lead.name, lead.company)
        html = fetch_html(duckduckgo_search_url(query), timeout=SCRAPE_REQUEST_TIMEOUT_SECONDS)

        text = text_from_html(html)
        hiring, growth = extract_keyword_signals(text)

        # Number of search results approximates "recent" activity
        recent_posts = count_result_links(html, self.max_posts)
        logger.debug("%s: %d result links for %r", self.platform, recent_posts, query)

        if recent_posts > 0:
            data_points = [f'Public search results indicate presence on {self.label} (best-effort).']
        else:
            data_points = [f'No public {self.label} signals found.']

        return PlatformSignals(
            platform=self.platform,
            activity_score=clamp_score(recent_posts * self.activity_per_post),
            hiring_signals=hiring,
            growth_signals=growth,
            engagement_score=estimate_engagement_score(text),
            recent_posts_count=recent_posts,
            confidence=MEDIUM if recent_posts > 0 else LOW,
            data_points=data_points,
        )


class XAdapter(SearchProxyAdapter):
    platform = 'x'
    label = 'X'
    description = 'site:x.com search for name + company'
    site = 'x.com'
    max_posts = 25
    activity_per_post = 6


class InstagramAdapter(SearchProxyAdapter):
    platform = 'instagram'
    label = 'Instagram'
    description = 'site:instagram.com search for name + company'
    site = 'instagram.com'
    max_posts = 20
    activity_per_post = 5


class LinkedInAdapter(SearchProxyAdapter):
    platform = 'linkedin'
    label = 'LinkedIn'
    description = 'site:linkedin.com search for name + company'
    site = 'linkedin.com'
    max_posts = 25
    activity_per_post = 4


class FacebookAdapter(SearchProxyAdapter):
    platform = 'facebook'
    label = 'Facebook'
    description = 'site:facebook.com search for name + company'
    site = 'facebook.com'
    max_posts = 20
    activity_per_post = 4


# ── Reddit ────────────────────────────────────────────────────────────────────

class RedditAdapter(PlatformAdapter):
    """Reddit native search API, filtered to the lead's history window."""
    platform = 'reddit'
    label = 'Reddit'
    description = 'reddit.com/search.json, newest 25 posts within the history window'
    source = 'Reddit JSON API'

    activity_per_post = 8
    max_data_points = 5

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    def scrape(self, lead: LeadData) -> PlatformSignals:
        session = new_http_session(user_agent=REDDIT_USER_AGENT)
        try:
            resp = session.get(
                REDDIT_SEARCH_URL,
                params={'q': f'{lead.name} {lead.company}', 'limit': 25, 'sort': 'new'},
                timeout=SCRAPE_REQUEST_TIMEOUT_SECONDS,
            )
            if resp.status_code != 200:
                logger.info("Reddit search returned HTTP %d", resp.status_code)
                return self._unavailable()
            payload = resp.json()
        finally:
            session.close()

        if payload is None:
            return self._unavailable()

        cutoff = self._clock() - lead.history_window.days * 24 * 60 * 60
        posts = self._posts_since(payload, cutoff)

        combined = ' | '.join(
            t for t in (f"{p.get('title') or ''} {p.get('selftext') or ''}".strip() for p in posts) if t
        )
        hiring, growth = extract_keyword_signals(combined)

        engagement = 0.0
        for p in posts:
            engagement += min(100.0, _number(p.get('score')) * 0.3 + _number(p.get('num_comments')) * 2)
        engagement_score = clamp_score(engagement / len(posts)) if posts else 0

        recent = len(posts)
        return PlatformSignals(
            platform=self.platform,
            activity_score=clamp_score(recent * self.activity_per_post),
            hiring_signals=hiring,
            growth_signals=growth,
            engagement_score=engagement_score,
            recent_posts_count=recent,
            confidence=HIGH if recent > 0 else LOW,
            data_points=[
                f"r/{p.get('subreddit') or 'unknown'}: {p.get('title') or ''}"
                for p in posts[:self.max_data_points]
            ],
        )

    @staticmethod
    def _posts_since(payload: Dict, cutoff: float) -> List[Dict]:
        children = ((payload.get('data') or {}).get('children') or []) if isinstance(payload, dict) else []
        posts = []
        for child in children:
            post = (child or {}).get('data') if isinstance(child, dict) else None
            if not post:
                continue
            if _number(post.get('created_utc')) >= cutoff:
                posts.append(post)
        return posts

    def _unavailable(self) -> PlatformSignals:
        return PlatformSignals(
            platform=self.platform,
            data_points=['Reddit search unavailable or blocked'],
        )


def _number(value: Optional[object]) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


ADAPTERS = {
    'x': XAdapter,
    'reddit': RedditAdapter,
    'instagram': InstagramAdapter,
    'linkedin': LinkedInAdapter,
    'facebook': FacebookAdapter,
}

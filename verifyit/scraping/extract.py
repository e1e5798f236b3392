"""
Shared signal-extraction helpers for the platform adapters.

Keyword pattern sets are deliberately small, case-insensitive and regex based.
Short acronyms are bounded by \\b so they never fire inside longer words.
"""
import re
from typing import List, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from verifyit.config import SCRAPE_REQUEST_TIMEOUT_SECONDS
from verifyit.extensions import new_http_session

DUCKDUCKGO_HTML_URL = 'https://duckduckgo.com/html/'

# (pattern, signal string): one signal per matched category, in this order
HIRING_PATTERNS = [
    (re.compile(r"we're hiring|we are hiring|hiring now|open roles|job openings|careers? page", re.I),
     'Hiring language detected'),
    (re.compile(r'join us|come work with us', re.I),
     '"Join us" hiring call-to-action detected'),
]

GROWTH_PATTERNS = [
    (re.compile(r'funding|raised|series [a-f]\b|seed round|venture capital', re.I),
     'Funding/financing signals detected'),
    (re.compile(r'launch|released|new product|\bbeta\b|general availability|\bga\b', re.I),
     'Product launch/release signals detected'),
    (re.compile(r'partnership|partnered with|collaboration|integration', re.I),
     'Partnership/integration signals detected'),
    (re.compile(r'expanding|growth|scaling|new market|market expansion', re.I),
     'Expansion/growth language detected'),
]

# (pattern, points): engagement vocabulary
ENGAGEMENT_PATTERNS = [
    (re.compile(r'\blikes?\b|\bupvotes?\b', re.I), 20),
    (re.compile(r'\bcomments?\b|\brepl(?:y|ies)\b', re.I), 25),
    (re.compile(r'retweet|repost|\bshares?\b', re.I), 20),
    (re.compile(r'\bviews?\b|impressions', re.I), 15),
]

_WHITESPACE = re.compile(r'\s+')


def clamp_score(value) -> int:
    """Round half-up and clamp to the integer range [0, 100]."""
    rounded = int(value + 0.5) if value >= 0 else 0
    return max(0, min(100, rounded))


def duckduckgo_search_url(query: str) -> str:
    return f"{DUCKDUCKGO_HTML_URL}?q={requests.utils.quote(query, safe='')}"


def site_query(domain: str, name: str, company: str) -> str:
    return f"site:{domain} {name} {company}"


def fetch_html(url: str, timeout: float = SCRAPE_REQUEST_TIMEOUT_SECONDS,
               session: Optional[requests.Session] = None) -> str:
    """GET a page and return its body. Raises on network failure or non-2xx."""
    own_session = session is None
    session = session or new_http_session()
    try:
        resp = session.get(url, timeout=timeout, allow_redirects=True)
        resp.raise_for_status()
        return resp.text or ''
    finally:
        if own_session:
            session.close()


def text_from_html(html: str) -> str:
    """Strip markup and collapse whitespace."""
    if not html:
        return ''
    soup = BeautifulSoup(html, 'html.parser')
    root = soup.body or soup
    return _WHITESPACE.sub(' ', root.get_text(' ')).strip()


def count_result_links(html: str, cap: int) -> int:
    """Number of distinct search-result anchors (a.result__a), capped."""
    if not html:
        return 0
    soup = BeautifulSoup(html, 'html.parser')
    seen = set()
    for idx, a in enumerate(soup.select('a.result__a')):
        seen.add(a.get('href') or f'#anchor-{idx}')
    return min(cap, len(seen))


def extract_keyword_signals(text: str) -> Tuple[List[str], List[str]]:
    """Return (hiring_signals, growth_signals) found in the text."""
    hiring = [signal for pattern, signal in HIRING_PATTERNS if pattern.search(text or '')]
    growth = [signal for pattern, signal in GROWTH_PATTERNS if pattern.search(text or '')]
    return hiring, growth


def estimate_engagement_score(text: str) -> int:
    """Fixed points per engagement word family present, clamped to [0, 100]."""
    score = sum(points for pattern, points in ENGAGEMENT_PATTERNS if pattern.search(text or ''))
    return clamp_score(score)

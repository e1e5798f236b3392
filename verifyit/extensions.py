"""
Shared client instances — Redis, outbound HTTP sessions.

Importing this module is always safe: redis.from_url() does not connect until
the first command, so tests and the in-memory store never touch Redis.
"""
import redis
import requests

from verifyit.config import REDIS_URL

# Realistic browser identity for the search-proxy adapters
BROWSER_USER_AGENT = (
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36'
)
BROWSER_ACCEPT = 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8'

# ── Redis ─────────────────────────────────────────────────────────────────────
redis_client = redis.from_url(REDIS_URL, decode_responses=True)


# ── HTTP ──────────────────────────────────────────────────────────────────────

def new_http_session(user_agent: str = BROWSER_USER_AGENT) -> requests.Session:
    """Return a requests.Session carrying a realistic client identity.

    One session per adapter call: sessions are not shared across the
    coordinator's worker threads.
    """
    session = requests.Session()
    session.headers.update({
        'User-Agent': user_agent,
        'Accept': BROWSER_ACCEPT,
    })
    session.max_redirects = 5
    return session


# ── Analysis store ────────────────────────────────────────────────────────────

def get_analysis_store():
    """The store owned by the running app (set by create_app)."""
    from flask import current_app
    return current_app.extensions['analysis_store']

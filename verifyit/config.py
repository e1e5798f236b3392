"""
Centralized configuration — all env vars, constants, platform list.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Flask ────────────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')

# ── Redis ─────────────────────────────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── Scraping policies ─────────────────────────────────────────────────────────
SCRAPE_TIMEOUT_SECONDS = float(os.getenv('SCRAPE_TIMEOUT_SECONDS', '60'))
SCRAPE_MIN_INTERVAL_MS = int(os.getenv('SCRAPE_MIN_INTERVAL_MS', '2000'))
SCRAPE_RETRY_ATTEMPTS = int(os.getenv('SCRAPE_RETRY_ATTEMPTS', '3'))
SCRAPE_RETRY_BACKOFF_MS = int(os.getenv('SCRAPE_RETRY_BACKOFF_MS', '350'))
SCRAPE_REQUEST_TIMEOUT_SECONDS = float(os.getenv('SCRAPE_REQUEST_TIMEOUT_SECONDS', '15'))

# Replace every platform adapter with canned offline data (demos, UI work)
MOCK_SCRAPING = bool(os.getenv('MOCK_SCRAPING'))

# ── Analysis store ────────────────────────────────────────────────────────────
ANALYSIS_STORE = os.getenv('ANALYSIS_STORE', 'memory')
ANALYSIS_TTL_SECONDS = int(os.getenv('ANALYSIS_TTL_SECONDS', str(24 * 60 * 60)))
ANALYSIS_SWEEP_INTERVAL_SECONDS = float(os.getenv('ANALYSIS_SWEEP_INTERVAL_SECONDS', '60'))

# ── SendGrid ──────────────────────────────────────────────────────────────────
SENDGRID_API_KEY = os.getenv('SENDGRID_API_KEY')
SENDGRID_FROM_EMAIL = os.getenv('SENDGRID_FROM_EMAIL', 'no-reply@taggle.ai')
SENDGRID_API_URL = 'https://api.sendgrid.com/v3/mail/send'

# ── Reports ───────────────────────────────────────────────────────────────────
REPORT_BRAND_NAME = os.getenv('REPORT_BRAND_NAME', 'Taggle')
REPORT_BRAND_URL = os.getenv('REPORT_BRAND_URL', 'https://taggle.ai')

# ── Platforms scraped per verification, in report order ──────────────────────
PLATFORMS = [
    'x',
    'reddit',
    'instagram',
    'linkedin',
    'facebook',
]

# ── History windows → look-back days ─────────────────────────────────────────
HISTORY_WINDOW_DAYS = {
    '3months': 90,
    '6months': 180,
    '1year': 365,
}

"""Shared test fixtures."""
import pytest

from verifyit.models.lead import LeadData
from verifyit.models.signals import PlatformSignals, MEDIUM
from verifyit.services.store import AnalysisStore


class FakeClock:
    """Manually advanced clock for TTL and rate-limit tests."""

    def __init__(self, now=1_700_000_000.0):
        self.now = now
        self.sleeps = []

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class FakeRedis:
    """Minimal in-memory Redis fake (strings with TTLs) for store tests."""

    def __init__(self):
        self.get_store = {}
        self.ttls = {}

    def get(self, key):
        return self.get_store.get(key)

    def setex(self, key, ttl, value):
        self.get_store[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, *keys):
        removed = 0
        for k in keys:
            if self.get_store.pop(k, None) is not None:
                removed += 1
            self.ttls.pop(k, None)
        return removed


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store(clock):
    """In-memory store on a fake clock, sweep thread not started."""
    return AnalysisStore(ttl=3600, sweep_interval=60, clock=clock)


@pytest.fixture
def app(store):
    """Flask test app wired to the fake-clock store."""
    from verifyit import create_app
    app = create_app(store=store, start_sweep=False)
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def lead_payload():
    """Wire-shaped lead (camelCase keys) as the web form posts it."""
    return {
        'name': 'Dana Whitfield',
        'email': 'dana@northwind.io',
        'title': 'VP of Engineering',
        'company': 'Northwind Labs',
        'location': 'Austin, TX',
        'historyWindow': '6months',
        'profileLinks': {'linkedin': '', 'x': '', 'other': ''},
    }


@pytest.fixture
def make_lead(lead_payload):
    """Factory fixture — validated LeadData with overrides."""
    def _make(**overrides):
        data = dict(lead_payload)
        data.update(overrides)
        return LeadData.model_validate(data)
    return _make


@pytest.fixture
def make_signals():
    """Factory fixture — PlatformSignals with sensible non-empty defaults."""
    def _make(platform='x', **overrides):
        defaults = dict(
            platform=platform,
            activity_score=40,
            hiring_signals=[],
            growth_signals=[],
            engagement_score=20,
            recent_posts_count=5,
            confidence=MEDIUM,
            data_points=[f'Public search results indicate presence on {platform} (best-effort).'],
        )
        defaults.update(overrides)
        return PlatformSignals(**defaults)
    return _make


@pytest.fixture
def empty_signal_map():
    """Every platform failed: five zero-valued placeholders."""
    from verifyit.config import PLATFORMS
    from verifyit.models.signals import empty_signals
    return {p: empty_signals(p) for p in PLATFORMS}


@pytest.fixture
def sample_analysis(make_lead, make_signals):
    """A realistic pitch-worthy AnalysisResult."""
    from verifyit.analysis.scorer import analyze_lead
    signals = {
        'x': make_signals('x', growth_signals=['Funding/financing signals detected']),
        'reddit': make_signals('reddit', hiring_signals=['Hiring language detected'],
                               data_points=['r/startups: Northwind Labs raised a Series B']),
        'instagram': make_signals('instagram'),
        'linkedin': make_signals('linkedin', hiring_signals=['"Join us" hiring call-to-action detected']),
        'facebook': make_signals('facebook'),
    }
    return analyze_lead(make_lead(), signals)

"""Tests for verifyit.scraping.adapters — search-proxy adapters and Reddit."""
import pytest
import requests
from unittest.mock import MagicMock, patch

from verifyit.config import PLATFORMS
from verifyit.scraping.adapters import (
    ADAPTERS,
    FacebookAdapter,
    InstagramAdapter,
    LinkedInAdapter,
    RedditAdapter,
    XAdapter,
)
from verifyit.scraping.base import build_adapters, get_platform_info

NOW = 1_700_000_000.0
DAY = 24 * 60 * 60


def _results_page(count, body=''):
    anchors = ''.join(
        f'<div class="result"><a class="result__a" href="https://x.com/post/{i}">Post {i}</a></div>'
        for i in range(count)
    )
    return f'<html><body>{anchors}<p>{body}</p></body></html>'


def _reddit_post(title, age_days, score=10, comments=5, subreddit='startups', selftext=''):
    return {'data': {
        'title': title,
        'selftext': selftext,
        'subreddit': subreddit,
        'score': score,
        'num_comments': comments,
        'created_utc': NOW - age_days * DAY,
    }}


def _reddit_session(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    session = MagicMock()
    session.get.return_value = resp
    return session


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:

    def test_every_platform_has_an_adapter(self):
        assert sorted(ADAPTERS) == sorted(PLATFORMS)

    def test_build_adapters_preserves_order(self):
        adapters = build_adapters(ADAPTERS, PLATFORMS)
        assert list(adapters) == PLATFORMS
        assert isinstance(adapters['reddit'], RedditAdapter)

    def test_build_adapters_rejects_unknown_platform(self):
        with pytest.raises(ValueError, match='tiktok'):
            build_adapters(ADAPTERS, ['tiktok'])

    def test_platform_info(self):
        info = get_platform_info(ADAPTERS)
        assert info['linkedin']['label'] == 'LinkedIn'
        assert info['reddit']['source'] == 'Reddit JSON API'


# ---------------------------------------------------------------------------
# Search-proxy adapters
# ---------------------------------------------------------------------------

class TestSearchProxyAdapters:
    """X / Instagram / LinkedIn / Facebook via DuckDuckGo HTML."""

    def test_query_is_site_restricted(self, make_lead):
        with patch('verifyit.scraping.adapters.fetch_html', return_value=_results_page(0)) as fetch:
            LinkedInAdapter().scrape(make_lead())
        url = fetch.call_args.args[0]
        assert url.startswith('https://duckduckgo.com/html/?q=')
        assert 'site%3Alinkedin.com' in url
        assert 'Northwind%20Labs' in url

    def test_results_drive_activity(self, make_lead):
        with patch('verifyit.scraping.adapters.fetch_html', return_value=_results_page(3)):
            signals = XAdapter().scrape(make_lead())
        assert signals.platform == 'x'
        assert signals.recent_posts_count == 3
        assert signals.activity_score == 18
        assert signals.confidence == 'medium'
        assert signals.data_points == ['Public search results indicate presence on X (best-effort).']

    @pytest.mark.parametrize('adapter_cls,cap,slope', [
        (XAdapter, 25, 6),
        (InstagramAdapter, 20, 5),
        (LinkedInAdapter, 25, 4),
        (FacebookAdapter, 20, 4),
    ])
    def test_caps_and_slopes(self, make_lead, adapter_cls, cap, slope):
        with patch('verifyit.scraping.adapters.fetch_html', return_value=_results_page(40)):
            signals = adapter_cls().scrape(make_lead())
        assert signals.recent_posts_count == cap
        assert signals.activity_score == min(100, cap * slope)

    def test_no_results(self, make_lead):
        with patch('verifyit.scraping.adapters.fetch_html', return_value=_results_page(0)):
            signals = FacebookAdapter().scrape(make_lead())
        assert signals.recent_posts_count == 0
        assert signals.activity_score == 0
        assert signals.confidence == 'low'
        assert signals.data_points == ['No public Facebook signals found.']

    def test_keywords_and_engagement_from_page_text(self, make_lead):
        page = _results_page(2, "We're hiring! Just raised a Series A. 1.2k likes, 40 comments")
        with patch('verifyit.scraping.adapters.fetch_html', return_value=page):
            signals = InstagramAdapter().scrape(make_lead())
        assert signals.hiring_signals == ['Hiring language detected']
        assert signals.growth_signals == ['Funding/financing signals detected']
        assert signals.engagement_score == 45

    def test_http_errors_propagate(self, make_lead):
        with patch('verifyit.scraping.adapters.fetch_html', side_effect=requests.HTTPError('429')):
            with pytest.raises(requests.HTTPError):
                XAdapter().scrape(make_lead())


# ---------------------------------------------------------------------------
# Reddit
# ---------------------------------------------------------------------------

class TestRedditAdapter:
    """Native JSON search filtered to the history window."""

    def _scrape(self, lead, session):
        with patch('verifyit.scraping.adapters.new_http_session', return_value=session):
            return RedditAdapter(clock=lambda: NOW).scrape(lead)

    def test_request_shape(self, make_lead):
        session = _reddit_session(payload={'data': {'children': []}})
        self._scrape(make_lead(), session)
        args, kwargs = session.get.call_args
        assert args[0] == 'https://www.reddit.com/search.json'
        assert kwargs['params'] == {'q': 'Dana Whitfield Northwind Labs', 'limit': 25, 'sort': 'new'}
        session.close.assert_called_once()

    def test_posts_inside_window_only(self, make_lead):
        payload = {'data': {'children': [
            _reddit_post("Northwind Labs: we're hiring engineers", 10),
            _reddit_post('Northwind Labs raised a Series B', 30, subreddit='venturecapital'),
            _reddit_post('Northwind Labs launches beta', 400),
        ]}}
        signals = self._scrape(make_lead(historyWindow='3months'), _reddit_session(payload=payload))
        assert signals.recent_posts_count == 2
        assert signals.activity_score == 16
        assert signals.confidence == 'high'
        assert signals.hiring_signals == ['Hiring language detected']
        assert signals.growth_signals == ['Funding/financing signals detected']
        assert signals.data_points == [
            "r/startups: Northwind Labs: we're hiring engineers",
            'r/venturecapital: Northwind Labs raised a Series B',
        ]

    def test_engagement_average(self, make_lead):
        payload = {'data': {'children': [
            _reddit_post('a', 1, score=100, comments=10),   # 30 + 20 = 50
            _reddit_post('b', 1, score=1000, comments=50),  # capped at 100
        ]}}
        signals = self._scrape(make_lead(), _reddit_session(payload=payload))
        assert signals.engagement_score == 75

    def test_data_points_capped_at_five(self, make_lead):
        payload = {'data': {'children': [_reddit_post(f'post {i}', 1) for i in range(8)]}}
        signals = self._scrape(make_lead(), _reddit_session(payload=payload))
        assert signals.recent_posts_count == 8
        assert len(signals.data_points) == 5
        assert signals.activity_score == 64

    def test_non_200_is_unavailable_not_error(self, make_lead):
        signals = self._scrape(make_lead(), _reddit_session(status=429))
        assert signals.recent_posts_count == 0
        assert signals.activity_score == 0
        assert signals.data_points == ['Reddit search unavailable or blocked']

    def test_null_body_is_unavailable(self, make_lead):
        signals = self._scrape(make_lead(), _reddit_session(payload=None))
        assert signals.data_points == ['Reddit search unavailable or blocked']

    def test_empty_object_is_zero_post_record(self, make_lead):
        signals = self._scrape(make_lead(), _reddit_session(payload={}))
        assert signals.recent_posts_count == 0
        assert signals.data_points == []
        assert signals.confidence == 'low'
        assert signals.has_data is False

    def test_no_recent_posts(self, make_lead):
        payload = {'data': {'children': [_reddit_post('old news', 500)]}}
        signals = self._scrape(make_lead(), _reddit_session(payload=payload))
        assert signals.recent_posts_count == 0
        assert signals.confidence == 'low'
        assert signals.data_points == []

    def test_network_error_propagates(self, make_lead):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError('reset')
        with pytest.raises(requests.ConnectionError):
            self._scrape(make_lead(), session)
        session.close.assert_called_once()

"""Tests for verifyit.scraping.extract — shared extraction helpers."""
import pytest
import requests
from unittest.mock import MagicMock, patch

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


class TestClampScore:

    @pytest.mark.parametrize('value,expected', [
        (-5, 0), (0, 0), (49.4, 49), (49.5, 50), (100, 100), (250, 100), (20.000000000000004, 20),
    ])
    def test_rounds_half_up_and_clamps(self, value, expected):
        assert clamp_score(value) == expected


class TestQueries:

    def test_site_query(self):
        assert site_query('x.com', 'Dana Whitfield', 'Northwind') == 'site:x.com Dana Whitfield Northwind'

    def test_search_url_is_fully_encoded(self):
        url = duckduckgo_search_url('site:x.com A&B Co')
        assert url == 'https://duckduckgo.com/html/?q=site%3Ax.com%20A%26B%20Co'


class TestFetchHtml:

    def test_returns_body(self):
        session = MagicMock()
        session.get.return_value.text = '<html></html>'
        assert fetch_html('https://example.com', timeout=3, session=session) == '<html></html>'
        session.get.assert_called_once_with('https://example.com', timeout=3, allow_redirects=True)
        session.close.assert_not_called()

    def test_non_2xx_raises(self):
        session = MagicMock()
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError('503')
        with pytest.raises(requests.HTTPError):
            fetch_html('https://example.com', session=session)

    def test_closes_its_own_session(self):
        session = MagicMock()
        session.get.return_value.text = ''
        with patch('verifyit.scraping.extract.new_http_session', return_value=session):
            assert fetch_html('https://example.com') == ''
        session.close.assert_called_once()


class TestTextFromHtml:

    def test_strips_markup_and_collapses_whitespace(self):
        html = '<html><head><title>T</title></head><body><p>Hello</p>\n\n<b>world</b></body></html>'
        assert text_from_html(html) == 'Hello world'

    def test_empty(self):
        assert text_from_html('') == ''


class TestCountResultLinks:

    def test_counts_distinct_hrefs(self):
        html = (
            '<a class="result__a" href="/a">A</a>'
            '<a class="result__a" href="/a">A again</a>'
            '<a class="result__a" href="/b">B</a>'
            '<a class="other" href="/c">C</a>'
        )
        assert count_result_links(html, 25) == 2

    def test_capped(self):
        html = ''.join(f'<a class="result__a" href="/{i}">r</a>' for i in range(30))
        assert count_result_links(html, 20) == 20

    def test_empty(self):
        assert count_result_links('', 20) == 0


class TestExtractKeywordSignals:

    def test_nothing(self):
        assert extract_keyword_signals('A quiet week in Austin') == ([], [])

    def test_hiring_and_join_us(self):
        hiring, _ = extract_keyword_signals('Careers page is up. Come work with us!')
        assert hiring == ['Hiring language detected', '"Join us" hiring call-to-action detected']

    def test_growth_categories_in_fixed_order(self):
        _, growth = extract_keyword_signals('Partnered with Acme after our seed round; now in beta, expanding to EU')
        assert growth == [
            'Funding/financing signals detected',
            'Product launch/release signals detected',
            'Partnership/integration signals detected',
            'Expansion/growth language detected',
        ]

    def test_ga_needs_word_boundary(self):
        _, growth = extract_keyword_signals('Our legal team and a garage sale')
        assert growth == []


class TestEstimateEngagementScore:

    def test_vocabulary_points(self):
        assert estimate_engagement_score('12 upvotes, 3 replies, 5 reposts, 900 views') == 80

    def test_none(self):
        assert estimate_engagement_score('') == 0

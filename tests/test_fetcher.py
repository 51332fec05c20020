from unittest.mock import MagicMock, patch

import pytest
import requests

from dealpage import fetcher
from dealpage.record import TITLE_SENTINEL
from dealpage.sites import SiteKind

from .conftest import DANAWA_URL, NAVER_URL

BLOCKED_HTML = '<html><body><p>접근이 제한되었습니다.</p>' + ' ' * 1000 + '</body></html>'
OG_ONLY_HTML = ('<html><head><meta property="og:title" content="OG Title" />'
                '<meta property="og:image" content="https://img.danawa.com/og.jpg" /></head>'
                '<body><p>접근이 제한되었습니다.</p></body></html>')


def make_response(text, status=200):
    response = MagicMock()
    response.text = text
    response.status_code = status
    if status >= 400:
        error = requests.HTTPError(f'{status} Error')
        error.response = response
        response.raise_for_status.side_effect = error
    return response


@pytest.fixture
def session():
    with patch('dealpage.fetcher.time.sleep'), \
            patch('dealpage.fetcher.requests.Session') as session_cls:
        yield session_cls.return_value


def test_headers_rotate_away_from_excluded_agent():
    for agent in fetcher.USER_AGENTS:
        assert fetcher.get_headers(exclude=agent)['User-Agent'] != agent
    assert fetcher.get_headers()['Accept-Language'].startswith('ko-KR')


def test_successful_scrape(session, danawa_html):
    session.get.return_value = make_response(danawa_html)
    result = fetcher.scrape_product(DANAWA_URL)
    assert result['site'] == SiteKind.DANAWA
    assert result['record'].title == 'Wireless Mouse'
    assert session.get.call_count == 1


def test_naver_url_uses_naver_rules(session, naver_html):
    session.get.return_value = make_response(naver_html)
    result = fetcher.scrape_product(NAVER_URL)
    assert result['site'] == SiteKind.NAVER
    assert result['record'].list_price == '459000'


def test_blocked_page_is_retried_with_another_agent(session, danawa_html):
    session.get.side_effect = [make_response(BLOCKED_HTML), make_response(danawa_html)]
    result = fetcher.scrape_product(DANAWA_URL)
    assert session.get.call_count == 2
    first_agent = session.get.call_args_list[0].kwargs['headers']['User-Agent']
    second_agent = session.get.call_args_list[1].kwargs['headers']['User-Agent']
    assert first_agent != second_agent
    assert result['record'].title == 'Wireless Mouse'


def test_metadata_fallback_after_second_block(session):
    session.get.return_value = make_response(OG_ONLY_HTML)
    result = fetcher.scrape_product(DANAWA_URL)
    assert session.get.call_count == 2
    assert result['record'].images == ('https://img.danawa.com/og.jpg',)


def test_page_without_images_is_retried(session, danawa_html):
    no_images = '<html><body><h1>Real Product Name</h1>' + ' ' * 1000 + '</body></html>'
    session.get.side_effect = [make_response(no_images), make_response(danawa_html)]
    result = fetcher.scrape_product(DANAWA_URL)
    assert session.get.call_count == 2
    assert result['record'].images


def test_failed_retry_keeps_first_response(session):
    session.get.side_effect = [make_response(OG_ONLY_HTML), make_response('', status=403)]
    result = fetcher.scrape_product(DANAWA_URL)
    assert 'error' not in result
    assert session.get.call_count == 2
    assert result['record'].title == 'OG Title'
    assert result['record'].images == ('https://img.danawa.com/og.jpg',)


def test_timeout_on_retry_keeps_first_response(session):
    session.get.side_effect = [make_response(OG_ONLY_HTML), requests.Timeout()]
    assert fetcher.scrape_product(DANAWA_URL)['record'].title == 'OG Title'


def test_still_returns_record_when_everything_is_empty(session):
    session.get.return_value = make_response(BLOCKED_HTML)
    result = fetcher.scrape_product(DANAWA_URL)
    assert result['record'].title == TITLE_SENTINEL


def test_timeout(session):
    session.get.side_effect = requests.Timeout()
    assert 'timeout' in fetcher.scrape_product(DANAWA_URL)['error'].lower()


@pytest.mark.parametrize('status, fragment', [
    (403, '403'),
    (503, '503'),
    (500, 'HTTP error 500'),
])
def test_http_errors(session, status, fragment):
    session.get.return_value = make_response('', status=status)
    assert fragment in fetcher.scrape_product(DANAWA_URL)['error']


def test_connection_error(session):
    session.get.side_effect = requests.ConnectionError('refused')
    assert 'Failed to fetch' in fetcher.scrape_product(DANAWA_URL)['error']

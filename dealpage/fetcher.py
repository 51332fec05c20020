import logging
import random
import time

import requests

from . import config
from .extractor import extract_metadata_only, extract_product, looks_blocked_or_missing
from .sites import classify_site

logger = logging.getLogger(__name__)

# Rotate user agents to avoid detection
USER_AGENTS = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15',
]


def get_headers(exclude=None):
    agents = [ua for ua in USER_AGENTS if ua != exclude] or USER_AGENTS
    return {
        'User-Agent': random.choice(agents),
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
        'Accept-Language': 'ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7',
        'Accept-Encoding': 'gzip, deflate',
        'Referer': 'https://www.google.com/',
        'DNT': '1',
        'Connection': 'keep-alive',
        'Upgrade-Insecure-Requests': '1',
        'Sec-Fetch-Dest': 'document',
        'Sec-Fetch-Mode': 'navigate',
        'Sec-Fetch-Site': 'cross-site',
        'Cache-Control': 'max-age=0',
    }


def fetch_html(session, url, headers):
    response = session.get(url, headers=headers, timeout=config.REQUEST_TIMEOUT, allow_redirects=True)
    response.raise_for_status()
    if len(response.text) < 1000:
        logger.warning(f"Short response from {url} ({len(response.text)} chars), might be blocked")
    return response.text


def is_unusable(html, record):
    return looks_blocked_or_missing(html) or record.is_incomplete()


def retry_fetch(session, url, site, headers, html, record):
    """Second attempt with another user agent; keeps the first result if it fails."""
    logger.info(f"First attempt unusable for {url}, retrying with another user agent")
    try:
        retry_html = fetch_html(session, url, get_headers(exclude=headers['User-Agent']))
    except requests.RequestException as e:
        logger.warning(f"Retry failed for {url}, keeping first response: {e}")
        return html, record
    return retry_html, extract_product(site, retry_html, url)


def scrape_product(url):
    """Fetch url and extract a ProductRecord.

    Returns {'site': SiteKind, 'record': ProductRecord} or {'error': message}.
    A block page or an incomplete extraction (no title or no images) is
    retried once with another user agent, then the Open Graph tags of the
    last usable response are tried.
    """
    site = classify_site(url)
    try:
        logger.info(f"Scraping {url} as {site.value}")

        # Add small random delay to appear more human-like
        time.sleep(random.uniform(*config.REQUEST_DELAY))

        session = requests.Session()
        headers = get_headers()
        html = fetch_html(session, url, headers)
        record = extract_product(site, html, url)

        if is_unusable(html, record):
            html, record = retry_fetch(session, url, site, headers, html, record)

        if is_unusable(html, record):
            fallback = extract_metadata_only(html, url)
            if fallback.richness() > record.richness():
                logger.info(f"Using Open Graph metadata for {url}")
                record = fallback

        return {'site': site, 'record': record}

    except requests.Timeout:
        logger.error(f"Timeout error for {url}")
        return {'error': 'Request timeout. The website took too long to respond.'}
    except requests.HTTPError as e:
        logger.error(f"HTTP error for {url}: {e}")
        status = e.response.status_code if e.response is not None else None
        if status == 403:
            return {'error': 'Access denied by website (403). The site is blocking automated requests.'}
        elif status == 503:
            return {'error': 'Service unavailable (503). The website is temporarily down or blocking requests.'}
        return {'error': f'HTTP error {status}: {str(e)}'}
    except requests.RequestException as e:
        logger.error(f"Request error for {url}: {e}")
        return {'error': f'Failed to fetch the page. Error: {str(e)[:100]}'}

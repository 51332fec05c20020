import logging
import re
from urllib.parse import urljoin, urlparse

logger = logging.getLogger(__name__)

IMAGE_EXTENSION = re.compile(r'\.(?:jpe?g|png|webp|gif|bmp)\b', re.IGNORECASE)


def absolutize_url(url, base_url):
    """Resolve url against base_url. Protocol-relative URLs get https."""
    if not url:
        return ''
    url = url.strip()
    if url.startswith('//'):
        return f'https:{url}'
    if url.lower().startswith(('http://', 'https://')):
        return url
    try:
        return urljoin(base_url or '', url)
    except ValueError:
        logger.debug(f"Could not resolve {url} against {base_url}")
        return url


def is_http_url(url):
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def has_image_extension(url):
    return bool(IMAGE_EXTENSION.search(url or ''))

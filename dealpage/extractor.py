import logging

from bs4 import BeautifulSoup

from .detail_html import normalize_detail_html
from .record import MAX_DETAIL_IMAGES, MAX_IMAGES, TITLE_SENTINEL, ProductRecord, digits_only
from .sites import OG_IMAGE, OG_PRICE, OG_TITLE, TWITTER_TITLE, ruleset_for
from .urls import absolutize_url, has_image_extension, is_http_url

logger = logging.getLogger(__name__)

SPEC_SUMMARY_LIMIT = 200

# Korean shop error banners plus their English equivalents
BLOCK_PHRASES = [
    '상품이 존재하지 않습니다',
    '페이지를 찾을 수 없습니다',
    '이전 페이지로 가기',
    '삭제되었거나 변경',
    '현재 서비스 접속이 불가합니다',
    '동시에 접속하는 이용자 수가 많거나',
    '에러페이지',
    'module_error',
    '접근이 제한',
    '접근이 차단',
    'product does not exist',
    'page not found',
    'access restricted',
    'access denied',
    'unusual traffic',
    'not a robot',
    'are you a robot',
    'robot check',
    'bot detection',
    'captcha',
]


def collapse_whitespace(text):
    return ' '.join(text.split())


def locator_value(soup, locator):
    selector, attribute = locator
    element = soup.select_one(selector)
    if element is None:
        return ''
    if attribute:
        return collapse_whitespace(element.get(attribute) or '')
    return collapse_whitespace(element.get_text(' '))


def first_non_empty(soup, locators, transform=None):
    for locator in locators:
        value = locator_value(soup, locator)
        if transform:
            value = transform(value)
        if value:
            return value
        logger.debug(f"No value for locator {locator}")
    return ''


def longest(soup, locators):
    best = ''
    for locator in locators:
        value = locator_value(soup, locator)
        if len(value) > len(best):
            best = value
    return best


def split_title(full_title):
    """Split a scraped product name into (title, description).

    "Mouse (Black, USB-C)" -> ("Mouse", "(Black, USB-C)")
    "Mouse/Black/USB-C"    -> ("Mouse", "Black / USB-C")
    Anything else returns (full_title, '').
    """
    open_at = full_title.find('(')
    if open_at != -1 and full_title.rfind(')') > open_at:
        title = full_title[:open_at].strip()
        if title:
            return title, full_title[open_at:].strip()
    elif '/' in full_title:
        head, *rest = full_title.split('/')
        title = head.strip()
        if title:
            return title, ' / '.join(part.strip() for part in rest if part.strip())
    return full_title, ''


def truncate(text, limit=SPEC_SUMMARY_LIMIT):
    return text[:limit] + '...' if len(text) > limit else text


def extract_title(soup, rules):
    full_title = longest(soup, rules['title'])
    if not full_title:
        full_title = first_non_empty(soup, [('title', None)])
    if not full_title:
        return TITLE_SENTINEL, ''

    title, description = split_title(full_title)
    if not description and title == full_title:
        description = truncate(first_non_empty(soup, rules['spec']))
    return title, description


def extract_price(soup, rules):
    return first_non_empty(soup, rules['price'], transform=digits_only)


def image_source(element, attributes):
    for name in attributes:
        value = (element.get(name) or '').strip()
        if value and not value.lower().startswith('data:'):
            return value
    return ''


class ImageCollector:
    """Ordered, de-duplicated list of absolute image URLs with a size cap."""

    def __init__(self, base_url, limit=None):
        self.base_url = base_url
        self.limit = limit
        self.urls = []
        self._seen = set()

    def add(self, url, check_extension=True):
        if self.limit is not None and len(self.urls) >= self.limit:
            return False
        absolute = absolutize_url(url, self.base_url)
        if not absolute or not is_http_url(absolute):
            return False
        if check_extension and not has_image_extension(absolute):
            return False
        if absolute in self._seen:
            return False
        self._seen.add(absolute)
        self.urls.append(absolute)
        return True

    def add_elements(self, elements, attributes, domains=None):
        for element in elements:
            src = image_source(element, attributes)
            if not src:
                continue
            if domains and not any(d in absolutize_url(src, self.base_url).lower() for d in domains):
                continue
            self.add(src)


def cap_images(urls, required, limit):
    """First `limit` urls in order, making room for every url in `required`."""
    room = limit - len(required)
    kept = []
    for url in urls:
        if url in required:
            kept.append(url)
        elif room > 0:
            kept.append(url)
            room -= 1
    return kept


def collect_images(soup, rules, source_url):
    images = ImageCollector(source_url)
    detail_images = ImageCollector(source_url, MAX_DETAIL_IMAGES)
    attributes = rules['image_attributes']

    selector, attribute = OG_IMAGE
    for meta in soup.select(selector):
        images.add(meta.get(attribute) or '', check_extension=False)

    for selector in rules['gallery']:
        images.add_elements(soup.select(selector), attributes)

    images.add_elements(soup.find_all('img'), attributes, domains=rules['image_domains'])

    for selector in rules['detail_images']:
        elements = soup.select(selector)
        images.add_elements(elements, attributes)
        detail_images.add_elements(elements, attributes)

    kept = cap_images(images.urls, set(detail_images.urls), MAX_IMAGES)
    return tuple(kept), tuple(detail_images.urls)


def extract_description_html(soup, rules, source_url):
    for selector in rules['detail_html']:
        element = soup.select_one(selector)
        if element is None:
            continue
        raw = element.decode_contents()
        if raw.strip():
            return normalize_detail_html(raw, source_url)
    return ''


def extract_product(site_kind, html, source_url):
    """Run the ruleset for site_kind over html. Never raises."""
    if not html:
        return ProductRecord()
    rules = ruleset_for(site_kind)
    try:
        soup = BeautifulSoup(html, 'html.parser')
        title, description = extract_title(soup, rules)
        images, detail_images = collect_images(soup, rules, source_url)
        record = ProductRecord(
            title=title,
            description=description,
            list_price=extract_price(soup, rules),
            sale_price='',
            images=images,
            detail_images=detail_images,
            description_html=extract_description_html(soup, rules, source_url),
        )
    except Exception as e:
        logger.error(f"Extraction failed for {source_url}: {e}")
        return ProductRecord()

    logger.info(f"Extracted '{record.title[:50]}' from {source_url}: "
                f"{len(record.images)} images, {len(record.detail_images)} detail images")
    return record


def extract_metadata_only(html, source_url):
    """Last resort: read only the Open Graph tags."""
    if not html:
        return ProductRecord()
    try:
        soup = BeautifulSoup(html, 'html.parser')
        title = first_non_empty(soup, [OG_TITLE, TWITTER_TITLE]) or TITLE_SENTINEL
        images = ImageCollector(source_url, MAX_IMAGES)
        selector, attribute = OG_IMAGE
        for meta in soup.select(selector):
            images.add(meta.get(attribute) or '', check_extension=False)
        return ProductRecord(
            title=title,
            list_price=first_non_empty(soup, [OG_PRICE], transform=digits_only),
            images=tuple(images.urls),
        )
    except Exception as e:
        logger.error(f"Metadata extraction failed for {source_url}: {e}")
        return ProductRecord()


def looks_blocked_or_missing(html):
    if not html:
        return False
    lowered = html.lower()
    for phrase in BLOCK_PHRASES:
        if phrase in lowered:
            logger.debug(f"Block phrase found: {phrase}")
            return True
    return False

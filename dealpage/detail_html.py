import logging
import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import Stylesheet

from .urls import absolutize_url, has_image_extension

logger = logging.getLogger(__name__)

STRIPPED_TAGS = ['script', 'noscript', 'iframe']

IMAGE_SOURCE_ATTRIBUTES = [
    'src',
    'data-src',
    'data-original',
    'data-lazy',
    'data-lazy-src',
    'data-origin',
    'data-thumb',
    'data-large',
    'data-zoom',
]
LAZY_ATTRIBUTES = ['loading'] + IMAGE_SOURCE_ATTRIBUTES[1:]
SIZE_ATTRIBUTES = ['width', 'height']
URL_ATTRIBUTES = ['href', 'src', 'action', 'formaction', 'poster', 'background', 'data', 'xlink:href']
SAFE_SCHEMES = ('http', 'https')

# Fragments of the "product gone" page that Naver serves with a 200 status
NOT_FOUND_PATTERNS = [
    re.compile(r'상품이 존재하지 않습니다', re.IGNORECASE),
    re.compile(r'페이지를 찾을 수 없습니다', re.IGNORECASE),
    re.compile(r'삭제되었거나 변경', re.IGNORECASE),
    re.compile(r'이전 페이지로 가기', re.IGNORECASE),
    re.compile(r'product does not exist', re.IGNORECASE),
    re.compile(r'page not found', re.IGNORECASE),
]

CSS_URL = re.compile(r'''url\((['"]?)([^)'"\s]+)\1\)''', re.IGNORECASE)
STYLE_SIZE = re.compile(r'(?<![\w-])(?:width|height)\s*:\s*[^;]+;?', re.IGNORECASE)


def rewrite_css_urls(css, base_url):
    return CSS_URL.sub(lambda m: f'url({absolutize_url(m.group(2), base_url)})', css)


def best_image_source(img):
    candidates = [img.get(name) for name in IMAGE_SOURCE_ATTRIBUTES if img.get(name)]
    candidates = [c.strip() for c in candidates if c.strip()]
    for candidate in candidates:
        if has_image_extension(candidate):
            return candidate
    return candidates[0] if candidates else ''


def is_safe_url(url, allow_image_data=False):
    if allow_image_data and url.lower().startswith('data:image/'):
        return True
    try:
        return urlparse(url).scheme in SAFE_SCHEMES
    except ValueError:
        return False


def absolutize_srcset(srcset, base_url):
    entries = []
    for entry in srcset.split(','):
        parts = entry.split()
        if not parts:
            continue
        parts[0] = absolutize_url(parts[0], base_url)
        if is_safe_url(parts[0]):
            entries.append(' '.join(parts))
    return ', '.join(entries)


def clean_image(img, base_url):
    src = best_image_source(img)
    if src:
        img['src'] = absolutize_url(src, base_url)
    if img.get('srcset'):
        srcset = absolutize_srcset(img['srcset'], base_url)
        if srcset:
            img['srcset'] = srcset
        else:
            del img['srcset']
    for name in LAZY_ATTRIBUTES + SIZE_ATTRIBUTES:
        if name in img.attrs:
            del img[name]
    style = img.get('style')
    if style is not None:
        cleaned = STYLE_SIZE.sub('', style).strip()
        if cleaned:
            img['style'] = cleaned
        else:
            del img['style']


def clean_link(anchor, base_url):
    anchor['href'] = absolutize_url(anchor['href'], base_url)
    anchor['target'] = '_blank'
    anchor['rel'] = 'noopener'


def strip_event_handlers(element):
    for name in [a for a in element.attrs if a.lower().startswith('on')]:
        del element[name]


def strip_unsafe_urls(element, base_url):
    # Only http(s) survives; inline images may keep a data:image/ source.
    for name in URL_ATTRIBUTES:
        value = element.get(name)
        if not isinstance(value, str):
            continue
        absolute = absolutize_url(value, base_url)
        if is_safe_url(absolute, allow_image_data=(element.name == 'img' and name == 'src')):
            element[name] = absolute
        else:
            logger.debug(f"Dropping {name}={value[:50]!r} from <{element.name}>")
            del element[name]


def matches_not_found(element):
    text = element.get_text(' ', strip=True)
    return bool(text) and any(p.search(text) for p in NOT_FOUND_PATTERNS)


def remove_not_found_fragments(root):
    # Outermost matches first; their descendants go with them.
    for element in root.find_all(True):
        if element.decomposed:
            continue
        if matches_not_found(element):
            element.decompose()


def normalize_detail_html(raw_html, base_url):
    """Sanitize a product detail fragment for embedding in our own page.

    Scripts and frames are dropped, image/link/CSS URLs are made absolute,
    URL attributes with any scheme other than http(s) (javascript:, vbscript:,
    non-image data:) are dropped, lazy-loading and sizing attributes are
    removed and Naver's "product not
    found" boilerplate is cut out. If a full document is given only the body
    content is returned. On any parse error the input comes back unchanged.
    """
    if not raw_html:
        return ''
    try:
        soup = BeautifulSoup(raw_html, 'html.parser')

        for tag in soup.find_all(STRIPPED_TAGS):
            if not tag.decomposed:
                tag.decompose()

        for img in soup.find_all('img'):
            clean_image(img, base_url)

        for anchor in soup.find_all('a', href=True):
            clean_link(anchor, base_url)

        for element in soup.find_all(True):
            strip_event_handlers(element)
            strip_unsafe_urls(element, base_url)
            if element.get('style'):
                element['style'] = rewrite_css_urls(element['style'], base_url)

        for style in soup.find_all('style'):
            css = style.string or ''
            if css:
                style.string = Stylesheet(rewrite_css_urls(css, base_url))

        root = soup.body or soup
        remove_not_found_fragments(root)
        return root.decode_contents()
    except Exception as e:
        logger.error(f"Could not normalize detail HTML ({len(raw_html)} chars): {e}")
        return raw_html

from enum import Enum


class SiteKind(Enum):
    UNKNOWN = 'unknown'
    DANAWA = 'danawa'
    NAVER = 'naver'


# Checked in order against the lower-cased URL
SITE_MARKERS = [
    ('naver.com', SiteKind.NAVER),
    ('smartstore.naver', SiteKind.NAVER),
    ('danawa.com', SiteKind.DANAWA),
    ('shop.danawa', SiteKind.DANAWA),
]

# Unrecognized shops are parsed with the Danawa rules rather than rejected.
DEFAULT_SITE = SiteKind.DANAWA


def classify_site(url):
    if not url or not url.strip():
        return SiteKind.UNKNOWN
    lowered = url.lower()
    for marker, kind in SITE_MARKERS:
        if marker in lowered:
            return kind
    return DEFAULT_SITE


# A locator is (css selector, attribute). attribute None means element text.
OG_TITLE = ("meta[property='og:title']", 'content')
TWITTER_TITLE = ("meta[name='twitter:title']", 'content')
OG_PRICE = ("meta[property='product:price:amount']", 'content')
OG_IMAGE = ("meta[property='og:image']", 'content')

LAZY_ATTRIBUTES = ['src', 'data-src', 'data-original', 'data-lazy', 'data-lazy-src']

DANAWA_SELECTORS = {
    'title': [
        OG_TITLE,
        ('.prod_view_head', None),
        ('.prod_tit', None),
        ('.product_title', None),
        ('h1', None),
        ('h2', None),
    ],
    'spec': [
        ('.prod_spec', None),
        ('.spec_list', None),
        ('.product_spec', None),
    ],
    'price': [
        ('.price', None),
        ('.prod_price', None),
        ('[class*="price"]', None),
        OG_PRICE,
    ],
    'gallery': [
        '.prod_view_thumb img',
        '.product_img img',
        '.thumb_img img',
    ],
    'detail_images': ['.prod_con_img img'],
    'detail_html': [
        '.prod_con_img',
        '.product_detail',
        '.detail_content',
    ],
    'image_domains': ['danawa'],
    'image_attributes': LAZY_ATTRIBUTES,
}

NAVER_SELECTORS = {
    'title': [
        OG_TITLE,
        TWITTER_TITLE,
        ('h1', None),
        ('h2', None),
        ('h3', None),
    ],
    'spec': [],
    'price': [
        OG_PRICE,
        ('[class*="price" i]', None),
    ],
    'gallery': [],
    'detail_images': ['.se-main-container img'],
    'detail_html': [
        '.se-main-container',
        '[data-nv-handle="PRODUCT_DETAIL"]',
        '#INTRODUCE',
        '#info',
        '#content',
    ],
    'image_domains': [
        'pstatic.net',
        'shop-phinf',
        'shopping-phinf',
        'static.naver',
        'cdn.naver',
        'blogfiles.naver',
    ],
    'image_attributes': LAZY_ATTRIBUTES + ['data-origin', 'data-thumb', 'data-large', 'data-zoom'],
}

RULESETS = {
    SiteKind.DANAWA: DANAWA_SELECTORS,
    SiteKind.NAVER: NAVER_SELECTORS,
}


def ruleset_for(site_kind):
    return RULESETS.get(site_kind, RULESETS[DEFAULT_SITE])

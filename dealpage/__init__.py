from .sites import SiteKind, classify_site
from .extractor import extract_product, extract_metadata_only, looks_blocked_or_missing, absolutize_url
from .detail_html import normalize_detail_html
from .record import ProductRecord, Page, merge_overrides, encode_page, decode_page

__version__ = '1.0.0'

__all__ = [
    'SiteKind',
    'classify_site',
    'extract_product',
    'extract_metadata_only',
    'looks_blocked_or_missing',
    'absolutize_url',
    'normalize_detail_html',
    'ProductRecord',
    'Page',
    'merge_overrides',
    'encode_page',
    'decode_page',
]

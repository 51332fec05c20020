import base64
import json
import logging
import re
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

TITLE_SENTINEL = 'title extraction failed'

MAX_IMAGES = 10
MAX_DETAIL_IMAGES = 5

RECORD_KEYS = {
    'title': 'title',
    'description': 'description',
    'list_price': 'listPrice',
    'sale_price': 'salePrice',
    'images': 'images',
    'detail_images': 'detailImages',
    'description_html': 'descriptionHtml',
}


def digits_only(text):
    return re.sub(r'[^0-9]', '', text or '')


@dataclass(frozen=True)
class ProductRecord:
    title: str = TITLE_SENTINEL
    description: str = ''
    list_price: str = ''
    sale_price: str = ''
    images: tuple = ()
    detail_images: tuple = ()
    description_html: str = ''

    def to_dict(self):
        data = {key: getattr(self, attr) for attr, key in RECORD_KEYS.items()}
        data['images'] = list(self.images)
        data['detailImages'] = list(self.detail_images)
        return data

    @classmethod
    def from_dict(cls, data):
        """Build a record from its persisted camelCase layout.

        Raises ValueError when a field has the wrong type.
        """
        values = {}
        for attr, key in RECORD_KEYS.items():
            if key not in data:
                continue
            value = data[key]
            if attr in ('images', 'detail_images'):
                if not isinstance(value, list) or not all(isinstance(u, str) for u in value):
                    raise ValueError(f'{key} must be a list of strings')
                value = tuple(value)
            elif not isinstance(value, str):
                raise ValueError(f'{key} must be a string')
            values[attr] = value
        if not values.get('title'):
            values['title'] = TITLE_SENTINEL
        return cls(**values)

    def is_incomplete(self):
        """True when the title or the images could not be extracted."""
        return self.title == TITLE_SENTINEL or not self.images

    def richness(self):
        """Rough count of populated fields, used to pick between two extractions."""
        return sum([
            self.title != TITLE_SENTINEL,
            bool(self.description),
            bool(self.list_price),
            len(self.images),
            len(self.detail_images),
            bool(self.description_html),
        ])


@dataclass(frozen=True)
class Page:
    record: ProductRecord
    id: str = ''
    template: str = 'naver'
    product_url: str = ''
    custom_price: str = ''

    def to_dict(self):
        data = self.record.to_dict()
        data.update({
            'id': self.id,
            'template': self.template,
            'productUrl': self.product_url,
            'customPrice': self.custom_price,
        })
        return data

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValueError('page payload must be a JSON object')
        bookkeeping = {}
        for attr, key in (('id', 'id'), ('template', 'template'),
                          ('product_url', 'productUrl'), ('custom_price', 'customPrice')):
            value = data.get(key, '')
            if not isinstance(value, str):
                raise ValueError(f'{key} must be a string')
            bookkeeping[attr] = value
        if not bookkeeping['template']:
            bookkeeping['template'] = 'naver'
        return cls(record=ProductRecord.from_dict(data), **bookkeeping)


def merge_overrides(record, title='', list_price=''):
    """Manual values from the form win over scraped ones when non-empty."""
    title = (title or '').strip()
    list_price = digits_only(list_price)
    changes = {}
    if title:
        changes['title'] = title
    if list_price:
        changes['list_price'] = list_price
    return replace(record, **changes) if changes else record


def encode_page(page):
    raw = json.dumps(page.to_dict(), ensure_ascii=False).encode('utf-8')
    return base64.urlsafe_b64encode(raw).decode('ascii').rstrip('=')


def decode_page(token):
    """Reverse of encode_page. Returns None for anything that is not a valid payload."""
    if not token or not isinstance(token, str):
        return None
    try:
        padded = token + '=' * (-len(token) % 4)
        raw = base64.b64decode(padded, altchars=b'-_', validate=True)
        return Page.from_dict(json.loads(raw.decode('utf-8')))
    except (ValueError, TypeError, RecursionError) as e:
        logger.debug(f"Could not decode page payload ({len(token)} chars): {e}")
        return None

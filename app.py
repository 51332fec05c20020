from flask import Flask, request, jsonify, render_template, url_for
from flask_cors import CORS
import logging
from dataclasses import replace

from dealpage import config
from dealpage.fetcher import scrape_product
from dealpage.record import Page, ProductRecord, decode_page, digits_only, encode_page, merge_overrides
from dealpage.store import PageStore, generate_id

app = Flask(__name__)
CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

page_store = PageStore()

FALLBACK_DESCRIPTION = '<div style="text-align:center; padding:40px; color:#666;">상품 상세 정보를 불러올 수 없습니다.</div>'


def is_valid_url(url):
    return url.startswith(('http://', 'https://'))


def form_value(data, *names):
    for name in names:
        value = data.get(name)
        if value:
            return str(value).strip()
    return ''


def finalize_record(record):
    """Fill the gaps the storefront template cannot render without."""
    images = record.images or (config.PLACEHOLDER_IMAGE,)
    description_html = record.description_html
    if not description_html.strip() and not record.detail_images:
        description_html = FALLBACK_DESCRIPTION
    return replace(record, images=images, description_html=description_html)


def save_page(page):
    """Returns the key the page can be found under in /p/<key>."""
    if config.STORE_MODE == 'url':
        return encode_page(page)
    page_store.put(page.id, page)
    return page.id


def load_page(key):
    page = page_store.get(key)
    if page is None:
        page = decode_page(key)
    return page


def format_price(value):
    digits = digits_only(value)
    return f'{int(digits):,}' if digits else ''


app.jinja_env.filters['price'] = format_price


@app.route('/generate', methods=['POST'])
def generate():
    data = request.get_json(silent=True) or request.form
    if not data:
        return jsonify({'error': 'Missing form data'}), 400
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object or form data'}), 400

    product_url = form_value(data, 'productUrl')
    if not product_url:
        return jsonify({'error': 'productUrl is required'}), 400
    if not is_valid_url(product_url):
        return jsonify({'error': 'URLs must start with http:// or https://'}), 400

    manual_title = form_value(data, 'manualTitle')
    list_price = form_value(data, 'listPrice')
    custom_price = digits_only(form_value(data, 'customPrice', 'targetPrice'))

    logger.info(f"Generating page for: {product_url}")

    result = scrape_product(product_url)
    fallback = 'error' in result
    if fallback:
        logger.warning(f"Scraping failed for {product_url}: {result['error']}, using manual values")
        record = ProductRecord()
    else:
        record = result['record']

    record = finalize_record(merge_overrides(record, title=manual_title, list_price=list_price))
    page = Page(
        record=record,
        id=generate_id(),
        template=config.TEMPLATE_NAME,
        product_url=product_url,
        custom_price=custom_price,
    )
    key = save_page(page)

    response = {
        'id': page.id,
        'link': url_for('product_page', key=key, _external=True),
        'fallback': fallback,
    }
    if fallback:
        response['message'] = result['error']
    return jsonify(response)


@app.route('/p/<key>', methods=['GET'])
def product_page(key):
    page = load_page(key)
    if page is None:
        logger.info(f"Invalid page link requested ({len(key)} chars)")
        return render_template('invalid.html'), 404
    return render_template('product.html', page=page, record=page.record)


@app.route('/health', methods=['GET'])
def health_check():
    return jsonify({'status': 'healthy', 'message': 'API is running'})


@app.route('/', methods=['GET'])
def home():
    return render_template('index.html')


if __name__ == '__main__':
    app.run(debug=config.DEBUG, host='0.0.0.0', port=config.PORT)

import os

# 'memory' keeps pages in the process, 'url' packs the whole page into the link
STORE_MODE = os.environ.get('DEALPAGE_STORE_MODE', 'memory').lower()

PORT = int(os.environ.get('PORT', '5000'))
DEBUG = os.environ.get('DEALPAGE_DEBUG', '').lower() in ('1', 'true', 'yes')
LOG_LEVEL = os.environ.get('DEALPAGE_LOG_LEVEL', 'INFO').upper()

# Seconds
REQUEST_TIMEOUT = float(os.environ.get('DEALPAGE_REQUEST_TIMEOUT', '20'))
REQUEST_DELAY = (
    float(os.environ.get('DEALPAGE_DELAY_MIN', '0.5')),
    float(os.environ.get('DEALPAGE_DELAY_MAX', '1.5')),
)

ID_LENGTH = 8
TEMPLATE_NAME = 'naver'

PLACEHOLDER_IMAGE = 'https://via.placeholder.com/500x500/f8f9fa/6c757d?text=Product+Image'

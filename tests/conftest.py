import pytest

DANAWA_URL = 'https://prod.danawa.com/info/?pcode=12345678'
NAVER_URL = 'https://smartstore.naver.com/shop/products/987654'

DANAWA_HTML = """
<html>
<head>
  <title>Wireless Mouse : 다나와 가격비교</title>
  <meta property="og:title" content="Wireless Mouse" />
  <meta property="og:image" content="https://img.danawa.com/prod_img/main.jpg" />
</head>
<body>
  <h3 class="prod_tit">Wireless Mouse (Black, 2.4GHz, USB-C)</h3>
  <div class="prod_spec">USB-C / 2.4GHz / 1600DPI</div>
  <div class="lowest_area"><span class="price">₩129,000</span></div>
  <div class="prod_view_thumb">
    <img src="https://img.danawa.com/prod_img/main.jpg" />
    <img src="/prod_img/thumb1.png" />
    <img data-src="//img.danawa.com/prod_img/thumb2.webp" src="data:image/gif;base64,R0lGODlhAQABAAAAACw=" />
    <img src="/prod_img/not-an-image.svg" />
  </div>
  <img src="https://cdn.example.com/banner.jpg" />
  <img src="https://img.danawa.com/etc/logo.gif" />
  <div class="prod_con_img">
    <script>alert('x')</script>
    <img data-original="/detail/1.jpg" width="860" style="width: 860px; border: 0" />
    <a href="/event" onclick="track()">event</a>
  </div>
</body>
</html>
"""

NAVER_HTML = """
<html>
<head>
  <meta property="og:title" content="Robot Vacuum X1/Silver/2024" />
  <meta property="og:image" content="https://shop-phinf.pstatic.net/main/og?type=m510" />
  <meta property="product:price:amount" content="459000" />
</head>
<body>
  <h3>Robot Vacuum</h3>
  <div class="ProductPrice_box"><span>459,000원</span></div>
  <img src="https://shop-phinf.pstatic.net/thumb/1.jpg?type=f40" />
  <img data-zoom="https://shopping-phinf.pstatic.net/zoom/2.png" />
  <img src="https://ads.example.com/ad.jpg" />
  <div class="se-main-container">
    <p>상세 설명</p>
    <img src="https://shop-phinf.pstatic.net/detail/a.jpg" />
    <img src="https://shop-phinf.pstatic.net/detail/b.jpg" />
  </div>
</body>
</html>
"""


@pytest.fixture
def danawa_html():
    return DANAWA_HTML


@pytest.fixture
def naver_html():
    return NAVER_HTML

"""
Tests for sponsor logo extraction
"""
from __future__ import annotations

import pytest

from scrapers.base import parse_html
from scrapers.sponsors_scraper import SponsorsScraper, extract_sponsors, resolve_image_source


BASE_URL = "https://club.example.org"

HOME_HTML = """
<html><body>
  <div class="tns-outer">
    <div class="tns-item">
      <a href="/sponsor/acme"><img src="/uploads/sponsors/acme.png" alt="Acme Boats"></a>
    </div>
    <div class="tns-item">
      <a href="/sponsor/acme-clone"><img src="/uploads/sponsors/acme.png" alt="Acme Clone"></a>
    </div>
  </div>
  <a href="/sponsor/lazy" title="Lazy Co">
    <img src="data:image/gif;base64,R0lGODlhAQABAAAAACw=" data-src="/uploads/sponsors/lazy.png">
  </a>
  <a href="/sponsor/responsive">
    <img srcset="/uploads/sponsors/resp-1x.png 1x, /uploads/sponsors/resp-2x.png 2x" alt="">
  </a>
  <a href="/sponsor/text-only"><span>No logo</span></a>
  <div class="sponsor-strip">
    <img src="/uploads/sponsors/bakery.jpg" alt="Local Bakery">
    <img src="/images/banner.jpg" alt="Banner">
  </div>
</body></html>
"""


def test_image_source_order():
    img = parse_html('<img src="data:image/png;base64,xx" data-lazy-src="/a.png" srcset="/b.png 2x">').img
    assert resolve_image_source(img) == "/a.png"

    img = parse_html('<img srcset="/b.png 1x, /c.png 2x">').img
    assert resolve_image_source(img) == "/b.png"

    assert resolve_image_source(parse_html("<img>").img) == ""


def test_extract_sponsors():
    sponsors = extract_sponsors(HOME_HTML, BASE_URL)
    assert [s.logo_url for s in sponsors] == [
        f"{BASE_URL}/uploads/sponsors/acme.png",
        f"{BASE_URL}/uploads/sponsors/lazy.png",
        f"{BASE_URL}/uploads/sponsors/resp-1x.png",
        f"{BASE_URL}/uploads/sponsors/bakery.jpg",
    ]


def test_first_name_kept_for_shared_logo():
    acme = extract_sponsors(HOME_HTML, BASE_URL)[0]
    assert acme.name == "Acme Boats"
    assert acme.link_url == f"{BASE_URL}/sponsor/acme"
    assert acme.source_tag == "tns-carousel"


def test_names_and_tags():
    sponsors = extract_sponsors(HOME_HTML, BASE_URL)
    lazy, responsive, bakery = sponsors[1:]
    assert (lazy.name, lazy.source_tag) == ("Lazy Co", "sponsor-link")
    assert responsive.name == "Sponsor"
    assert (bakery.name, bakery.link_url, bakery.source_tag) == ("Local Bakery", "", "standalone-image")


def test_standalone_image_inside_sponsor_link_is_not_repeated():
    html = '<div class="sponsors"><a href="/sponsor/x"><img src="/sponsors/x.png" alt="X"></a></div>'
    sponsors = extract_sponsors(html, BASE_URL)
    assert len(sponsors) == 1
    assert sponsors[0].source_tag == "sponsor-link"


def test_logo_urls_unique():
    urls = [s.logo_url for s in extract_sponsors(HOME_HTML * 2, BASE_URL)]
    assert len(urls) == len(set(urls))


@pytest.mark.asyncio
async def test_scraper_reads_home_page(settings, make_fetcher):
    fetcher = make_fetcher({f"{BASE_URL}/home": HOME_HTML})
    envelope = await SponsorsScraper(settings, fetcher).run()
    snapshot = envelope.to_snapshot()
    assert len(snapshot["sponsors"]) == 4
    assert "totalSponsors" not in snapshot
    assert snapshot["sponsors"][0]["logoUrl"].endswith("/acme.png")

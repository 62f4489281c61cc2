"""
Integration test for the page inspection pipeline.

Drives a real Chromium instance against pages served through Playwright
request routing, so no network access is needed:
1. Navigation and status detection
2. Tab / accordion reveal
3. Link classification and deduplication
4. Content image selection

Run with: pytest tests/integration -m integration -v
"""

import pytest
from playwright.async_api import Error as PlaywrightError

from pagescout.config import BrowserSettings, InspectorConfig
from pagescout.core import PageInspector
from pagescout.exceptions import InspectorNotInitializedError


PIXEL = "data:image/gif;base64,R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7"

OVERVIEW_TEXT = "The overview panel explains how the installer prepares a workstation, " * 3
DETAILS_TEXT = "Detailed configuration options cover proxies, certificates and cache folders. " * 3

GUIDE_HTML = f"""<!DOCTYPE html>
<html>
<head><title>Install Guide</title></head>
<body>
<nav><img src="{PIXEL}" alt="logo" width="20" height="20"><a href="/about#team">About</a></nav>
<main>
  <div class="tablist">
    <button role="tab" id="tab-overview" aria-controls="panel-overview" onclick="show('panel-overview')">Overview</button>
    <button role="tab" id="tab-details" aria-controls="panel-details" onclick="show('panel-details')">Details</button>
  </div>
  <section id="panel-overview" hidden>{OVERVIEW_TEXT}</section>
  <section id="panel-details" hidden>{DETAILS_TEXT}</section>
  <button aria-expanded="false" onclick="this.setAttribute('aria-expanded', 'true')">Troubleshooting</button>
  <article><p>Architecture overview diagram</p><img src="{PIXEL}" alt="Architecture" width="300" height="200"></article>
  <a href="/help/setup.html">Setup</a>
  <a href="/help/setup.html#step-2">Setup step 2</a>
  <a href="https://other.test/page">Elsewhere</a>
  <a href="mailto:docs@docs.test">Mail us</a>
  <a href="/files/manual.pdf"></a>
</main>
<script>
function show(id) {{
  document.querySelectorAll('section[id^="panel-"]').forEach(p => p.hidden = p.id !== id);
}}
</script>
</body>
</html>
"""


async def start_inspector() -> PageInspector:
    config = InspectorConfig(browser=BrowserSettings(wait_after_load_ms=0))
    inspector = PageInspector(config)
    try:
        await inspector.initialize()
    except PlaywrightError as e:
        await inspector.close()
        pytest.skip(f"Chromium not available: {e}")

    async def serve_guide(route):
        await route.fulfill(status=200, content_type="text/html", body=GUIDE_HTML)

    async def serve_missing(route):
        await route.fulfill(status=404, content_type="text/html", body="<html><body>Gone away</body></html>")

    async def refuse(route):
        await route.abort()

    await inspector.context.route("https://docs.test/**", serve_guide)
    await inspector.context.route("https://missing.test/**", serve_missing)
    await inspector.context.route("https://down.test/**", refuse)

    return inspector


@pytest.mark.integration
@pytest.mark.asyncio
async def test_inspect_documentation_page():
    """
    Test a full inspection of a page with tabs, an accordion, links and images.
    """
    inspector = await start_inspector()

    try:
        inspection = await inspector.inspect("https://docs.test/help/install.html")
    finally:
        await inspector.close()

    # Status
    assert inspection.status.accessible is True
    assert inspection.status.status_code == 200
    assert inspection.status.page_title == "Install Guide"

    # Reveal
    assert inspection.reveal.tabs_found == 2
    assert list(inspection.reveal.tab_content) == ["Overview", "Details"]
    assert inspection.reveal.tab_content["Overview"].startswith("The overview panel")
    assert inspection.reveal.accordions_expanded == 1
    assert inspection.reveal.carousel_clicks == 0

    # Links
    assert inspection.links.page_title == "Install Guide"
    assert [link.href for link in inspection.links.links] == [
        "https://docs.test/help/setup.html",
        "https://docs.test/files/manual.pdf",
    ]
    assert inspection.links.links[1].file_type == "pdf"

    # Images
    assert len(inspection.images) == 1
    image = inspection.images[0]
    assert image.alt == "Architecture"
    assert image.width == 300
    assert image.context_slug == "architecture-overview-diagram"
    assert image.can_download_same_origin is True

    assert inspector.get_stats()["pages_inspected"] == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_http_error_status():
    """Test HTTP error responses mark the page inaccessible"""
    inspector = await start_inspector()

    try:
        inspection = await inspector.inspect("https://missing.test/page")
    finally:
        await inspector.close()

    assert inspection.status.accessible is False
    assert inspection.status.status_code == 404
    assert inspection.status.error == "HTTP 404"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_navigation_failure():
    """Test aborted navigation produces an inaccessible inspection"""
    inspector = await start_inspector()

    try:
        inspection = await inspector.inspect("https://down.test/")
        stats = inspector.get_stats()
    finally:
        await inspector.close()

    assert inspection.status.accessible is False
    assert inspection.status.status_code == 0
    assert inspection.links.links == []
    assert stats["navigation_errors"] == 1


@pytest.mark.asyncio
async def test_inspect_requires_initialize():
    """Test inspect() before initialize() raises"""
    inspector = PageInspector()

    with pytest.raises(InspectorNotInitializedError):
        await inspector.inspect("https://docs.test/")


if __name__ == "__main__":
    pytest.main([__file__, "-v", "-m", "integration"])

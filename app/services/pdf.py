from flask import current_app
from playwright.sync_api import sync_playwright, Error as PlaywrightError
from ..errors import ReportRenderError

LAUNCH_ARGS = ['--no-sandbox', '--disable-setuid-sandbox']


def html_to_pdf(html: str) -> bytes:
    """Render an HTML document to A4 PDF bytes with headless Chromium."""
    cfg = current_app.config
    timeout = cfg.get('PDF_RENDER_TIMEOUT_MS', 30000)
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(
                headless=True,
                args=LAUNCH_ARGS,
                executable_path=cfg.get('CHROMIUM_EXECUTABLE') or None,
            )
            try:
                page = browser.new_page()
                page.set_content(html, wait_until='networkidle', timeout=timeout)
                return page.pdf(
                    format='A4',
                    print_background=True,
                    margin={'top': '20px', 'right': '20px', 'bottom': '20px', 'left': '20px'},
                )
            finally:
                browser.close()
    except PlaywrightError as e:
        raise ReportRenderError(str(e)) from e

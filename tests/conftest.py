from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path

import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from mermaidtools.config.settings import get_settings
from mermaidtools.core.models import RenderOptions
from mermaidtools.rendering.engine import ERROR_TEXT_SCRIPT

SVG_MARKUP = '<svg id="mermaid-0" viewBox="0 0 100 50"><g class="node"></g></svg>'


class FakeElement:
    def __init__(self, markup: str = SVG_MARKUP) -> None:
        self.markup = markup
        self.screenshot_kwargs: dict | None = None

    def evaluate(self, script: str, arg: object = None) -> str:
        return self.markup

    def screenshot(self, **kwargs: object) -> bytes:
        self.screenshot_kwargs = kwargs
        return b"\x89PNG\r\n\x1a\nfake"


class FakePage:
    """Stands in for a Playwright page that has loaded the Mermaid shell."""

    def __init__(
        self,
        *,
        svg_appears: bool = True,
        error_message: str | None = None,
        element: FakeElement | None = None,
    ) -> None:
        self.svg_appears = svg_appears
        self.error_message = error_message
        self.element = element if element is not None else FakeElement()
        self.html: str | None = None
        self.evaluated: list[tuple[str, object]] = []
        self.waits: list[tuple[str, int]] = []
        self.pdf_kwargs: dict | None = None

    def set_content(self, html: str) -> None:
        self.html = html

    def wait_for_selector(self, selector: str, timeout: int) -> None:
        self.waits.append((selector, timeout))
        if not self.svg_appears:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    def evaluate(self, script: str, arg: object = None) -> object:
        self.evaluated.append((script, arg))
        if script == ERROR_TEXT_SCRIPT:
            return self.error_message
        return None

    def query_selector(self, selector: str) -> FakeElement | None:
        return self.element

    def pdf(self, **kwargs: object) -> bytes:
        self.pdf_kwargs = kwargs
        return b"%PDF-1.4 fake"


class FakeBrowser:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.page_kwargs: dict | None = None

    def new_page(self, **kwargs: object) -> FakePage:
        self.page_kwargs = kwargs
        return self.page


class FakeSession:
    """Session factory that records acquisition and release."""

    def __init__(self, page: FakePage | None = None) -> None:
        self.page = page if page is not None else FakePage()
        self.browser = FakeBrowser(self.page)
        self.acquired = 0
        self.released = 0

    @contextmanager
    def __call__(self):
        self.acquired += 1
        try:
            yield self.browser
        finally:
            self.released += 1


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def options(tmp_path: Path) -> RenderOptions:
    return RenderOptions(output=tmp_path / "out")


@pytest.fixture(autouse=True)
def _reset_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _info_logging(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)


@pytest.fixture
def make_session():
    """Build a FakeSession around a page configured with ``page_kwargs``."""

    def _make(**page_kwargs: object) -> FakeSession:
        return FakeSession(FakePage(**page_kwargs))

    return _make

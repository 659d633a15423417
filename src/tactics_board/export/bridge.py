"""Headless rasterization of field snapshots through Playwright."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal, Optional

from playwright.async_api import Browser, Page, Playwright, Route, async_playwright

from tactics_board.config.settings import ExportSettings
from tactics_board.models import FieldSnapshot
from tactics_board.render import EXPORT_FIELD_WIDTH, render_export_shell, render_field_markup


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

ImageFormat = Literal["png", "jpeg"]
BrowserFactory = Callable[[], Awaitable[Any]]

CONTAINER_SELECTOR = "#export-field-container"

QUALITY_INIT_SCRIPT = """
(() => {
  const install = () => {
    const style = document.createElement("style");
    style.textContent = `
      * {
        -webkit-font-smoothing: antialiased !important;
        -moz-osx-font-smoothing: grayscale !important;
        image-rendering: -webkit-optimize-contrast !important;
        text-rendering: optimizeLegibility !important;
      }
      svg { shape-rendering: geometricPrecision !important; }
    `;
    document.head.appendChild(style);
  };
  if (document.head) {
    install();
  } else {
    document.addEventListener("DOMContentLoaded", install, { once: true });
  }
})();
"""

_MOUNT_SCRIPT = "snapshot => window.fieldExport.mount(snapshot)"

_DIAGNOSTICS_SCRIPT = """
() => ({
  snapshotReceived: !!(window.fieldExport && window.fieldExport.received),
  ready: !!(window.fieldExport && window.fieldExport.ready),
  documentState: document.readyState,
})
"""

_REFLOW_SCRIPT = """
() => {
  const container = document.getElementById("export-field-container");
  return container ? container.offsetHeight : 0;
}
"""


class ExportError(RuntimeError):
    """Base class for rendering failures surfaced to export callers."""


class RenderContextError(ExportError):
    """A rendering context could not be acquired or opened."""


@dataclass(frozen=True)
class RenderDiagnostics:
    snapshot_received: bool
    ready: bool
    document_state: str
    page_title: str = ""
    url: str = ""

    def describe(self) -> str:
        if not self.snapshot_received:
            return "snapshot never arrived"
        if not self.ready:
            return "render never completed"
        return "render completed but signal lost"


class ExportTimeout(ExportError):
    """The render-only view did not signal readiness in time."""

    def __init__(self, diagnostics: RenderDiagnostics, timeout_ms: int) -> None:
        self.diagnostics = diagnostics
        self.timeout_ms = timeout_ms
        super().__init__(f"Export timed out after {timeout_ms}ms: {diagnostics.describe()}")


class ScreenshotService:
    """Drives a shared headless Chromium to turn snapshots into images.

    The browser is launched on first use and reused; every capture gets its
    own browser context, which is closed on every exit path.  Concurrent
    captures are bounded by ``settings.max_concurrent_exports``.
    """

    def __init__(
        self,
        settings: ExportSettings | None = None,
        *,
        browser_factory: BrowserFactory | None = None,
    ) -> None:
        self.settings = settings or ExportSettings.from_env()
        self._browser_factory = browser_factory
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._browser_lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(self.settings.max_concurrent_exports)

    async def _launch(self) -> Browser:
        if self._browser_factory is not None:
            return await self._browser_factory()
        self._playwright = await async_playwright().start()
        return await self._playwright.chromium.launch(headless=self.settings.headless)

    async def get_browser(self) -> Browser:
        async with self._browser_lock:
            if self._browser is not None and not self._browser.is_connected():
                logger.info("Headless browser disconnected; relaunching")
                self._browser = None
            if self._browser is None:
                self._browser = await self._launch()
                logger.info("Launched headless browser (headless=%s)", self.settings.headless)
            return self._browser

    async def close(self) -> None:
        async with self._browser_lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
                logger.info("Closed headless browser")
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

    async def capture_field(self, snapshot: FieldSnapshot, image_format: ImageFormat = "png") -> bytes:
        """Render ``snapshot`` in an isolated context and return the raster bytes."""

        acquire_timeout = self.settings.context_acquire_timeout_ms / 1000
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=acquire_timeout)
        except asyncio.TimeoutError as exc:
            raise RenderContextError(
                f"No rendering context available within {self.settings.context_acquire_timeout_ms}ms"
            ) from exc
        try:
            browser = await self.get_browser()
            try:
                context = await browser.new_context(
                    viewport={"width": self.settings.viewport_width, "height": self.settings.viewport_height},
                    device_scale_factor=self.settings.device_scale_factor,
                )
            except Exception as exc:
                raise RenderContextError(f"Failed to open rendering context: {exc}") from exc
            try:
                page = await context.new_page()
                return await self._render(page, snapshot, image_format)
            finally:
                await context.close()
        finally:
            self._slots.release()

    async def _serve(self, route: Route) -> None:
        request = route.request
        origin = self.settings.render_origin
        if not request.url.startswith(f"{origin}/"):
            logger.warning("Blocked export page request to %s", request.url)
            await route.abort()
            return
        path = request.url[len(origin):].split("?", 1)[0]
        if request.method == "GET" and path == "/export-preview":
            await route.fulfill(status=200, content_type="text/html", body=render_export_shell(self.settings))
        elif request.method == "POST" and path == "/render":
            snapshot = FieldSnapshot.model_validate_json(request.post_data or "")
            markup = render_field_markup(snapshot, field_width=EXPORT_FIELD_WIDTH)
            await route.fulfill(status=200, content_type="text/html", body=markup)
        else:
            await route.abort()

    async def _render(self, page: Page, snapshot: FieldSnapshot, image_format: ImageFormat) -> bytes:
        settings = self.settings
        # Every request goes through _serve; only the render origin is answered.
        await page.route("**/*", self._serve)
        await page.add_init_script(script=QUALITY_INIT_SCRIPT)
        await page.goto(settings.render_url, wait_until="domcontentloaded", timeout=settings.navigation_timeout_ms)

        try:
            await asyncio.wait_for(
                page.evaluate(_MOUNT_SCRIPT, snapshot.to_payload()),
                timeout=settings.ready_timeout_ms / 1000,
            )
        except asyncio.TimeoutError as exc:
            diagnostics = await self._diagnose(page)
            logger.error(
                "Export timeout (%s): snapshot_received=%s ready=%s document_state=%s title=%r url=%s",
                diagnostics.describe(),
                diagnostics.snapshot_received,
                diagnostics.ready,
                diagnostics.document_state,
                diagnostics.page_title,
                diagnostics.url,
            )
            raise ExportTimeout(diagnostics, settings.ready_timeout_ms) from exc

        container = page.locator(CONTAINER_SELECTOR)
        await container.wait_for(state="visible", timeout=settings.navigation_timeout_ms)
        await page.evaluate(_REFLOW_SCRIPT)
        await page.wait_for_timeout(settings.reflow_wait_ms)

        options: dict[str, Any] = {"type": image_format, "animations": "disabled"}
        if image_format == "jpeg":
            options["quality"] = 100
        return await container.screenshot(**options)

    async def _diagnose(self, page: Page) -> RenderDiagnostics:
        url = self.settings.render_url
        try:
            state = await page.evaluate(_DIAGNOSTICS_SCRIPT)
            title = await page.title()
        except Exception as exc:  # the page may be wedged or gone
            logger.warning("Could not read export page state: %s", exc)
            return RenderDiagnostics(False, False, "unavailable", url=url)
        return RenderDiagnostics(
            snapshot_received=bool(state.get("snapshotReceived")),
            ready=bool(state.get("ready")),
            document_state=str(state.get("documentState", "unknown")),
            page_title=title,
            url=url,
        )

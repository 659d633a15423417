"""Export bridge from field snapshots to raster images."""

from .bridge import (
    ExportError,
    ExportTimeout,
    RenderContextError,
    RenderDiagnostics,
    ScreenshotService,
)

__all__ = [
    "ExportError",
    "ExportTimeout",
    "RenderContextError",
    "RenderDiagnostics",
    "ScreenshotService",
]

"""Command-line interface for exporting and previewing tactics boards."""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

import uvicorn

from tactics_board.config import ExportSettings
from tactics_board.config_loader import FieldProfile
from tactics_board.export import ScreenshotService
from tactics_board.models import FieldSnapshot
from tactics_board.render import render_field_page


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render tactics board snapshots")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Rasterize a snapshot JSON file")
    export.add_argument("snapshot", type=Path, help="Path to snapshot JSON")
    export.add_argument("--format", choices=["png", "jpg"], default="png", help="Image format")
    export.add_argument("--output", type=Path, default=None, help="Output image path")
    export.add_argument("--load-profile", type=Path, help="Load display profile JSON", default=None)
    export.add_argument("--save-profile", type=Path, help="Save display profile JSON", default=None)

    preview = subparsers.add_parser("preview", help="Write the live view HTML for a snapshot")
    preview.add_argument("snapshot", type=Path, help="Path to snapshot JSON")
    preview.add_argument("--output", type=Path, default=Path("lineup-field.html"), help="Output HTML path")
    preview.add_argument("--load-profile", type=Path, help="Load display profile JSON", default=None)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")

    return parser.parse_args(argv)


def load_snapshot(path: Path, profile_path: Path | None = None) -> FieldSnapshot:
    snapshot = FieldSnapshot.model_validate(json.loads(path.read_text(encoding="utf-8")))
    if profile_path:
        snapshot = FieldProfile.load(profile_path).apply(snapshot)
    return snapshot


async def _export(snapshot: FieldSnapshot, image_format: str) -> bytes:
    service = ScreenshotService(ExportSettings.from_env())
    try:
        return await service.capture_field(snapshot, "png" if image_format == "png" else "jpeg")
    finally:
        await service.close()


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    if args.command == "serve":
        uvicorn.run("tactics_board.api:create_app", factory=True, host=args.host, port=args.port)
        return

    snapshot = load_snapshot(args.snapshot, args.load_profile)

    if args.command == "preview":
        args.output.write_text(render_field_page(snapshot), encoding="utf-8")
        print(f"Wrote preview to {args.output}")
        return

    if args.save_profile:
        FieldProfile.from_snapshot(snapshot).save(args.save_profile)
        print(f"Saved display profile to {args.save_profile}")
    output = args.output or Path(f"lineup-field.{args.format}")
    image = asyncio.run(_export(snapshot, args.format))
    output.write_bytes(image)
    print(f"Wrote {len(image)} bytes to {output}")


if __name__ == "__main__":
    main()

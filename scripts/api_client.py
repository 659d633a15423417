"""Lightweight REST client for the tactics board API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def load_snapshot(path: Path, image_format: str) -> dict:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid snapshot JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise SystemExit("Snapshot JSON must be an object")
    payload["format"] = image_format
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the tactics board REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("snapshot", type=Path, nargs="?", help="Field snapshot JSON")
    parser.add_argument("--format", choices=["png", "jpg"], default="png", help="Image format to request")
    parser.add_argument("--output", type=Path, help="Destination path for the exported image")
    parser.add_argument("--health", action="store_true", help="Check API health and exit")
    parser.add_argument("--timeout", type=float, default=90.0, help="Request timeout in seconds")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=args.timeout) as client:
        if args.health:
            resp = client.get("/health")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.snapshot is None:
            raise SystemExit("snapshot file is required unless using --health")

        resp = client.post("/export/field", json=load_snapshot(args.snapshot, args.format))
        if resp.status_code >= 400:
            try:
                detail = json.dumps(resp.json(), indent=2)
            except ValueError:
                detail = resp.text
            raise SystemExit(f"export failed ({resp.status_code}): {detail}")

        output = args.output or Path(f"lineup-field.{args.format}")
        output.write_bytes(resp.content)
        print(f"Saved {len(resp.content)} bytes ({resp.headers.get('content-type')}) to {output}")


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

import httpx


DEFAULT_BASE_URL = os.getenv("LISTS_BASE_URL", "http://localhost:8000")
DEFAULT_API_KEY = os.getenv("LISTS_API_KEY", "")

DEFAULT_TIMEOUT_SECONDS = 30

log = logging.getLogger(__name__)


def upload_file(client: httpx.Client, path: Path, api_key: str) -> tuple[int, dict[str, Any]]:
    """POST one file to /v1/lists/upload; returns (status_code, json body)."""
    with path.open("rb") as fh:
        resp = client.post(
            "/v1/lists/upload",
            headers={"X-API-Key": api_key},
            files={"file": (path.name, fh)},
        )
    try:
        body = resp.json()
    except ValueError:
        body = {"raw": resp.text}
    return resp.status_code, body


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> int:
    p = argparse.ArgumentParser(description="Upload a CSV/XLSX contact list and distribute it across agents.")
    p.add_argument("file", help="path to .csv / .xlsx / .xls file")
    p.add_argument("--base-url", default=DEFAULT_BASE_URL)
    p.add_argument("--api-key", default=DEFAULT_API_KEY)
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    if not args.api_key:
        print("Missing LISTS_API_KEY (env) or --api-key", file=sys.stderr)
        return 2

    path = Path(args.file)
    if not path.is_file():
        print(f"File not found: {path}", file=sys.stderr)
        return 2

    try:
        with httpx.Client(base_url=args.base_url, timeout=DEFAULT_TIMEOUT_SECONDS, transport=transport) as client:
            status, body = upload_file(client, path, args.api_key)
    except httpx.HTTPError as e:
        print(f"Network error for {args.base_url}: {e}", file=sys.stderr)
        return 1

    print(json.dumps(body, indent=2, ensure_ascii=False))
    if status != 201:
        log.error("upload failed: HTTP %s", status)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
import json
import mimetypes
import sys
from pathlib import Path
from typing import Optional

import requests


def _parse_args() -> argparse.Namespace:  # noqa: D401
    parser = argparse.ArgumentParser(
        description="Upload one document to the /v1/extract endpoint",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("path", type=Path, help="Document to upload.")
    parser.add_argument(
        "--url",
        default="http://localhost:8000/v1/extract",
        help="Full URL to the /v1/extract endpoint.",
    )
    parser.add_argument(
        "--content-type",
        dest="content_type",
        default=None,
        help=(
            "Declared media type.  Guessed from the filename when omitted; "
            "pass an empty string to send none and force suffix detection."
        ),
    )
    parser.add_argument(
        "--text-only",
        action="store_true",
        help="Print only the extracted text instead of the full JSON result.",
    )
    return parser.parse_args()


def _declared_type(path: Path, override: Optional[str]) -> str:
    if override is not None:
        return override
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or ""


def main() -> None:  # noqa: D401
    args = _parse_args()

    if not args.path.is_file():
        print(f"Error: {args.path} is not a file", file=sys.stderr)
        sys.exit(1)

    content_type = _declared_type(args.path, args.content_type)
    print(
        f"Uploading {args.path.name} ({content_type or 'no media type'}) → {args.url}\n",
        file=sys.stderr,
    )

    upload = (args.path.name, args.path.read_bytes(), content_type or None)
    response = requests.post(args.url, files={"file": upload})

    if response.status_code != 200:
        print(f"❌ HTTP {response.status_code}\n{response.text}", file=sys.stderr)
        sys.exit(1)

    try:
        payload = response.json()
    except ValueError:
        print("❌ Response is not valid JSON:", file=sys.stderr)
        print(response.text, file=sys.stderr)
        sys.exit(1)

    if args.text_only:
        print(payload["text"])
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":  # pragma: no cover
    main()

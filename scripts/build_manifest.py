from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

sys.path.insert(0, str(BASE_DIR))

from app.config import CONTENT_DIR, load_settings
from app.services.manifest_builder import build_manifest, write_manifest

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate blog/posts.json from Markdown posts.")
    parser.add_argument("--content", type=Path, default=CONTENT_DIR, help="Directory of Markdown posts (default: ./content)")
    parser.add_argument("--output", type=Path, default=load_settings().manifest_path, help="Manifest file to write")
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args()
    manifest = build_manifest(args.content.resolve())
    write_manifest(manifest, args.output.resolve())
    logger.info("Wrote %d posts to %s", len(manifest["posts"]), args.output)


if __name__ == "__main__":
    main()

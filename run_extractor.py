#!/usr/bin/env python3
"""
CLI script to run the extractor on saved article pages.

Reads HTML files, classifies the article body and assembles a post for each.
The preview metadata a site parser would normally supply is given on the
command line.

Usage:
    python run_extractor.py page.html --uri https://example.com/news/1 --title "Headline"
    python run_extractor.py page.html --uri https://example.com/news/1 -s "div.article" -o post.json
"""

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from news_extractor.config import load_settings
from news_extractor.exceptions import NewsExtractorError
from news_extractor.logger import setup_logger
from news_extractor.main import ArticleExtractor
from news_extractor.schemas import PreviewMetadata


def main():
    parser = argparse.ArgumentParser(description="Extract news posts from HTML files")
    parser.add_argument("files", nargs="+", help="HTML files to process")
    parser.add_argument("--uri", "-u", required=True, help="Canonical article URI")
    parser.add_argument("--title", "-t", help="Article title")
    parser.add_argument("--description", "-d", help="Explicit description (skips auto-description)")
    parser.add_argument("--image", help="Lead image URI")
    parser.add_argument("--published-at", help="Publish time, ISO 8601 (default: now)")
    parser.add_argument("--selector", "-s", help="CSS selector of the article body")
    parser.add_argument("--description-length", type=int, help="Auto-description threshold")
    parser.add_argument("--output", "-o", help="Output JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    setup_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    settings = load_settings({"description_length": args.description_length})
    extractor = ArticleExtractor(settings)
    published_at = None
    if args.published_at:
        try:
            published_at = datetime.fromisoformat(args.published_at)
        except ValueError:
            parser.error(f"--published-at: not an ISO 8601 timestamp: {args.published_at!r}")

    results = []

    for filepath in args.files:
        path = Path(filepath)
        print(f"Extracting: {path.name}")

        metadata = PreviewMetadata(
            title=args.title,
            uri=args.uri,
            image=args.image,
            description=args.description,
            published_at=published_at,
        )

        try:
            post = extractor.parse_file(path, metadata, content_selector=args.selector,
                                        source_id=path.stem)
            results.append({
                "file": path.name,
                "status": "success",
                "post": post.model_dump(),
            })
            print(f"  ✓ {len(post.items)} items")

        except (NewsExtractorError, OSError) as e:
            results.append({
                "file": path.name,
                "status": "error",
                "error": str(e)
            })
            print(f"  ✗ Error: {e}")

    # ensure_ascii=False keeps non-Latin article text readable
    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}")
    else:
        print("\n" + output)


if __name__ == "__main__":
    main()

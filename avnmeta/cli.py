import argparse
import json
import logging
import sys

from avnmeta.config import COOKIES_FILE
from avnmeta.errors import ScraperError
from avnmeta.logging_config import setup_logging
from avnmeta.scraper import ThreadScraper


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Scrape game metadata from F95zone thread pages")
    parser.add_argument("threads", nargs="+", help="Thread URL or numeric thread id")
    parser.add_argument("--cookies", default=COOKIES_FILE, help="JSON cookie export of a logged-in session")
    parser.add_argument("--plain-only", action="store_true", help="Skip the headless browser and use a plain GET")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    # Records go to stdout, so log lines must not
    logger = setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, stream=sys.stderr)

    try:
        scraper = ThreadScraper(cookies=args.cookies, use_rendered=not args.plain_only)
    except (OSError, ValueError, TypeError) as e:
        logger.error(f"Could not load cookies from {args.cookies}: {e}")
        return 1

    failures = 0
    for thread in args.threads:
        try:
            if thread.strip().isdigit():
                metadata = scraper.scrape_by_id(thread)
            else:
                metadata = scraper.scrape(thread)
        except ScraperError as e:
            logger.error(f"Failed to scrape {thread}: {e}")
            failures += 1
            continue
        print(json.dumps(metadata.to_dict(), ensure_ascii=False, indent=2))

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

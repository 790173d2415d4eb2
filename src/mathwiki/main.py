"""
Application Initialization
==========================
Headless entry point: loads the bundled corpus through the ContentStore and
prints the ranked pages for a query.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Sets up logging.
2. Creates the Qt core application the store's signals and timers need.
3. Instantiates the ContentStore (which loads and validates the corpus).
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication

from mathwiki.app.store import ContentStore
from mathwiki.logging_config import setup_logging
from mathwiki.model.repository import ContentRepository


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mathwiki", description="Search the bundled math corpus.")
    parser.add_argument("query", nargs="?", default="", help="free-text query (blank lists every page)")
    parser.add_argument("--tag", action="append", default=[], help="restrict to pages with this tag")
    parser.add_argument("--data", default=None, help="directory holding the corpus JSON files")
    parser.add_argument("--limit", type=int, default=None, help="print at most this many pages")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--log-file", default=None, help="also write log records to this file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging
    setup_logging(level=logging.DEBUG if args.debug else logging.WARNING, log_file=args.log_file)

    # 2. Create the Qt core application
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("mathwiki")

    # 3. Initialize the store (loads the corpus)
    store = ContentStore(repository=ContentRepository(args.data))
    if store.load_error_message is not None:
        print(f"Could not load content: {store.load_error_message}", file=sys.stderr)
        return 1

    store.set_selected_tags(args.tag)
    store.set_query(args.query)
    store.refresh_search()

    pages = store.home_list_pages()
    if args.limit is not None:
        pages = pages[:args.limit]
    for page in pages:
        print(f"{page.id:<28} {page.type.display_name:<9} {page.title}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

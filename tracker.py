#!/usr/bin/env python3
"""Book Tracker CLI - browse the catalog, track reading and ratings."""
import argparse
import asyncio
import sys
import json
import sqlite3
from tabulate import tabulate
from booktracker.async_client import AsyncCatalogClient
from booktracker.browser import Browser, UnknownBook
from booktracker.client import CatalogClient
from booktracker.config import Config
from booktracker.engine import format_rating, star_glyphs, truncate
from booktracker.models import SORT_KEYS, STATUS_FILTERS
from booktracker.overlay import OverlayStore
from booktracker.parse import LoadError
from booktracker.storage import open_storage
import logging

logger = logging.getLogger(__name__)


def load_catalog(args, config: Config):
    """Load the catalog once, with the sync or async client."""
    source = args.catalog or config.CATALOG_SOURCE

    if args.use_async:
        async def _load():
            async with AsyncCatalogClient(timeout=config.DEFAULT_TIMEOUT) as client:
                return await client.load(source)
        return asyncio.run(_load())

    with CatalogClient(timeout=config.DEFAULT_TIMEOUT) as client:
        return client.load(source)


def open_browser(args, config: Config):
    """Build a session: catalog, loaded overlay, default query."""
    catalog = load_catalog(args, config)
    path = args.storage or config.STORAGE_PATH
    try:
        storage = open_storage(path)
    except sqlite3.Error as e:
        logger.warning(f"⚠️  Cannot open user data at {path} ({e}); changes will not be kept")
        storage = open_storage(":memory:")
    overlay_store = OverlayStore(storage)
    overlay_store.load()
    return Browser(catalog, overlay_store, search_debounce=config.SEARCH_DEBOUNCE), storage


def display_books(browser: Browser, books, format_type: str):
    """Display books in specified format."""
    if format_type == "table":
        headers = ["ID", "Title", "Author", "Year", "Rating", "Representation", "Read"]
        rows = []
        for book in books:
            rating = browser.display_rating(book.id)
            mine = " (yours)" if browser.rating_of(book.id) is not None else ""
            rows.append([
                book.id,
                truncate(book.title, 50),
                truncate(book.author, 30),
                book.publish_year,
                f"{star_glyphs(rating)} {format_rating(rating)}{mine}",
                truncate(book.representation_str, 30),
                "✓" if browser.is_read(book.id) else "",
            ])
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        books_dict = [
            {
                "id": book.id,
                "title": book.title,
                "author": book.author,
                "genre": book.genre,
                "publishYear": book.publish_year,
                "averageRating": book.average_rating,
                "userRating": browser.rating_of(book.id),
                "read": browser.is_read(book.id),
                "lgbtqRepresentation": list(book.lgbtq_representation),
            }
            for book in books
        ]
        print(json.dumps(books_dict, indent=2, ensure_ascii=False))

    elif format_type == "compact":
        for i, book in enumerate(books, 1):
            print(f"{i}. {book.title} - {book.author}")


def display_stats(stats):
    print("\n" + "=" * 50)
    print("READING STATISTICS")
    print("=" * 50)
    print(f"Total books: {stats.total}")
    print(f"Books read: {stats.read}")
    print(f"Average rating: {format_rating(stats.avg_user_rating)}")
    print("=" * 50 + "\n")


def list_books(args, browser: Browser):
    """Apply the requested filters and print the visible books."""
    browser.on_filter_changed("status", args.status)
    browser.on_filter_changed("representation", args.representation)
    browser.on_filter_changed("genre", args.genre)
    browser.on_sort_changed(args.sort)
    browser.on_search_changed(args.search)
    browser.on_search_changed.flush()

    view = browser.view()
    if not view.books:
        if browser.query.is_default:
            print("The catalog is empty.")
        else:
            print("No books match your filters.")
        return

    display_books(browser, view.books, args.format)
    print(f"Showing {view.showing} of {view.stats.total} books")


def show_book(args, browser: Browser):
    """Print every detail of one book."""
    book = browser.catalog.find(args.book_id)
    if book is None:
        raise UnknownBook(f"No book with id {args.book_id}")

    user_rating = browser.rating_of(book.id)
    rows = [
        ["Title", book.title],
        ["Author", book.author],
        ["Average rating", f"{star_glyphs(book.average_rating)} {format_rating(book.average_rating)}"],
        ["Your rating", f"{user_rating} star{'s' if user_rating > 1 else ''}" if user_rating else "Not rated"],
        ["Status", "Read" if browser.is_read(book.id) else "Unread"],
        ["Genre", book.genre],
        ["Published", str(book.publish_year)],
        ["LGBTQ+ representation", book.representation_str],
        ["Description", book.description],
        ["About the author", book.author_description],
    ]
    if book.trigger_warnings:
        rows.append(["Content warnings", book.trigger_warnings_str])

    print("\n" + tabulate(rows, tablefmt="plain", maxcolwidths=[None, 70]))


def toggle_read(args, browser: Browser):
    view = browser.on_toggle_read(args.book_id)
    state = "read" if browser.is_read(args.book_id) else "unread"
    print(f"Book {args.book_id} marked as {state} ({view.stats.read} read)")


def rate_book(args, browser: Browser):
    browser.on_set_rating(args.book_id, args.rating)
    rating = browser.rating_of(args.book_id)
    if rating is None:
        print(f"Rating cleared for book {args.book_id}")
    else:
        print(f"You rated book {args.book_id} {rating} star{'s' if rating > 1 else ''}")


def show_genres(args, browser: Browser):
    print("Genres:")
    for genre in browser.catalog.genres():
        print(f"  {genre}")
    print("Representation:")
    for rep in browser.catalog.representations():
        print(f"  {rep}")


COMMANDS = {
    "list": list_books,
    "show": show_book,
    "read": toggle_read,
    "rate": rate_book,
    "stats": lambda args, browser: display_stats(browser.view().stats),
    "genres": show_genres,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Book Tracker - browse an LGBTQ+ reading list and track your progress",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Unread fantasy books, best rated first
  %(prog)s list --status unread --genre Fantasy --sort rating-high

  # Mark a book as read, then rate it
  %(prog)s read 3
  %(prog)s rate 3 5

  # Show statistics
  %(prog)s stats
        """
    )
    parser.add_argument("--catalog", help="Catalog file or URL (default: $BOOKTRACKER_CATALOG)")
    parser.add_argument("--storage", help="User data file (default: $BOOKTRACKER_STORAGE)")
    parser.add_argument("--async", dest="use_async", action="store_true", help="Load catalog with async client")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # List command
    list_parser = subparsers.add_parser("list", help="List books matching filters")
    list_parser.add_argument("--search", default="", help="Search title, author, description, representation")
    list_parser.add_argument("--status", choices=STATUS_FILTERS, default="all", help="Read status filter")
    list_parser.add_argument("--representation", default="all", help="Representation category")
    list_parser.add_argument("--genre", default="all", help="Genre")
    list_parser.add_argument("--sort", choices=SORT_KEYS, default="title", help="Sort order (default: title)")
    list_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")

    # Show command
    show_parser = subparsers.add_parser("show", help="Show book details")
    show_parser.add_argument("book_id", type=int)

    # Read command
    read_parser = subparsers.add_parser("read", help="Toggle read status")
    read_parser.add_argument("book_id", type=int)

    # Rate command
    rate_parser = subparsers.add_parser("rate", help="Rate a book (same rating again clears it)")
    rate_parser.add_argument("book_id", type=int)
    rate_parser.add_argument("rating", type=int, choices=range(1, 6))

    subparsers.add_parser("stats", help="Show reading statistics")
    subparsers.add_parser("genres", help="List genres and representation categories")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config()

    # Configure logging
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        browser, storage = open_browser(args, config)
    except LoadError as e:
        logger.error(f"❌ Error loading books: {e}")
        sys.exit(1)

    try:
        COMMANDS[args.command](args, browser)
    except UnknownBook as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\n⚠️  Interrupted by user")
        sys.exit(0)
    finally:
        storage.close()


if __name__ == "__main__":
    main()

import json
import os
from typing import List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from bookmarks.book import Book
from bookmarks.config import settings
from bookmarks.validators import LinkValidator

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOKMARKS_CLI_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()
    return mode if mode in OUTPUT_MODES else "plain"


def empty_message(total: int) -> str:
    if total == 0:
        return "No books yet. Start building your book collection by adding your first book."
    return "No books found. Try adjusting your search terms."


def print_list_result(books: List[Book], total: int) -> None:
    """Print books in the current output mode.

    ``total`` is the size of the unfiltered collection, used to pick the
    empty-state message.
    - plain: one line per book, ``id - title by author [badge]``
    - json: JSON array of stored records plus a ``kind`` field
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        payload = [dict(b.to_dict(), kind=LinkValidator.classify(b.link).value) for b in books]
        print(json.dumps(payload, ensure_ascii=False))
        return

    if not books:
        print(empty_message(total))
        return

    if mode == "rich":
        table = Table(title="📚 My Book Bookmarks", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Tags", style="green")
        table.add_column("Link", style="blue")
        table.add_column("Added", style="dim")
        for b in books:
            badge = LinkValidator.classify(b.link).badge
            table.add_row(b.id, escape(b.title), escape(b.author), escape(", ".join(b.tags)),
                          f"{badge}\n{escape(b.link)}", b.added_on())
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} by {b.author} [{LinkValidator.classify(b.link).badge}]")


def print_book_detail(book: Book) -> None:
    mode = get_output_mode()
    badge = LinkValidator.classify(book.link).badge

    if mode == "json":
        print(json.dumps(dict(book.to_dict(), kind=LinkValidator.classify(book.link).value), ensure_ascii=False))
        return

    lines = [
        ("Title", book.title),
        ("Author", book.author),
        ("Description", book.description),
        ("Tags", ", ".join(book.tags)),
        ("Link", f"{book.link} ({badge})"),
        ("Added", book.added_on()),
    ]
    # Description and tags only when present
    lines = [(label, value) for label, value in lines if value]

    if mode == "rich":
        content = "\n".join(f"[bold]{label}:[/] {escape(value)}" for label, value in lines)
        _console.print(Panel.fit(content, title=f"📖 {escape(book.title)}", border_style="cyan"))
    else:
        for label, value in lines:
            print(f"{label}: {value}")

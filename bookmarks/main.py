import logging
import sys
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from bookmarks.book import FormInput
from bookmarks.config import settings
from bookmarks.database import StorageError
from bookmarks.library import BookmarkLibrary
from bookmarks.notifications import ConsoleNotifier
from bookmarks.ui_helpers import print_book_detail, print_list_result, set_output_mode

APP_NAME = settings.app_name

console = Console()


# Singleton BookmarkLibrary shared by CLI commands and the menu
class LibraryManager:
    _instance: Optional[BookmarkLibrary] = None

    @classmethod
    def get_instance(cls) -> Optional[BookmarkLibrary]:
        """Get or create the BookmarkLibrary singleton."""
        if cls._instance is None:
            try:
                cls._instance = BookmarkLibrary(notifier=ConsoleNotifier(console))
            except (StorageError, ValueError) as e:
                console.print(f"[bold red]Error starting bookmarks: {escape(str(e))}[/]")
                cls._instance = None
        return cls._instance

    @classmethod
    def set_instance(cls, library: Optional[BookmarkLibrary]) -> None:
        cls._instance = library


def _require_library() -> BookmarkLibrary:
    lib = LibraryManager.get_instance()
    if not lib:
        print("Bookmarks are not available")
        raise typer.Exit(code=1)
    return lib


# --- Typer CLI ---
app = typer.Typer(help="Book bookmarks CLI")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING))
    if output:
        set_output_mode(output)


@app.command("list")
def cli_list(search: str = typer.Option("", "--search", "-s", help="Filter by title, author or tag")):
    """List bookmarked books, newest first."""
    lib = _require_library()
    lib.set_search_term(search)
    print_list_result(lib.visible_books(), total=len(lib.books))


@app.command("add")
def cli_add(
    title: str = typer.Option("", "--title", "-t", help="Book title (required)"),
    author: str = typer.Option("", "--author", "-a", help="Author name (required)"),
    link: str = typer.Option("", "--link", "-l", help="Web URL or local file path (required)"),
    description: str = typer.Option("", "--description", "-d", help="Short description or your thoughts"),
    tags: str = typer.Option("", "--tags", help="Comma separated tags, e.g. 'fiction, sci-fi'"),
):
    """Add a book to your bookmarks."""
    lib = _require_library()
    form = FormInput(title=title, author=author, description=description, link=link, tags=tags)
    try:
        book = lib.add(form)
    except StorageError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    if book is None:
        raise typer.Exit(code=1)


@app.command("remove")
def cli_remove(book_id: str = typer.Argument(..., help="Id of the book to remove")):
    """Remove a book by id."""
    lib = _require_library()
    try:
        lib.delete(book_id)
    except StorageError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)


@app.command("show")
def cli_show(book_id: str = typer.Argument(..., help="Id of the book to show")):
    """Show one book with all its details."""
    lib = _require_library()
    book = lib.find_book(book_id)
    if not book:
        print(f"Book with id {book_id} not found.")
        raise typer.Exit(code=1)
    print_book_detail(book)


@app.command("open")
def cli_open(book_id: str = typer.Argument(..., help="Id of the book to open")):
    """Open a book: web links in the browser, local paths are copied to the clipboard."""
    lib = _require_library()
    book = lib.find_book(book_id)
    if not book:
        print(f"Book with id {book_id} not found.")
        raise typer.Exit(code=1)
    lib.open_book(book.link, book.title)


# --- Interactive menu ---
def list_all_books(lib: BookmarkLibrary) -> None:
    books = lib.visible_books()
    if not books:
        console.print(f"[yellow]{'No books yet' if not lib.books else 'No books found'}.[/]")
        return

    table = Table(title="📚 My Book Bookmarks", show_lines=True, header_style="bold cyan")
    table.add_column("ID", style="magenta", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Author", style="white")
    table.add_column("Tags", style="green")
    table.add_column("Link", style="blue")

    for book in books:
        badge = lib.classify_link(book.link).badge
        table.add_row(book.id, escape(book.title), escape(book.author), escape(", ".join(book.tags)), badge)

    console.print(table)
    if lib.search_term:
        console.print(f"[dim]🔎 Filter: '{escape(lib.search_term)}' - {len(books)} of {len(lib.books)} books[/]")
    else:
        console.print(f"[dim]📊 {len(books)} books[/]")


def _ask(label: str, current: str) -> str:
    return Prompt.ask(label, default=current, show_default=bool(current))


def add(lib: BookmarkLibrary) -> None:
    """Collect the add-book form and submit it."""
    lib.open_dialog()
    lib.form.title = _ask("Title *", lib.form.title)
    lib.form.author = _ask("Author *", lib.form.author)
    lib.form.description = _ask("Description", lib.form.description)
    lib.form.link = _ask("Book link * (https://example.com/book.pdf or C:\\Books\\mybook.pdf)", lib.form.link)
    lib.form.tags = _ask("Tags (comma separated)", lib.form.tags)
    if lib.add() is None and not Confirm.ask("Keep the entered values for another try?", default=True):
        lib.form = FormInput()
        lib.cancel_dialog()


def remove(lib: BookmarkLibrary) -> None:
    book_id = Prompt.ask("🔍 Id of the book to remove")
    book = lib.find_book(book_id)
    if book and not Confirm.ask(f"🗑️ Remove \"{escape(book.title)}\"?", default=False):
        console.print("[blue]🚫 Removal cancelled.[/]")
        return
    lib.delete(book_id)


def search(lib: BookmarkLibrary) -> None:
    lib.set_search_term(Prompt.ask("Search books by title, author, or tags", default=""))
    list_all_books(lib)


def open_book(lib: BookmarkLibrary) -> None:
    book_id = Prompt.ask("📖 Id of the book to open")
    book = lib.find_book(book_id)
    if not book:
        console.print(f"[yellow]⚠️ No book with id [bold]{escape(book_id)}[/].[/]")
        return
    lib.open_book(book.link, book.title)


def run_menu() -> None:
    """Simple interactive menu for the bookmarks CLI."""
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING))
    set_output_mode("rich")
    lib = LibraryManager.get_instance()
    if not lib:
        return

    def render_menu() -> None:
        menu_items = [
            ("1", "List books", "📚"),
            ("2", "Add book", "➕"),
            ("3", "Remove book", "🗑️"),
            ("4", "Search books", "🔎"),
            ("5", "Open book", "📖"),
            ("0", "Quit", "🚪"),
        ]

        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in menu_items:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        console.print(Panel(table, title=APP_NAME, border_style="cyan", box=box.HEAVY, padding=(1, 2)))

    actions = {"1": list_all_books, "2": add, "3": remove, "4": search, "5": open_book}
    while True:
        render_menu()
        choice = Prompt.ask("Choose an option", choices=["1", "2", "3", "4", "5", "0"], default="1").strip()
        if choice == "0":
            console.print("[green]Goodbye![/]")
            break
        try:
            actions[choice](lib)
        except StorageError as e:
            console.print(f"[bold red]Could not save bookmarks:[/] {escape(str(e))}")
        print()


def run() -> None:
    if len(sys.argv) > 1:
        app()
    else:
        run_menu()


if __name__ == "__main__":
    run()

import logging
import time
from datetime import datetime, timezone
from typing import List, Optional

from bookmarks.book import Book, FormInput
from bookmarks.config import settings
from bookmarks.database import KeyValueStore, StorageError, get_store
from bookmarks.notifications import DESTRUCTIVE, Notification, NotificationSink, RecordingNotifier
from bookmarks.opener import Opener, SystemOpener
from bookmarks.validators import LinkKind, LinkValidator, TagParser

logger = logging.getLogger(__name__)


class BookmarkLibrary:
    """Owns the bookmark collection and keeps it in sync with the store."""

    def __init__(self, store: Optional[KeyValueStore] = None, notifier: Optional[NotificationSink] = None,
                 opener: Optional[Opener] = None, local_notice_ms: Optional[int] = None) -> None:
        self.store = store if store is not None else get_store()
        self.notifier = notifier if notifier is not None else RecordingNotifier()
        self.opener = opener if opener is not None else SystemOpener()
        self.local_notice_ms = local_notice_ms if local_notice_ms is not None else settings.local_notice_ms

        self.books: List[Book] = self._load_books()
        self.search_term: str = ""
        self.form = FormInput()
        self.dialog_open = False
        self._last_id = 0

    # ------------------------- Core operations ------------------------- #
    def add(self, form_input: Optional[FormInput] = None) -> Optional[Book]:
        """Add a book from form input (the controller's own form buffer by default).

        Returns the new Book, or None when title, author or link is empty.
        """
        form = form_input if form_input is not None else self.form
        missing = form.missing_required()
        if missing:
            logger.info("Rejected add, missing fields: %s", ", ".join(missing))
            self._notify("Missing Information",
                         "Please fill in at least the title, author, and link fields.",
                         variant=DESTRUCTIVE)
            return None

        book = Book(
            id=self._next_id(),
            title=form.title,
            author=form.author,
            description=form.description,
            link=form.link,
            tags=TagParser.parse(form.tags),
            date_added=self._now_iso(),
        )
        self._replace_books([book] + self.books)
        self.form = FormInput()
        self.dialog_open = False
        logger.info("Added book %s (%s)", book.id, book.title)
        self._notify("Book Added", f'"{book.title}" has been added to your bookmarks.')
        return book

    def delete(self, book_id: str) -> bool:
        """Remove the book with this id. Returns False if there was none."""
        book = self.find_book(book_id)
        if not book:
            self._notify("Book Not Found", f'No bookmark with id "{book_id}" exists.')
            return False

        self._replace_books([b for b in self.books if b.id != book_id])
        logger.info("Removed book %s (%s)", book.id, book.title)
        self._notify("Book Removed", f'"{book.title}" has been removed from your bookmarks.')
        return True

    def search(self, term: str) -> List[Book]:
        """Books whose title, author or any tag contains term, ignoring case."""
        needle = (term or "").lower()
        if not needle:
            return list(self.books)
        return [
            b for b in self.books
            if needle in b.title.lower()
            or needle in b.author.lower()
            or any(needle in tag.lower() for tag in b.tags)
        ]

    def find_book(self, book_id: str) -> Optional[Book]:
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    def list_books(self) -> List[Book]:
        return list(self.books)

    def visible_books(self) -> List[Book]:
        return self.search(self.search_term)

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""

    # ------------------------- Links ------------------------- #
    @staticmethod
    def classify_link(link: str) -> LinkKind:
        return LinkValidator.classify(link)

    def open_book(self, link: str, title: str) -> None:
        """Open a book's link: remote links in a browser tab, local paths via the clipboard.

        Never raises; failures end up as an error notification.
        """
        try:
            if LinkValidator.is_local(link):
                self._notify("Local File",
                             f"Copy this path and open it in your file manager: {link}",
                             duration=self.local_notice_ms)
                self._copy_path(link)
            else:
                logger.info("Opening %s for %s", link, title)
                self.opener.open_remote(link)
        except Exception:
            logger.exception("Could not open %s", link)
            self._notify("Error", "Unable to open the book link.", variant=DESTRUCTIVE)

    def _copy_path(self, link: str) -> None:
        try:
            copied = self.opener.write_clipboard(link)
        except Exception:
            logger.debug("Clipboard write failed for %s", link, exc_info=True)
            return
        if copied:
            self._notify("Path Copied", "File path has been copied to your clipboard.")

    # ------------------------- Dialog ------------------------- #
    def open_dialog(self) -> None:
        self.dialog_open = True

    def cancel_dialog(self) -> None:
        self.dialog_open = False

    # ------------------------- Persistence ------------------------- #
    def _load_books(self) -> List[Book]:
        """Read the stored collection; anything unreadable yields an empty one."""
        try:
            data = self.store.load()
        except StorageError as e:
            logger.warning("Ignoring unreadable bookmark data: %s", e)
            return []
        if data is None:
            return []
        try:
            return [Book.from_dict(item) for item in data]
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring malformed bookmark data: %r", e)
            return []

    def _replace_books(self, books: List[Book]) -> None:
        # A failed write leaves self.books unchanged
        self.store.save([b.to_dict() for b in books])
        self.books = books

    # ------------------------- Utilities ------------------------- #
    def _next_id(self) -> str:
        # Millisecond timestamps, bumped past anything already issued or stored
        candidate = int(time.time() * 1000)
        taken = {b.id for b in self.books}
        candidate = max(candidate, self._last_id + 1)
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    @staticmethod
    def _now_iso() -> str:
        now = datetime.now(timezone.utc)
        return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"

    def _notify(self, title: str, description: str, variant: str = "default",
                duration: Optional[int] = None) -> None:
        self.notifier.notify(Notification(title=title, description=description, variant=variant, duration=duration))

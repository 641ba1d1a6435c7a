import pytest

from bookmarks.database import SqliteStore
from bookmarks.library import BookmarkLibrary
from bookmarks.notifications import RecordingNotifier


class FakeOpener:
    """Records browser and clipboard requests instead of performing them."""

    def __init__(self, clipboard_ok=True, clipboard_error=None, open_error=None):
        self.opened = []
        self.copied = []
        self.clipboard_ok = clipboard_ok
        self.clipboard_error = clipboard_error
        self.open_error = open_error

    def open_remote(self, url):
        if self.open_error:
            raise self.open_error
        self.opened.append(url)

    def write_clipboard(self, text):
        if self.clipboard_error:
            raise self.clipboard_error
        self.copied.append(text)
        return self.clipboard_ok


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def opener():
    return FakeOpener()


@pytest.fixture
def db_file(tmp_path, request):
    # Each test gets its own database file
    return str(tmp_path / f"test_{request.node.name}.db")


@pytest.fixture
def lib(db_file, notifier, opener):
    return BookmarkLibrary(store=SqliteStore(db_file), notifier=notifier, opener=opener)


@pytest.fixture
def opener_factory():
    return FakeOpener

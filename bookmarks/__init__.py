"""Book Bookmarks - Core Application Package

This package contains the core application modules including:
- Bookmark management logic (library.py)
- CLI interface (main.py)
- Data models (book.py)
- Key-value storage layer (database.py)
- Notifications and the platform opener (notifications.py, opener.py)
"""

__version__ = "1.0.0"

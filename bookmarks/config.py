import os
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

_DATA_DIR = Path.home() / ".bookmarks"


@dataclass
class Settings:
    # Storage settings
    storage_backend: str = field(default_factory=lambda: os.getenv("BOOKMARKS_STORAGE", "sqlite").lower())
    db_file: str = field(default_factory=lambda: os.getenv("BOOKMARKS_DB_FILE", str(_DATA_DIR / "bookmarks.db")))
    json_file: str = field(default_factory=lambda: os.getenv("BOOKMARKS_JSON_FILE", str(_DATA_DIR / "bookmarks.json")))
    storage_key: str = field(default_factory=lambda: os.getenv("BOOKMARKS_STORAGE_KEY", "bookmarks"))

    # Notification settings
    local_notice_ms: int = field(default_factory=lambda: int(os.getenv("BOOKMARKS_LOCAL_NOTICE_MS", "10000")))

    # Application settings
    app_name: str = field(default_factory=lambda: os.getenv("APP_NAME", "Book Bookmarks"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())
    output_mode: str = field(default_factory=lambda: os.getenv("BOOKMARKS_CLI_OUTPUT", "plain").lower())


settings = Settings()

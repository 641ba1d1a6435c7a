import re
from enum import Enum
from typing import List


class LinkKind(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"

    @property
    def badge(self) -> str:
        return "Local File" if self is LinkKind.LOCAL else "Online"


# Drive letter, absolute, home-relative and dot-relative paths
_LOCAL_PREFIX = re.compile(r"^([a-zA-Z]:\\|/|~/|\./|\.\./)")
_REMOTE_SCHEMES = ("http://", "https://", "ftp://")


class LinkValidator:
    """Tells local file paths apart from remote URLs."""

    @staticmethod
    def classify(link: str) -> LinkKind:
        """Classify a link as LOCAL or REMOTE.

        Anything that does not start with one of the remote schemes is treated
        as a local path, so scheme-less input such as ``example.com/book`` is
        LOCAL. Scheme matching is case-sensitive.
        """
        if _LOCAL_PREFIX.match(link) or link.startswith("file://"):
            return LinkKind.LOCAL
        if not link.startswith(_REMOTE_SCHEMES):
            return LinkKind.LOCAL
        return LinkKind.REMOTE

    @staticmethod
    def is_local(link: str) -> bool:
        return LinkValidator.classify(link) is LinkKind.LOCAL


class TagParser:
    """Comma-separated tag input handling."""

    @staticmethod
    def parse(raw: str) -> List[str]:
        # Duplicates are kept, in input order
        if not raw:
            return []
        return [tag.strip() for tag in raw.split(",") if tag.strip()]

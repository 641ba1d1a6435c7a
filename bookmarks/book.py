from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


class Book:
    """A single bookmarked book."""

    def __init__(self, id: str, title: str, author: str, link: str, description: str = "",
                 tags: Optional[List[str]] = None, date_added: str = "") -> None:
        self.id = id
        self.title = title
        self.author = author
        self.description = description
        self.link = link
        self.tags = list(tags or [])
        self.date_added = date_added

    def __str__(self) -> str:
        return f"{self.title} by {self.author} ({self.link})"

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def added_on(self) -> str:
        """Local calendar date the book was added, or the raw value if it does not parse."""
        try:
            stamp = datetime.fromisoformat(self.date_added.replace("Z", "+00:00"))
        except ValueError:
            return self.date_added
        return stamp.astimezone().strftime("%x")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "description": self.description,
            "link": self.link,
            "tags": list(self.tags),
            "dateAdded": self.date_added,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # Older stores may hold tags as one comma-separated string
        tags = data.get("tags") or []
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        elif not isinstance(tags, list):
            raise TypeError(f"tags must be a list, got {type(tags).__name__}")
        if not all(isinstance(t, str) for t in tags):
            raise TypeError("tags must all be strings")

        for name in ("title", "author", "link"):
            if not isinstance(data[name], str):
                raise TypeError(f"{name} must be a string, got {type(data[name]).__name__}")
        description = data.get("description") or ""
        date_added = data.get("dateAdded") or ""
        if not isinstance(description, str) or not isinstance(date_added, str):
            raise TypeError("description and dateAdded must be strings")

        return Book(
            id=str(data["id"]),
            title=data["title"],
            author=data["author"],
            link=data["link"],
            description=description,
            tags=tags,
            date_added=date_added,
        )


@dataclass
class FormInput:
    """Text typed into the add-book form, before any parsing."""

    title: str = ""
    author: str = ""
    description: str = ""
    link: str = ""
    tags: str = ""

    def missing_required(self) -> List[str]:
        return [name for name in ("title", "author", "link") if not getattr(self, name)]

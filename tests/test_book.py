import json

import pytest

from bookmarks.book import Book, FormInput


def test_to_dict_uses_stored_field_names():
    book = Book("1", "Dune", "Frank Herbert", "https://example.com/dune", "Spice", ["sci-fi"], "2024-01-02T03:04:05.006Z")
    assert book.to_dict() == {
        "id": "1",
        "title": "Dune",
        "author": "Frank Herbert",
        "description": "Spice",
        "link": "https://example.com/dune",
        "tags": ["sci-fi"],
        "dateAdded": "2024-01-02T03:04:05.006Z",
    }


def test_round_trip_through_json():
    books = [
        Book("2", "B", "Author", "C:\\b.pdf", tags=["x", "x"], date_added="2024-01-02T00:00:00.000Z"),
        Book("1", "A", "Author", "https://example.com/a", "desc", [], "2024-01-01T00:00:00.000Z"),
    ]
    payload = json.dumps([b.to_dict() for b in books])
    assert [Book.from_dict(d) for d in json.loads(payload)] == books


def test_from_dict_fills_optional_fields():
    book = Book.from_dict({"id": 5, "title": "T", "author": "A", "link": "/t"})
    assert book.id == "5"
    assert book.description == ""
    assert book.tags == []
    assert book.date_added == ""


def test_from_dict_accepts_comma_separated_tags():
    book = Book.from_dict({"id": "1", "title": "T", "author": "A", "link": "/t", "tags": "a, b,,"})
    assert book.tags == ["a", "b"]


def test_from_dict_rejects_missing_required_key():
    with pytest.raises(KeyError):
        Book.from_dict({"id": "1", "title": "T", "link": "/t"})


def test_from_dict_rejects_bad_tags():
    with pytest.raises(TypeError):
        Book.from_dict({"id": "1", "title": "T", "author": "A", "link": "/t", "tags": 3})


def test_added_on_falls_back_to_raw_value():
    assert Book("1", "T", "A", "/t", date_added="yesterday").added_on() == "yesterday"
    assert Book("1", "T", "A", "/t", date_added="2024-01-02T03:04:05.006Z").added_on() != ""


def test_form_missing_required():
    assert FormInput().missing_required() == ["title", "author", "link"]
    assert FormInput(title="T", author="A", link="/t").missing_required() == []
    assert FormInput(title="T", link=" ").missing_required() == ["author"]


def test_str():
    assert str(Book("1", "Dune", "Frank Herbert", "/books/dune.pdf")) == "Dune by Frank Herbert (/books/dune.pdf)"


@pytest.mark.parametrize("field,value", [
    ("title", None),
    ("author", 7),
    ("link", ["/x"]),
    ("description", 3),
    ("dateAdded", 1700000000000),
    ("tags", ["ok", None]),
])
def test_from_dict_rejects_non_string_fields(field, value):
    data = {"id": "1", "title": "T", "author": "A", "link": "/t", field: value}
    with pytest.raises(TypeError):
        Book.from_dict(data)

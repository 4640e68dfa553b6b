from __future__ import annotations


class Book:
    """Represents a catalog title and its physical copies."""

    def __init__(self, title: str, authors: list[str], release_year: int, isbn: str,
                 total_copies: int) -> None:
        self.title = title
        self._authors = list(authors or [])
        self.release_year = release_year
        self._isbn = isbn
        self.total_copies = total_copies
        # No loans exist when a book is created
        self.available_copies = total_copies

    @property
    def isbn(self) -> str:
        return self._isbn

    @property
    def authors(self) -> list[str]:
        return list(self._authors)

    @authors.setter
    def authors(self, authors: list[str]) -> None:
        self._authors = list(authors or [])

    def has_available_copies(self) -> bool:
        return self.available_copies > 0

    def decrement_available_copies(self) -> None:
        if self.available_copies > 0:
            self.available_copies -= 1

    def increment_available_copies(self) -> None:
        if self.available_copies < self.total_copies:
            self.available_copies += 1

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if other is None or type(other) is not type(self):
            return False
        return self._isbn == other._isbn

    def __hash__(self) -> int:
        return hash(self._isbn)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return (
            f"Title: {self.title}\n"
            f"Authors: {', '.join(self._authors)}\n"
            f"Release Year: {self.release_year}\n"
            f"ISBN: {self._isbn}\n"
            f"Total Copies: {self.total_copies}\n"
            f"Available Copies: {self.available_copies}\n"
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "authors": self.authors,
            "release_year": self.release_year,
            "isbn": self._isbn,
            "total_copies": self.total_copies,
            "available_copies": self.available_copies,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        authors = data.get("authors") or []
        if isinstance(authors, str):
            authors = [a.strip() for a in authors.split(",") if a.strip()]

        book = Book(
            title=data["title"],
            authors=authors,
            release_year=int(data["release_year"]),
            isbn=data["isbn"],
            total_copies=int(data["total_copies"]),
        )
        if data.get("available_copies") is not None:
            book.available_copies = int(data["available_copies"])
        return book

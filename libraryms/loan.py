from __future__ import annotations

from datetime import date
from typing import Optional

from libraryms.book import Book
from libraryms.user import User


class Loan:
    """A copy of a book lent to a user until a due date."""

    def __init__(self, loan_id: int, user: User, book: Book, loan_date: date,
                 due_date: Optional[date], status: bool = True) -> None:
        self._loan_id = loan_id
        self.user = user
        self.book = book
        self.loan_date = loan_date
        self.due_date = due_date
        # None until the book comes back
        self.return_date: Optional[date] = None
        self.status = status

    @property
    def loan_id(self) -> int:
        return self._loan_id

    def is_active(self) -> bool:
        return bool(self.status)

    def is_returned(self) -> bool:
        return not self.status and self.return_date is not None

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if other is None or type(other) is not type(self):
            return False
        return self._loan_id == other._loan_id

    def __hash__(self) -> int:
        return hash(self._loan_id)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        returned = self.return_date.isoformat() if self.return_date else "Not returned"
        return (
            f"Loan ID: {self._loan_id}\n"
            f"User: {self.user.code}\n"
            f"Book: {self.book.isbn}\n"
            f"Loan Date: {self.loan_date}\n"
            f"Due Date: {self.due_date}\n"
            f"Return Date: {returned}\n"
        )

    def to_dict(self) -> dict:
        return {
            "loan_id": self._loan_id,
            "user_code": self.user.code,
            "isbn": self.book.isbn,
            "title": self.book.title,
            "loan_date": self.loan_date.isoformat() if self.loan_date else None,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "return_date": self.return_date.isoformat() if self.return_date else None,
            "active": self.is_active(),
        }

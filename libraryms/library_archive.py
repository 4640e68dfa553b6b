from __future__ import annotations

from datetime import date
from typing import List, Optional

from libraryms.book import Book
from libraryms.loan import Loan
from libraryms.user import User


class LibraryArchive:
    """The whole library state: catalog, users and loans.

    This is the single value written to the archive file. Getters hand out
    copies of the lists; mutations go through the add/remove methods.
    """

    def __init__(self) -> None:
        self._books: List[Book] = []
        self._users: List[User] = []
        self._loans: List[Loan] = []
        self._next_loan_id = 1

    # ------------------------- Books ------------------------- #
    @property
    def books(self) -> List[Book]:
        return list(self._books)

    def add_book(self, book: Book) -> None:
        self._books.append(book)

    def remove_book(self, book: Book) -> None:
        if book in self._books:
            self._books.remove(book)

    def find_book_by_isbn(self, isbn: Optional[str]) -> Optional[Book]:
        if isbn is None:
            return None
        for book in self._books:
            if book.isbn == isbn:
                return book
        return None

    # ------------------------- Users ------------------------- #
    @property
    def users(self) -> List[User]:
        return list(self._users)

    def add_user(self, user: User) -> None:
        self._users.append(user)

    def remove_user(self, user: User) -> None:
        if user in self._users:
            self._users.remove(user)

    def find_user_by_code(self, code: Optional[str]) -> Optional[User]:
        if code is None:
            return None
        for user in self._users:
            if user.code == code:
                return user
        return None

    # ------------------------- Loans ------------------------- #
    @property
    def loans(self) -> List[Loan]:
        return list(self._loans)

    @property
    def next_loan_id(self) -> int:
        return self._next_loan_id

    def generate_loan_id(self) -> int:
        loan_id = self._next_loan_id
        self._next_loan_id += 1
        return loan_id

    def add_loan(self, loan: Loan) -> None:
        self._loans.append(loan)

    def register_loan(self, user: User, book: Book, due_date: date) -> Loan:
        """Create a loan dated today with a fresh id and add it."""
        loan = Loan(self.generate_loan_id(), user, book, date.today(), due_date, True)
        self._loans.append(loan)
        return loan

    def remove_loan(self, loan: Loan) -> None:
        if loan in self._loans:
            self._loans.remove(loan)

    def find_loan_by_id(self, loan_id: int) -> Optional[Loan]:
        for loan in self._loans:
            if loan.loan_id == loan_id:
                return loan
        return None

    def find_loans_by_user(self, user: User) -> List[Loan]:
        return [loan for loan in self._loans if loan.user == user]

    def find_loans_by_book(self, book: Book) -> List[Loan]:
        return [loan for loan in self._loans if loan.book == book]

    def get_active_loans(self) -> List[Loan]:
        return [loan for loan in self._loans if loan.is_active()]

    def get_returned_loans(self) -> List[Loan]:
        return [loan for loan in self._loans if loan.is_returned()]

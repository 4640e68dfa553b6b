import logging
from datetime import date
from typing import List, Optional

from libraryms.book import Book
from libraryms.config import settings
from libraryms.exceptions import (
    ArchivePersistenceError,
    MandatoryFieldError,
    MaxLoansReachedError,
    NoAvailableCopiesError,
)
from libraryms.library_archive import LibraryArchive
from libraryms.loan import Loan
from libraryms.persistence.errors import StorageError
from libraryms.services.library_archive_service import LibraryArchiveService
from libraryms.user import User

logger = logging.getLogger(__name__)


def _due_date_key(loan: Loan):
    # Loans without a due date go last
    return (loan.due_date is None, loan.due_date or date.min)


class LoanService:
    """Lending and returning books, plus loan status queries."""

    def __init__(self, library_archive_service: LibraryArchiveService,
                 max_active_loans: Optional[int] = None) -> None:
        if library_archive_service is None:
            raise ValueError("library_archive_service cannot be None")
        self.library_archive_service = library_archive_service
        self.max_active_loans = max_active_loans if max_active_loans is not None else settings.max_active_loans

    def _archive(self) -> LibraryArchive:
        return self.library_archive_service.get_library_archive()

    # ------------------------- Lending ------------------------- #
    def register_loan(self, user: Optional[User], book: Optional[Book], due_date: Optional[date]) -> Loan:
        """Lend one copy of ``book`` to ``user`` until ``due_date``.

        Checks, in order: all arguments present, a copy is available, the user
        is below the active loan limit, the due date is not in the past.
        When the archive cannot be saved the loan is undone in memory (the
        loan id stays consumed) and ArchivePersistenceError is raised.
        """
        if user is None:
            raise MandatoryFieldError("User is not valid.")
        if book is None:
            raise MandatoryFieldError("Book is not valid.")
        if due_date is None:
            raise MandatoryFieldError("Due date is required.")

        if not book.has_available_copies():
            raise NoAvailableCopiesError("There are no available copies of this book.")

        active_loans = sum(1 for loan in self._archive().find_loans_by_user(user) if loan.is_active())
        if active_loans >= self.max_active_loans:
            raise MaxLoansReachedError(
                f"The user has already reached the limit of {self.max_active_loans} active loans."
            )

        if due_date < date.today():
            raise MandatoryFieldError("Due date cannot be earlier than today.")

        loan = self._archive().register_loan(user, book, due_date)
        book.decrement_available_copies()
        user.add_loan(loan)
        try:
            self._persist_changes()
        except ArchivePersistenceError:
            user.remove_loan(loan)
            book.increment_available_copies()
            self._archive().remove_loan(loan)
            raise
        logger.info(f"Loan {loan.loan_id} registered: {book.isbn} -> {user.code}")
        return loan

    def return_loan(self, loan: Optional[Loan]) -> None:
        if loan is None:
            raise MandatoryFieldError("Loan cannot be None.")
        if not loan.is_active():
            raise MandatoryFieldError("The loan is already closed.")

        loan.return_date = date.today()
        loan.status = False
        if loan.book is not None:
            loan.book.increment_available_copies()
        if loan.user is not None:
            loan.user.remove_loan(loan)
        self._persist_changes()
        logger.info(f"Loan {loan.loan_id} returned")

    def find_loan(self, loan_id: int) -> Optional[Loan]:
        return self._archive().find_loan_by_id(loan_id)

    # ------------------------- Status ------------------------- #
    def get_active_loans(self) -> List[Loan]:
        active = [loan for loan in self._archive().loans if loan is not None and loan.is_active()]
        return sorted(active, key=_due_date_key)

    def is_late(self, loan: Optional[Loan]) -> bool:
        if loan is None or not loan.is_active() or loan.due_date is None:
            return False
        return loan.due_date < date.today()

    def get_loans_sorted_by_due_date(self) -> List[Loan]:
        return sorted(self._archive().loans, key=_due_date_key)

    def _persist_changes(self) -> None:
        try:
            self.library_archive_service.save_archive(self._archive())
        except StorageError as e:
            raise ArchivePersistenceError("Error while saving loans.") from e

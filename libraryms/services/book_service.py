import logging
from datetime import date
from typing import List, Optional

from libraryms.book import Book
from libraryms.exceptions import (
    ArchivePersistenceError,
    InvalidIsbnError,
    MandatoryFieldError,
    UserHasActiveLoanError,
)
from libraryms.library_archive import LibraryArchive
from libraryms.persistence.errors import StorageError
from libraryms.services.library_archive_service import LibraryArchiveService
from libraryms.validators import ISBNValidator, TextValidator

logger = logging.getLogger(__name__)


def _title_key(book: Book) -> str:
    return (book.title or "").lower()


def _first_author_key(book: Book) -> str:
    authors = book.authors
    return authors[0].lower() if authors and authors[0] else ""


class BookService:
    """Catalog operations: validation, sorting, search and persistence of books."""

    def __init__(self, library_archive_service: LibraryArchiveService) -> None:
        if library_archive_service is None:
            raise ValueError("library_archive_service cannot be None")
        self.library_archive_service = library_archive_service

    def _archive(self) -> LibraryArchive:
        return self.library_archive_service.get_library_archive()

    # ------------------------- Core operations ------------------------- #
    def add_book(self, book: Book) -> None:
        """Add a new book. ISBN must be well formed and not already catalogued.

        If the archive cannot be saved the book is taken out again and
        ArchivePersistenceError is raised.
        """
        self._validate_mandatory_fields(book)
        self._validate_isbn_format(book.isbn)
        if self._archive().find_book_by_isbn(book.isbn) is not None:
            raise InvalidIsbnError(f"A book with ISBN {book.isbn} is already in the catalog.")

        self._archive().add_book(book)
        try:
            self._persist_changes()
        except ArchivePersistenceError:
            self._archive().remove_book(book)
            raise
        logger.info(f"Book added: {book.isbn}")

    def update_book(self, book: Book) -> None:
        """Persist changes made in place to a catalogued book."""
        self._validate_mandatory_fields(book)
        self._validate_isbn_format(book.isbn)
        self._persist_changes()

    def remove_book(self, book: Book) -> None:
        if book is None:
            raise ValueError("Book cannot be None.")
        for loan in self._archive().find_loans_by_book(book):
            if loan is not None and loan.is_active():
                raise UserHasActiveLoanError("Cannot remove the book: it has active loans.")

        self._archive().remove_book(book)
        self._persist_changes()
        logger.info(f"Book removed: {book.isbn}")

    def find_book(self, isbn: Optional[str]) -> Optional[Book]:
        return self._archive().find_book_by_isbn(isbn)

    # ------------------------- Listing and search ------------------------- #
    def get_books_sorted_by_title(self) -> List[Book]:
        return sorted(self._archive().books, key=_title_key)

    def get_books_sorted_by_author(self) -> List[Book]:
        return sorted(self._archive().books, key=_first_author_key)

    def get_books_sorted_by_year(self) -> List[Book]:
        return sorted(self._archive().books, key=lambda b: b.release_year)

    def search_books(self, query: Optional[str]) -> List[Book]:
        """Case-insensitive search on title, authors and ISBN.

        A blank query returns the whole catalog sorted by title.
        """
        if query is None:
            raise ValueError("Query cannot be None.")
        normalized = query.strip().lower()
        if not normalized:
            return self.get_books_sorted_by_title()

        result = []
        for book in self._archive().books:
            if book is None:
                continue
            if (TextValidator.contains_ignore_case(book.title, normalized)
                    or any(TextValidator.contains_ignore_case(a, normalized) for a in book.authors)
                    or TextValidator.contains_ignore_case(book.isbn, normalized)):
                result.append(book)
        return sorted(result, key=_title_key)

    # ------------------------- Validation ------------------------- #
    @staticmethod
    def _validate_mandatory_fields(book: Optional[Book]) -> None:
        if book is None:
            raise MandatoryFieldError("Book cannot be None.")
        if TextValidator.is_blank(book.title):
            raise MandatoryFieldError("Title is required.")
        if not book.authors:
            raise MandatoryFieldError("At least one author is required.")
        if book.release_year is None or book.release_year <= 0 or book.release_year > date.today().year:
            raise MandatoryFieldError("Release year is not valid.")
        if TextValidator.is_blank(book.isbn):
            raise MandatoryFieldError("ISBN is required.")
        if book.total_copies is None or book.total_copies <= 0:
            raise MandatoryFieldError("Total copies must be greater than zero.")
        if book.available_copies < 0 or book.available_copies > book.total_copies:
            raise MandatoryFieldError("Available copies must be between 0 and the total number of copies.")

    @staticmethod
    def _validate_isbn_format(isbn: str) -> None:
        if not ISBNValidator.has_only_digits(isbn):
            raise InvalidIsbnError("ISBN must contain only digits (hyphens and spaces are allowed).")
        if not ISBNValidator.has_valid_length(isbn):
            raise InvalidIsbnError("ISBN must contain 10 or 13 digits.")

    def _persist_changes(self) -> None:
        try:
            self.library_archive_service.save_archive(self._archive())
        except StorageError as e:
            raise ArchivePersistenceError("Error while saving the book archive.") from e

"""Domain errors raised by the business services."""


class LibraryError(Exception):
    pass


class MandatoryFieldError(LibraryError, ValueError):
    """A required field is missing or holds an unacceptable value."""


class InvalidIsbnError(LibraryError, ValueError):
    pass


class InvalidEmailError(LibraryError, ValueError):
    pass


class NoAvailableCopiesError(LibraryError):
    pass


class MaxLoansReachedError(LibraryError):
    pass


class UserHasActiveLoanError(LibraryError):
    """The book or user cannot be removed while a loan on it is open."""


class ArchivePersistenceError(LibraryError, RuntimeError):
    """Saving the archive failed after an in-memory change."""

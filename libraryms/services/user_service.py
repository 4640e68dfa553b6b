import logging
from typing import List, Optional

from libraryms.config import settings
from libraryms.exceptions import (
    ArchivePersistenceError,
    InvalidEmailError,
    MandatoryFieldError,
    UserHasActiveLoanError,
)
from libraryms.library_archive import LibraryArchive
from libraryms.persistence.errors import StorageError
from libraryms.services.library_archive_service import LibraryArchiveService
from libraryms.user import User
from libraryms.validators import EmailValidator, TextValidator

logger = logging.getLogger(__name__)


def _last_name_key(user: User) -> str:
    return (user.last_name or "").lower()


class UserService:
    """Registration, update, removal and search of library users."""

    def __init__(self, library_archive_service: LibraryArchiveService,
                 email_domain: Optional[str] = None) -> None:
        if library_archive_service is None:
            raise ValueError("library_archive_service cannot be None")
        self.library_archive_service = library_archive_service
        self.email_domain = email_domain or settings.allowed_email_domain

    def _archive(self) -> LibraryArchive:
        return self.library_archive_service.get_library_archive()

    def add_user(self, user: User) -> None:
        self._validate_mandatory_fields(user)
        self._validate_email(user.email)
        if self._archive().find_user_by_code(user.code) is not None:
            raise MandatoryFieldError("A user with the same code is already registered.")

        self._archive().add_user(user)
        try:
            self._persist_changes()
        except ArchivePersistenceError:
            self._archive().remove_user(user)
            raise
        logger.info(f"User added: {user.code}")

    def update_user(self, user: User) -> None:
        self._validate_mandatory_fields(user)
        self._validate_email(user.email)
        existing = self._archive().find_user_by_code(user.code)
        if existing is not None and existing is not user:
            raise MandatoryFieldError("Another user with the same code already exists.")
        # The instance already lives in the archive, saving is enough
        self._persist_changes()

    def remove_user(self, user: User) -> None:
        if user is None:
            raise ValueError("User cannot be None.")
        for loan in self._archive().find_loans_by_user(user):
            if loan is not None and loan.is_active():
                raise UserHasActiveLoanError("Cannot remove the user: there are active loans.")

        self._archive().remove_user(user)
        self._persist_changes()
        logger.info(f"User removed: {user.code}")

    def find_user(self, code: Optional[str]) -> Optional[User]:
        return self._archive().find_user_by_code(code)

    def get_users_sorted_by_last_name(self) -> List[User]:
        return sorted(self._archive().users, key=_last_name_key)

    def search_users(self, query: Optional[str]) -> List[User]:
        """Match last name, first name, code or email, ignoring case."""
        if query is None:
            raise ValueError("Query cannot be None.")
        q = query.strip().lower()
        if not q:
            return self.get_users_sorted_by_last_name()

        result = [
            u for u in self._archive().users
            if u is not None and (
                TextValidator.contains_ignore_case(u.last_name, q)
                or TextValidator.contains_ignore_case(u.first_name, q)
                or TextValidator.contains_ignore_case(u.code, q)
                or TextValidator.contains_ignore_case(u.email, q)
            )
        ]
        return sorted(result, key=_last_name_key)

    @staticmethod
    def _validate_mandatory_fields(user: Optional[User]) -> None:
        if user is None:
            raise MandatoryFieldError("User cannot be None.")
        if TextValidator.is_blank(user.first_name):
            raise MandatoryFieldError("First name is required.")
        if TextValidator.is_blank(user.last_name):
            raise MandatoryFieldError("Last name is required.")
        if TextValidator.is_blank(user.code):
            raise MandatoryFieldError("User code is required.")
        if TextValidator.is_blank(user.email):
            raise MandatoryFieldError("Email is required.")

    def _validate_email(self, email: Optional[str]) -> None:
        if TextValidator.is_blank(email):
            raise InvalidEmailError("Email cannot be empty.")
        if not EmailValidator.is_valid_email(email, self.email_domain):
            raise InvalidEmailError(
                f"Invalid email. Only addresses ending with '{self.email_domain}' are accepted."
            )

    def _persist_changes(self) -> None:
        try:
            self.library_archive_service.save_archive(self._archive())
        except StorageError as e:
            raise ArchivePersistenceError("Error while saving the user archive.") from e

import re
from typing import Optional

class ISBNValidator:
    """Lenient ISBN format check used when cataloguing books.
    Hyphens and spaces are ignored; what remains must be 10 or 13 digits.
    No checksum is verified.
    """

    @staticmethod
    def normalize_isbn(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return raw.replace("-", "").replace(" ", "")

    @staticmethod
    def has_only_digits(isbn: Optional[str]) -> bool:
        s = ISBNValidator.normalize_isbn(isbn)
        return bool(s) and s.isdigit()

    @staticmethod
    def has_valid_length(isbn: Optional[str]) -> bool:
        return len(ISBNValidator.normalize_isbn(isbn)) in (10, 13)

    @staticmethod
    def is_valid_isbn(isbn: Optional[str]) -> bool:
        return ISBNValidator.has_only_digits(isbn) and ISBNValidator.has_valid_length(isbn)

class EmailValidator:
    """Institutional e-mail check: local part @ (subdomains.) allowed domain."""

    @staticmethod
    def pattern_for(domain: str) -> "re.Pattern[str]":
        return re.compile(r"^[A-Za-z0-9._%+-]+@([A-Za-z0-9-]+\.)*" + re.escape(domain) + r"$")

    @staticmethod
    def is_valid_email(email: Optional[str], domain: str) -> bool:
        if email is None or not email.strip():
            return False
        return EmailValidator.pattern_for(domain).match(email.strip()) is not None

class TextValidator:
    """Very basic text checks shared by the services."""

    @staticmethod
    def is_blank(text: Optional[str]) -> bool:
        return text is None or not text.strip()

    @staticmethod
    def contains_ignore_case(field: Optional[str], query: str) -> bool:
        return field is not None and query in field.lower()

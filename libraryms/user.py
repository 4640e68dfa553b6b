from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from libraryms.loan import Loan


class User:
    """A registered library user, identified by their student code."""

    def __init__(self, first_name: str, last_name: str, email: str, code: str) -> None:
        self.first_name = first_name
        self.last_name = last_name
        self.email = email
        self._code = code
        self._active_loans: list[Loan] = []

    @property
    def code(self) -> str:
        return self._code

    @property
    def active_loans(self) -> list[Loan]:
        return list(self._active_loans)

    @active_loans.setter
    def active_loans(self, loans: list[Loan] | None) -> None:
        self._active_loans = list(loans) if loans is not None else []

    def add_loan(self, loan: Loan) -> None:
        self._active_loans.append(loan)

    def remove_loan(self, loan: Loan) -> None:
        if loan in self._active_loans:
            self._active_loans.remove(loan)

    def has_active_loans(self) -> bool:
        return bool(self._active_loans)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if other is None or type(other) is not type(self):
            return False
        return self._code == other._code

    def __hash__(self) -> int:
        return hash(self._code)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return (
            f"Code: {self._code}\n"
            f"First Name: {self.first_name}\n"
            f"Last Name: {self.last_name}\n"
            f"Email: {self.email}\n"
            f"Active Loans: {len(self._active_loans)}\n"
        )

    def to_dict(self) -> dict:
        return {
            "code": self._code,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "active_loans": len(self._active_loans),
        }

import logging
from datetime import date, timedelta
from functools import wraps
from typing import List, Optional

import typer

from libraryms.book import Book
from libraryms.config import settings
from libraryms.exceptions import LibraryError
from libraryms.persistence.errors import StorageError
from libraryms.services.service_locator import ServiceLocator
from libraryms.ui_helpers import (
    print_book_list,
    print_loan_list,
    print_stats_result,
    print_user_list,
    set_output_mode,
)
from libraryms.user import User

APP_NAME = settings.app_name

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.WARNING))
logger = logging.getLogger(__name__)


# Turn domain and storage failures into a message and a non-zero exit code
def handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except StorageError as e:
            print(f"Storage error: {e}")
            raise typer.Exit(code=1)
        except (LibraryError, ValueError) as e:
            print(f"Error: {e}")
            raise typer.Exit(code=1)
    return wrapper


# --- Typer CLI Application ---
app = typer.Typer(help=APP_NAME)

@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    archive: Optional[str] = typer.Option(
        None,
        "--archive",
        help="Archive file to use instead of LIBRARY_ARCHIVE_FILE",
    ),
):
    """Global options for the CLI (output mode, archive file)."""
    if output:
        set_output_mode(output)
    if archive:
        try:
            ServiceLocator.configure(archive)
        except StorageError as e:
            print(f"Storage error: {e}")
            raise typer.Exit(code=1)


# --- Books ---
@app.command("books")
@handle_errors
def cli_books(sort: str = typer.Option("title", "--sort", "-s", help="Sort by: title | author | year")):
    """List the catalog."""
    service = ServiceLocator.get_book_service()
    if sort == "author":
        books = service.get_books_sorted_by_author()
    elif sort == "year":
        books = service.get_books_sorted_by_year()
    elif sort == "title":
        books = service.get_books_sorted_by_title()
    else:
        print(f"Unsupported sort key: {sort}. Use title, author or year.")
        raise typer.Exit(code=2)
    print_book_list(books)

@app.command("add-book")
@handle_errors
def cli_add_book(
    isbn: str = typer.Argument(..., help="ISBN-10 or ISBN-13"),
    title: str = typer.Option(..., "--title", "-t", help="Book title"),
    authors: List[str] = typer.Option(..., "--author", "-a", help="Author (repeat for several)"),
    year: int = typer.Option(..., "--year", "-y", help="Release year"),
    copies: int = typer.Option(1, "--copies", "-c", help="Number of copies"),
):
    """Add a book to the catalog."""
    book = Book(title=title, authors=authors, release_year=year, isbn=isbn, total_copies=copies)
    ServiceLocator.get_book_service().add_book(book)
    print(f"Successfully added: {book.title} by {', '.join(book.authors)}")

@app.command("remove-book")
@handle_errors
def cli_remove_book(isbn: str):
    """Remove a book by ISBN."""
    service = ServiceLocator.get_book_service()
    book = service.find_book(isbn)
    if not book:
        print(f"Book with ISBN {isbn} not found.")
        return
    service.remove_book(book)
    print(f"Book with ISBN {isbn} has been removed.")

@app.command("find-book")
@handle_errors
def cli_find_book(isbn: str):
    """Find a book by ISBN and show its details."""
    book = ServiceLocator.get_book_service().find_book(isbn)
    if book:
        print("Book Found")
        print(f"Title: {book.title}")
        print(f"Authors: {', '.join(book.authors)}")
        print(f"Year: {book.release_year}")
        print(f"ISBN: {book.isbn}")
        print(f"Copies: {book.available_copies}/{book.total_copies}")
    else:
        print(f"Book with ISBN {isbn} not found.")

@app.command("search-books")
@handle_errors
def cli_search_books(query: str = typer.Argument(..., help="Text to look for in title, authors or ISBN")):
    """Search the catalog."""
    print_book_list(ServiceLocator.get_book_service().search_books(query))


# --- Users ---
@app.command("users")
@handle_errors
def cli_users():
    """List registered users by last name."""
    print_user_list(ServiceLocator.get_user_service().get_users_sorted_by_last_name())

@app.command("add-user")
@handle_errors
def cli_add_user(
    code: str = typer.Argument(..., help="Student code"),
    first_name: str = typer.Argument(...),
    last_name: str = typer.Argument(...),
    email: str = typer.Argument(...),
):
    """Register a new user."""
    user = User(first_name=first_name, last_name=last_name, email=email, code=code)
    ServiceLocator.get_user_service().add_user(user)
    print(f"Successfully registered: {user.full_name} ({user.code})")

@app.command("remove-user")
@handle_errors
def cli_remove_user(code: str):
    """Remove a user by code."""
    service = ServiceLocator.get_user_service()
    user = service.find_user(code)
    if not user:
        print(f"User with code {code} not found.")
        return
    service.remove_user(user)
    print(f"User with code {code} has been removed.")

@app.command("search-users")
@handle_errors
def cli_search_users(query: str):
    """Search users by name, code or email."""
    print_user_list(ServiceLocator.get_user_service().search_users(query))


# --- Loans ---
@app.command("lend")
@handle_errors
def cli_lend(
    code: str = typer.Argument(..., help="User code"),
    isbn: str = typer.Argument(..., help="Book ISBN"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (YYYY-MM-DD)"),
):
    """Lend a copy of a book to a user."""
    user = ServiceLocator.get_user_service().find_user(code)
    if not user:
        print(f"User with code {code} not found.")
        raise typer.Exit(code=1)
    book = ServiceLocator.get_book_service().find_book(isbn)
    if not book:
        print(f"Book with ISBN {isbn} not found.")
        raise typer.Exit(code=1)

    due_date = date.fromisoformat(due) if due else date.today() + timedelta(days=settings.default_loan_days)
    loan = ServiceLocator.get_loan_service().register_loan(user, book, due_date)
    print(f"Loan #{loan.loan_id} registered: {book.title} -> {user.code}, due {loan.due_date}")

@app.command("return")
@handle_errors
def cli_return(loan_id: int):
    """Close a loan and put the copy back on the shelf."""
    service = ServiceLocator.get_loan_service()
    loan = service.find_loan(loan_id)
    if not loan:
        print(f"Loan #{loan_id} not found.")
        raise typer.Exit(code=1)
    service.return_loan(loan)
    print(f"Loan #{loan_id} returned.")

@app.command("loans")
@handle_errors
def cli_loans(
    active: bool = typer.Option(False, "--active", help="Only active loans"),
    late: bool = typer.Option(False, "--late", help="Only late loans"),
):
    """List loans sorted by due date."""
    service = ServiceLocator.get_loan_service()
    loans = service.get_active_loans() if (active or late) else service.get_loans_sorted_by_due_date()
    if late:
        loans = [loan for loan in loans if service.is_late(loan)]
    print_loan_list(loans)

@app.command("stats")
@handle_errors
def cli_stats():
    """Show library statistics."""
    print_stats_result(ServiceLocator.get_archive_service().get_statistics())


if __name__ == "__main__":
    app()

import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def _print_rows(items: List[Any], empty_message: str, title: str,
                columns: List[str], row, plain_line) -> None:
    mode = get_output_mode()

    if not items:
        print(empty_message)
        return

    if mode == "json":
        print(json.dumps([item.to_dict() for item in items], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title=title, show_lines=True, header_style="bold cyan")
        for i, name in enumerate(columns):
            table.add_column(name, style="magenta" if i == 0 else "white", no_wrap=(i == 0))
        for item in items:
            table.add_row(*[str(v) for v in row(item)])
        _console.print(table)
    else:
        for item in items:
            print(plain_line(item))

def print_book_list(books: List[Any]) -> None:
    """Print books in the current output mode.
    - plain: 'ISBN - Title by Authors (available/total)' lines, or 'No books in library.'
    - json: JSON array of Book.to_dict()
    - rich: Rich table
    """
    _print_rows(
        books,
        "No books in library.",
        "📚 Books",
        ["ISBN", "Title", "Authors", "Year", "Available"],
        lambda b: (b.isbn, b.title, ", ".join(b.authors), b.release_year,
                   f"{b.available_copies}/{b.total_copies}"),
        lambda b: f"{b.isbn} - {b.title} by {', '.join(b.authors)} ({b.available_copies}/{b.total_copies})",
    )

def print_user_list(users: List[Any]) -> None:
    _print_rows(
        users,
        "No users registered.",
        "👤 Users",
        ["Code", "Last Name", "First Name", "Email", "Loans"],
        lambda u: (u.code, u.last_name, u.first_name, u.email, len(u.active_loans)),
        lambda u: f"{u.code} - {u.last_name}, {u.first_name} <{u.email}>",
    )

def print_loan_list(loans: List[Any]) -> None:
    _print_rows(
        loans,
        "No loans found.",
        "🔖 Loans",
        ["ID", "User", "ISBN", "Due Date", "Status"],
        lambda l: (l.loan_id, l.user.code, l.book.isbn, l.due_date,
                   "active" if l.is_active() else f"returned {l.return_date}"),
        lambda l: (f"#{l.loan_id} - {l.book.title} ({l.book.isbn}) -> {l.user.code}, due {l.due_date}"
                   + ("" if l.is_active() else f", returned {l.return_date}")),
    )

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print statistics in the current output mode.
    - plain: one 'Label: value' line per metric
    - json: JSON object
    - rich: Panel with the main metrics
    """
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    labels = {
        "total_books": "Total Books",
        "total_copies": "Total Copies",
        "available_copies": "Available Copies",
        "total_users": "Total Users",
        "active_loans": "Active Loans",
        "returned_loans": "Returned Loans",
        "late_loans": "Late Loans",
    }

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{labels.get(k, k)}:[/] {v}" for k, v in stats.items())
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        for key, value in stats.items():
            print(f"{labels.get(key, key)}: {value}")

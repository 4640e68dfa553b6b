import json
from datetime import date, timedelta

from typer.testing import CliRunner

from main import app
from libraryms.persistence.file_service import FileService

runner = CliRunner()

CLEAN_CODE = ["add-book", "9780132350884", "-t", "Clean Code", "-a", "Robert C. Martin", "-y", "2008", "-c", "2"]
MARIO = ["add-user", "0612700001", "Mario", "Rossi", "m.rossi@studenti.unisa.it"]


def test_list_no_books(locator):
    result = runner.invoke(app, ["books"])
    assert result.exit_code == 0
    assert "No books in library." in result.stdout


def test_add_book_success(locator):
    result = runner.invoke(app, CLEAN_CODE)
    assert result.exit_code == 0
    assert "Successfully added: Clean Code by Robert C. Martin" in result.stdout

    result = runner.invoke(app, ["books"])
    assert "9780132350884 - Clean Code by Robert C. Martin (2/2)" in result.stdout


def test_add_book_with_several_authors(locator):
    result = runner.invoke(app, ["add-book", "0201633612", "-t", "Design Patterns",
                                 "-a", "Gamma", "-a", "Helm", "-y", "1994"])
    assert result.exit_code == 0
    assert "Successfully added: Design Patterns by Gamma, Helm" in result.stdout


def test_add_book_invalid_isbn(locator):
    result = runner.invoke(app, ["add-book", "12AB", "-t", "Bad", "-a", "Nobody", "-y", "2000"])
    assert result.exit_code == 1
    assert "Error:" in result.stdout


def test_books_survive_a_restart(locator):
    runner.invoke(app, CLEAN_CODE)
    locator.reset()

    result = runner.invoke(app, ["find-book", "9780132350884"])
    assert result.exit_code == 0
    assert "Book Found" in result.stdout
    assert "Title: Clean Code" in result.stdout
    assert "Copies: 2/2" in result.stdout


def test_find_book_not_found(locator):
    result = runner.invoke(app, ["find-book", "0000000000"])
    assert result.exit_code == 0
    assert "Book with ISBN 0000000000 not found." in result.stdout


def test_remove_book(locator):
    runner.invoke(app, CLEAN_CODE)
    result = runner.invoke(app, ["remove-book", "9780132350884"])
    assert result.exit_code == 0
    assert "Book with ISBN 9780132350884 has been removed." in result.stdout

    result = runner.invoke(app, ["remove-book", "9780132350884"])
    assert "Book with ISBN 9780132350884 not found." in result.stdout


def test_unsupported_sort_key(locator):
    result = runner.invoke(app, ["books", "--sort", "colour"])
    assert result.exit_code == 2
    assert "Unsupported sort key" in result.stdout


def test_json_output(locator):
    runner.invoke(app, CLEAN_CODE)
    result = runner.invoke(app, ["-o", "json", "books"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data[0]["isbn"] == "9780132350884"
    assert data[0]["available_copies"] == 2


def test_users(locator):
    result = runner.invoke(app, MARIO)
    assert result.exit_code == 0
    assert "Successfully registered: Mario Rossi (0612700001)" in result.stdout

    result = runner.invoke(app, ["search-users", "rossi"])
    assert "0612700001 - Rossi, Mario <m.rossi@studenti.unisa.it>" in result.stdout


def test_add_user_with_foreign_email(locator):
    result = runner.invoke(app, ["add-user", "0612700002", "Anna", "Bianchi", "anna@gmail.com"])
    assert result.exit_code == 1
    assert "Error: Invalid email" in result.stdout


def test_lend_and_return(locator):
    runner.invoke(app, CLEAN_CODE)
    runner.invoke(app, MARIO)
    due = (date.today() + timedelta(days=14)).isoformat()

    result = runner.invoke(app, ["lend", "0612700001", "9780132350884", "--due", due])
    assert result.exit_code == 0
    assert f"Loan #1 registered: Clean Code -> 0612700001, due {due}" in result.stdout

    result = runner.invoke(app, ["loans", "--active"])
    assert "#1 - Clean Code (9780132350884) -> 0612700001" in result.stdout

    result = runner.invoke(app, ["return", "1"])
    assert result.exit_code == 0
    assert "Loan #1 returned." in result.stdout

    result = runner.invoke(app, ["loans", "--active"])
    assert "No loans found." in result.stdout


def test_lend_uses_default_loan_period(locator):
    runner.invoke(app, CLEAN_CODE)
    runner.invoke(app, MARIO)
    result = runner.invoke(app, ["lend", "0612700001", "9780132350884"])
    assert result.exit_code == 0
    assert f"due {date.today() + timedelta(days=30)}" in result.stdout


def test_lend_unknown_user(locator):
    runner.invoke(app, CLEAN_CODE)
    result = runner.invoke(app, ["lend", "9999999999", "9780132350884"])
    assert result.exit_code == 1
    assert "User with code 9999999999 not found." in result.stdout


def test_return_unknown_loan(locator):
    result = runner.invoke(app, ["return", "42"])
    assert result.exit_code == 1
    assert "Loan #42 not found." in result.stdout


def test_stats(locator):
    runner.invoke(app, CLEAN_CODE)
    runner.invoke(app, MARIO)
    runner.invoke(app, ["lend", "0612700001", "9780132350884"])

    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 0
    assert "Total Books: 1" in result.stdout
    assert "Available Copies: 1" in result.stdout
    assert "Active Loans: 1" in result.stdout

    result = runner.invoke(app, ["-o", "json", "stats"])
    assert json.loads(result.stdout)["total_users"] == 1


def test_corrupt_archive(locator, archive_path):
    with open(archive_path, "wb") as f:
        f.write(b"definitely not a pickle")

    result = runner.invoke(app, ["books"])
    assert result.exit_code == 1
    assert "Storage error" in result.stdout


def test_wrong_archive_type(locator, archive_path):
    FileService().write_to_file(archive_path, {"books": []})

    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 1
    assert "Invalid archive file content" in result.stdout


def test_archive_option(locator, tmp_path):
    other = str(tmp_path / "other.dat")
    result = runner.invoke(app, ["--archive", other, "add-book", "9780441013593",
                                 "-t", "Dune", "-a", "Frank Herbert", "-y", "1965"])
    assert result.exit_code == 0
    assert FileService().read_from_file(other).find_book_by_isbn("9780441013593") is not None

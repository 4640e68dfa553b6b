"""LibraryMS - Core Application Package

This package contains the core application modules including:
- Domain models (book.py, user.py, loan.py, library_archive.py)
- Archive persistence (persistence/)
- Business services (services/)
- Settings (config.py)
- Input validation (validators.py)
"""

__version__ = "1.0.0"

"""LibraryMS - Services Package

This package contains the business services working on the library archive:
- Archive holder and persistence bridge (library_archive_service.py)
- Catalog management (book_service.py)
- User registry (user_service.py)
- Lending and returns (loan_service.py)
- Shared service instances (service_locator.py)
"""

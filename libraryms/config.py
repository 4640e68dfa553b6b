import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Archive settings
    archive_file: str = os.getenv("LIBRARY_ARCHIVE_FILE", "library-archive.dat")

    # Loan rules
    max_active_loans: int = int(os.getenv("MAX_ACTIVE_LOANS", "3"))
    default_loan_days: int = int(os.getenv("DEFAULT_LOAN_DAYS", "30"))

    # User registration
    allowed_email_domain: str = os.getenv("ALLOWED_EMAIL_DOMAIN", "unisa.it")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")


settings = Settings()

"""
sqlitekit settings.

Reads from environment variables (or .env file).
The database path itself (SQLITE3_FILE) is read at connect time, not here.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_FILE_ENV = "SQLITE3_FILE"
MEMORY_DATABASE = ":memory:"
JOURNAL_MODE = os.getenv("SQLITE3_JOURNAL_MODE", "WAL")
FILE_MUST_EXIST = os.getenv("SQLITE3_FILE_MUST_EXIST", "true").lower() == "true"
BUSY_TIMEOUT = float(os.getenv("SQLITE3_TIMEOUT", "5.0"))

# CLI scripts
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

"""
Runtime configuration for the ledger backend.

Values are read from environment variables (optionally loaded from a .env file).
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Database connection settings
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_SERVER = os.getenv("POSTGRES_SERVER", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_DB = os.getenv("POSTGRES_DB", "ledger_db")

# A full URL wins over the individual Postgres settings (tests use sqlite://)
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_SERVER}:{POSTGRES_PORT}/{POSTGRES_DB}"
)

# Timezone used for created_at / updated_at / audit timestamps
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Kolkata")

LOG_DIR = os.getenv("LOG_DIR", "logs")

CORS_ALLOWED_ORIGINS = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173"
)

# Sequence numbers (journal entries, order numbers) are read-max-then-insert;
# a unique-constraint collision is retried this many times before giving up.
SEQUENCE_MAX_ATTEMPTS = int(os.getenv("SEQUENCE_MAX_ATTEMPTS", "5"))
SEQUENCE_RETRY_DELAY = float(os.getenv("SEQUENCE_RETRY_DELAY", "0.05"))

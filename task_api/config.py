"""Environment-driven settings for the task API service."""

import os
from pathlib import Path

DB_PATH = Path(__file__).parent / "data.db"
DATABASE_URL = os.getenv("TASKS_DATABASE_URL", f"sqlite:///{DB_PATH}")

ALLOWED_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:8001,http://127.0.0.1:8001",
).split(",")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

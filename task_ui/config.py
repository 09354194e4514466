"""Environment-driven settings for the browser-facing UI service."""

import os

TASK_API_URL = os.getenv("TASK_API_URL", "http://localhost:8000")
TASK_API_TIMEOUT = float(os.getenv("TASK_API_TIMEOUT", "10.0"))
TOAST_TTL_SECONDS = float(os.getenv("TOAST_TTL_SECONDS", "5"))
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "task_session")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SESSION_MAX_COUNT = int(os.getenv("SESSION_MAX_COUNT", "1000"))
SESSION_IDLE_SECONDS = float(os.getenv("SESSION_IDLE_SECONDS", "3600"))

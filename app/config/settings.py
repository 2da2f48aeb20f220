# app/config/settings.py
# Application configuration loaded from the environment

import os

from dotenv import load_dotenv

load_dotenv()


class AppConfig:
    """Runtime configuration for the server, the database and the client"""

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tasks.db")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server runner
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8000"))
    RELOAD = os.getenv("RELOAD", "true").lower() == "true"

    # Client
    API_URL = os.getenv("API_URL", "http://localhost:8000")

    # Pagination
    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100

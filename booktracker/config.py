"""Configuration management."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""

    # Data sources
    CATALOG_SOURCE = os.getenv("BOOKTRACKER_CATALOG", "books.json")
    STORAGE_PATH = os.getenv("BOOKTRACKER_STORAGE", "booktracker.db")

    # Defaults
    DEFAULT_TIMEOUT = int(os.getenv("BOOKTRACKER_TIMEOUT", "10"))
    SEARCH_DEBOUNCE = float(os.getenv("BOOKTRACKER_SEARCH_DEBOUNCE", "0.3"))
    LOG_LEVEL = os.getenv("BOOKTRACKER_LOG_LEVEL", "INFO")

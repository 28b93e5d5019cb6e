# core/config.py
import os

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///books.db")

# Search provider
GOOGLE_BOOKS_URL = os.getenv("GOOGLE_BOOKS_URL", "https://www.googleapis.com/books/v1/volumes")
GOOGLE_BOOKS_API_KEY = os.getenv("GOOGLE_BOOKS_API_KEY") or None
SEARCH_MAX_RESULTS = int(os.getenv("SEARCH_MAX_RESULTS", "12"))
SEARCH_TIMEOUT = float(os.getenv("SEARCH_TIMEOUT", "10"))

# Reading stats
HEATMAP_WINDOW_DAYS = int(os.getenv("HEATMAP_WINDOW_DAYS", "84"))  # 12 full weeks
WEEKLY_TOTALS_LIMIT = int(os.getenv("WEEKLY_TOTALS_LIMIT", "8"))
STREAK_WINDOW_DAYS = int(os.getenv("STREAK_WINDOW_DAYS", "7"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

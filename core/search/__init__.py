# core/search/__init__.py
from .google_books import GoogleBooksClient, normalize_volume, pick_best_image

__all__ = ["GoogleBooksClient", "normalize_volume", "pick_best_image"]

# core/duplicates.py
from typing import Iterable, Optional, Tuple, TypeVar

T = TypeVar("T")


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def normalize_key(title: Optional[str], author: Optional[str]) -> Tuple[str, str]:
    """Trimmed, lowercased (title, author) pair used for duplicate checks."""
    return _normalize(title), _normalize(author)


def find_duplicate(library: Iterable[T], title: Optional[str], author: Optional[str]) -> Optional[T]:
    """Return the first library entry with the same normalized title and author.

    Matching is exact on both fields: "Dune" by "" does not match "Dune" by
    "Frank Herbert", and no fuzzy or token matching is attempted.

    Args:
        library: Entries in fetch order. Anything with ``title`` and ``author`` attributes.
        title: Candidate title
        author: Candidate author, possibly empty

    Returns:
        The first matching entry, or None
    """
    key = normalize_key(title, author)
    for entry in library:
        if normalize_key(entry.title, entry.author) == key:
            return entry
    return None

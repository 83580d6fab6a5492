"""
Canonical book order of the corpus.

Books are ordered theologically, not alphabetically. Books missing from the
canon keep their relative order after the canonical ones.
"""
from typing import List

from plainverse.core.models import Book

BOOK_ORDER = (
    "1 Nephi",
    "2 Nephi",
    "Jacob",
    "Enos",
    "Jarom",
    "Omni",
    "Words of Mormon",
    "Mosiah",
    "Alma",
    "Helaman",
    "3 Nephi",
    "4 Nephi",
    "Mormon",
    "Ether",
    "Moroni",
)

_POSITIONS = {short_name: index for index, short_name in enumerate(BOOK_ORDER)}


def canonical_position(short_name: str) -> int:
    return _POSITIONS.get(short_name, len(BOOK_ORDER))


def canonical_sort(books: List[Book]) -> List[Book]:
    """Return books in canonical order (stable for books outside the canon)"""
    return sorted(books, key=lambda book: canonical_position(book.short_name))

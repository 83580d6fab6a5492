"""
Decides which verses a run must (re)process.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from plainverse.core.models import Verse


class VerseAction(Enum):
    PROCESS = "process"
    SKIP = "skip"


@dataclass(frozen=True)
class RegenerationScope:
    """
    Explicitly requested regeneration: the whole corpus, one book, or one
    book and chapter. The default scope requests nothing, so only gaps and
    failed verses are processed.
    """
    regenerate_all: bool = False
    book: Optional[str] = None
    chapter: Optional[int] = None

    def __post_init__(self):
        if self.chapter is not None and self.book is None:
            raise ValueError("A chapter regeneration scope needs a book")

    @classmethod
    def for_chapter(cls, book: str, chapter: int) -> 'RegenerationScope':
        return cls(book=book, chapter=chapter)

    @property
    def is_empty(self) -> bool:
        return not self.regenerate_all and self.book is None

    def includes(self, book: str, chapter: int) -> bool:
        if self.regenerate_all:
            return True
        if self.book is None or self.book != book:
            return False
        return self.chapter is None or self.chapter == chapter

    def describe(self) -> str:
        if self.regenerate_all:
            return "all verses"
        if self.book is None:
            return "none"
        if self.chapter is None:
            return f"book {self.book}"
        return f"chapter {self.book} {self.chapter}"


def resolve_verse(
    scope: RegenerationScope,
    book: str,
    chapter: int,
    existing: Optional[Verse]
) -> VerseAction:
    """
    Process a verse iff its transformed text is missing or empty, its stored
    value is a failure sentinel, or it falls inside the requested
    regeneration scope.
    """
    if existing is None or not existing.transformed_text:
        return VerseAction.PROCESS
    if existing.is_failed:
        return VerseAction.PROCESS
    if scope.includes(book, chapter):
        return VerseAction.PROCESS
    return VerseAction.SKIP

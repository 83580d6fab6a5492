"""
Abstract checkpoint store interface.

A checkpoint store holds the in-progress transformed corpus. Chapters are
staged with ``put_chapter`` and flushed with ``persist``; the batch driver
persists after every chapter.
"""

from abc import ABC, abstractmethod
from typing import Optional

from plainverse.core.models import Book, Chapter, Corpus, Verse, VerseKey


class CheckpointStore(ABC):
    """Abstract base class for checkpoint stores."""

    @abstractmethod
    def get_chapter(self, book: str, chapter: int) -> Optional[Chapter]:
        """
        Get a stored chapter.

        Args:
            book: Book short name
            chapter: Chapter number

        Returns:
            The chapter, or None if it has never been stored
        """
        pass

    def get_verse(self, key: VerseKey) -> Optional[Verse]:
        """Get a stored verse by (book, chapter, verse) key"""
        book, chapter_number, verse_number = key
        chapter = self.get_chapter(book, chapter_number)
        if chapter is None:
            return None
        return chapter.find_verse(verse_number)

    @abstractmethod
    def put_chapter(self, book: Book, chapter: Chapter) -> None:
        """
        Stage a chapter, replacing any stored chapter with the same number.

        Args:
            book: Book the chapter belongs to (name and short name are used)
            chapter: Complete chapter to store
        """
        pass

    @abstractmethod
    def replace(self, corpus: Corpus) -> None:
        """Replace the whole stored corpus"""
        pass

    @abstractmethod
    def snapshot(self) -> Corpus:
        """Return a deep copy of the stored corpus"""
        pass

    @abstractmethod
    def persist(self) -> None:
        """Flush staged changes durably"""
        pass

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the checkpoint"""
        pass

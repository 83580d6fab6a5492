"""
Pydantic models for the scripture corpus and its checkpoint
"""
from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# (book short name, chapter number, verse number)
VerseKey = Tuple[str, int, int]

FAILURE_SENTINEL_PREFIX = "[TRANSLATION FAILED: "
FAILURE_SENTINEL_SUFFIX = "]"


def failure_sentinel(message: str) -> str:
    """Build the placeholder stored when a verse permanently fails to transform."""
    return f"{FAILURE_SENTINEL_PREFIX}{message}{FAILURE_SENTINEL_SUFFIX}"


def is_failure_sentinel(value: Optional[str]) -> bool:
    return bool(value) and value.startswith(FAILURE_SENTINEL_PREFIX) and value.endswith(FAILURE_SENTINEL_SUFFIX)


def _check_ascending(numbers: List[int], label: str) -> None:
    for previous, current in zip(numbers, numbers[1:]):
        if current <= previous:
            raise ValueError(
                f"{label} numbers must be unique and ascending, got {current} after {previous}"
            )


class Verse(BaseModel):
    """
    A single verse. ``transformed_text`` is absent until the verse has been
    processed; a failure sentinel marks a permanently failed attempt.
    """
    model_config = ConfigDict(populate_by_name=True)

    number: int = Field(ge=1, description="Verse number within its chapter")
    original_text: str = Field(alias="text", description="Archaic source text, immutable once parsed")
    transformed_text: Optional[str] = Field(
        default=None,
        alias="plainText",
        description="Modernized text, or a failure sentinel"
    )

    @property
    def is_failed(self) -> bool:
        return is_failure_sentinel(self.transformed_text)

    @property
    def is_transformed(self) -> bool:
        """True when a usable modernized text is stored"""
        return bool(self.transformed_text) and not self.is_failed

    @property
    def failure_message(self) -> Optional[str]:
        if not self.is_failed:
            return None
        return self.transformed_text[len(FAILURE_SENTINEL_PREFIX):-len(FAILURE_SENTINEL_SUFFIX)]


class Chapter(BaseModel):
    """A chapter of ordered verses with an optional summary"""
    model_config = ConfigDict(populate_by_name=True)

    number: int = Field(ge=1)
    verses: List[Verse] = Field(default_factory=list)
    summary: Optional[str] = Field(
        default=None,
        description="Chapter summary written by the summarization job"
    )

    @field_validator('verses')
    @classmethod
    def validate_verse_order(cls, verses: List[Verse]) -> List[Verse]:
        _check_ascending([v.number for v in verses], "Verse")
        return verses

    def find_verse(self, number: int) -> Optional[Verse]:
        for verse in self.verses:
            if verse.number == number:
                return verse
        return None


class Book(BaseModel):
    """A book of ordered chapters"""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    short_name: str = Field(alias="shortName", min_length=1)
    chapters: List[Chapter] = Field(default_factory=list)

    @field_validator('chapters')
    @classmethod
    def validate_chapter_order(cls, chapters: List[Chapter]) -> List[Chapter]:
        _check_ascending([c.number for c in chapters], "Chapter")
        return chapters

    def find_chapter(self, number: int) -> Optional[Chapter]:
        for chapter in self.chapters:
            if chapter.number == number:
                return chapter
        return None


class Corpus(BaseModel):
    """
    The full book/chapter/verse collection. The same model describes the
    source corpus and the checkpoint.
    """
    model_config = ConfigDict(populate_by_name=True)

    books: List[Book] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_unique_books(self) -> 'Corpus':
        seen = set()
        for book in self.books:
            if book.short_name in seen:
                raise ValueError(f"Duplicate book: {book.short_name}")
            seen.add(book.short_name)
        return self

    def find_book(self, short_name: str) -> Optional[Book]:
        for book in self.books:
            if book.short_name == short_name:
                return book
        return None

    def find_verse(self, key: VerseKey) -> Optional[Verse]:
        book_name, chapter_number, verse_number = key
        book = self.find_book(book_name)
        if book is None:
            return None
        chapter = book.find_chapter(chapter_number)
        if chapter is None:
            return None
        return chapter.find_verse(verse_number)

    def iter_verses(self) -> Iterator[Tuple[Book, Chapter, Verse]]:
        for book in self.books:
            for chapter in book.chapters:
                for verse in chapter.verses:
                    yield book, chapter, verse

    def verse_count(self) -> int:
        return sum(len(chapter.verses) for book in self.books for chapter in book.chapters)

    def transformed_count(self) -> int:
        """Verses carrying any transformed text, failure sentinels included"""
        return sum(1 for _, _, verse in self.iter_verses() if verse.transformed_text is not None)

    def failed_verses(self) -> List[Tuple[VerseKey, str]]:
        return [
            ((book.short_name, chapter.number, verse.number), verse.failure_message)
            for book, chapter, verse in self.iter_verses()
            if verse.is_failed
        ]

    def to_wire(self) -> dict:
        """Serialize to the on-disk JSON shape (text / plainText / shortName keys)"""
        return self.model_dump(by_alias=True, exclude_none=True)

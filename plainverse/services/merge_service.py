"""
Merge Service
Reconciles a re-parsed source corpus with an existing checkpoint.

Transformed text is carried forward only for verses whose original text is
unchanged; edited verses are invalidated so the next transform run redoes them.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from plainverse.core.models import Book, Chapter, Corpus, Verse, VerseKey
from plainverse.storage.base import CheckpointStore

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 50


@dataclass
class MergeResult:
    corpus: Corpus
    kept: int = 0
    changed: List[VerseKey] = field(default_factory=list)
    new: List[VerseKey] = field(default_factory=list)
    removed: List[VerseKey] = field(default_factory=list)


def _excerpt(text: str) -> str:
    if len(text) <= EXCERPT_LENGTH:
        return text
    return text[:EXCERPT_LENGTH] + "..."


def merge_checkpoint(source: Corpus, checkpoint: Corpus) -> MergeResult:
    """
    Build a new checkpoint with the source's structure.

    For each verse key:
    - same original text and stored transformed text: carried forward
    - different original text: transformed text cleared, new original adopted
    - no stored entry (or one never transformed): left untransformed

    Keys present only in the old checkpoint are dropped and reported as removed.
    """
    result = MergeResult(corpus=Corpus())
    seen = set()

    for book in source.books:
        old_book = checkpoint.find_book(book.short_name)
        chapters = []
        for chapter in book.chapters:
            old_chapter = old_book.find_chapter(chapter.number) if old_book else None
            verses = []
            for verse in chapter.verses:
                key = (book.short_name, chapter.number, verse.number)
                seen.add(key)
                old_verse = old_chapter.find_verse(verse.number) if old_chapter else None

                transformed = None
                if old_verse is None or not old_verse.transformed_text:
                    result.new.append(key)
                elif old_verse.original_text != verse.original_text:
                    result.changed.append(key)
                    logger.info(
                        f"Changed {book.short_name} {chapter.number}:{verse.number}: "
                        f"'{_excerpt(old_verse.original_text)}' -> '{_excerpt(verse.original_text)}'"
                    )
                else:
                    transformed = old_verse.transformed_text
                    result.kept += 1

                verses.append(Verse(
                    number=verse.number,
                    original_text=verse.original_text,
                    transformed_text=transformed
                ))

            summary = old_chapter.summary if old_chapter and old_chapter.summary else chapter.summary
            chapters.append(Chapter(number=chapter.number, verses=verses, summary=summary))

        result.corpus.books.append(Book(name=book.name, short_name=book.short_name, chapters=chapters))

    for old_book, old_chapter, old_verse in checkpoint.iter_verses():
        key = (old_book.short_name, old_chapter.number, old_verse.number)
        if key not in seen:
            result.removed.append(key)

    return result


class MergeService:
    """Applies merge_checkpoint to a checkpoint store"""

    def __init__(self, store: CheckpointStore):
        self.store = store

    def merge_from(self, source: Corpus) -> MergeResult:
        result = merge_checkpoint(source, self.store.snapshot())
        self.store.replace(result.corpus)
        self.store.persist()

        logger.info(
            f"Merged into {self.store.location}: {result.kept} kept, {len(result.new)} new, "
            f"{len(result.changed)} changed, {len(result.removed)} removed"
        )
        return result

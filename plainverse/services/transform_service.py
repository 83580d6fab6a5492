"""
Transform Service
Walks the source corpus and fills the checkpoint with transformed verses,
one chapter at a time.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from plainverse.core.exceptions import ScopeNotFoundError, TransformError
from plainverse.core.models import Book, Chapter, Corpus, Verse, failure_sentinel
from plainverse.core.progress import ProgressTracker
from plainverse.core.scope import RegenerationScope, VerseAction, resolve_verse
from plainverse.core.transformer import TransformStrategy, VerseContext
from plainverse.storage.base import CheckpointStore

logger = logging.getLogger(__name__)


@dataclass
class TransformRunResult:
    """Outcome of one transform run"""
    processed: int
    skipped: int
    failed: int
    total_verses: int
    transformed_verses: int
    elapsed_seconds: float
    output_location: str

    @property
    def succeeded(self) -> int:
        return self.processed - self.failed


class TransformService:
    """
    Batch driver for verse transformation.

    Resumable: verses that already carry transformed text are copied forward
    unless they are failure sentinels or inside the regeneration scope. The
    store is persisted after every chapter that changed, so an interruption
    loses at most the chapter in progress.
    """

    def __init__(
        self,
        strategy: TransformStrategy,
        store: CheckpointStore,
        progress: Optional[ProgressTracker] = None,
        persist_each_chapter: bool = True
    ):
        self.strategy = strategy
        self.store = store
        self.progress = progress or ProgressTracker()
        self.persist_each_chapter = persist_each_chapter

    def run(
        self,
        source: Corpus,
        scope: Optional[RegenerationScope] = None,
        book_filter: Optional[str] = None,
        chapter_filter: Optional[int] = None
    ) -> TransformRunResult:
        """
        Transform every verse of the selected books and chapters that needs it.

        Args:
            source: Authoritative source corpus
            scope: Verses to regenerate even if already transformed
            book_filter: Only walk this book (short name)
            chapter_filter: Only walk this chapter of ``book_filter``

        Returns:
            TransformRunResult with counts for this run and the checkpoint

        Raises:
            ScopeNotFoundError: If a filter or scope names a missing book or chapter
            ValueError: If a chapter filter is given without a book filter
        """
        scope = scope or RegenerationScope()
        work = self._select(source, scope, book_filter, chapter_filter)

        total = self._count_pending(work, scope)
        logger.info(
            f"Transforming with {self.strategy.mode.value} strategy: "
            f"{total} verses to process (regenerating: {scope.describe()})"
        )
        self.progress.start(total)

        pending_write = False
        for book, chapter in work:
            new_chapter = self._transform_chapter(book, chapter, scope)
            if new_chapter == self.store.get_chapter(book.short_name, chapter.number):
                continue
            self.store.put_chapter(book, new_chapter)
            if self.persist_each_chapter:
                self.store.persist()
                logger.debug(f"Saved {book.short_name} {chapter.number}")
            else:
                pending_write = True

        if pending_write:
            self.store.persist()

        checkpoint = self.store.snapshot()
        result = TransformRunResult(
            processed=self.progress.processed,
            skipped=self.progress.skipped,
            failed=self.progress.failed,
            total_verses=checkpoint.verse_count(),
            transformed_verses=checkpoint.transformed_count(),
            elapsed_seconds=self.progress.elapsed,
            output_location=self.store.location,
        )
        logger.info(
            f"Done: processed {result.processed} verses ({result.succeeded} succeeded, "
            f"{result.failed} failed, {result.skipped} skipped) in {result.elapsed_seconds:.1f}s"
        )
        return result

    def _select(
        self,
        source: Corpus,
        scope: RegenerationScope,
        book_filter: Optional[str],
        chapter_filter: Optional[int]
    ) -> List[Tuple[Book, Chapter]]:
        """Resolve filters to the (book, chapter) pairs to walk, failing fast on unknown targets"""
        if chapter_filter is not None and book_filter is None:
            raise ValueError("A chapter filter needs a book filter")

        if scope.book is not None:
            scope_book = source.find_book(scope.book)
            if scope_book is None:
                raise ScopeNotFoundError(scope.book)
            if scope.chapter is not None and scope_book.find_chapter(scope.chapter) is None:
                raise ScopeNotFoundError(scope.book, scope.chapter)

        books = source.books
        if book_filter is not None:
            book = source.find_book(book_filter)
            if book is None:
                raise ScopeNotFoundError(book_filter)
            books = [book]

        work = []
        for book in books:
            if chapter_filter is not None:
                chapter = book.find_chapter(chapter_filter)
                if chapter is None:
                    raise ScopeNotFoundError(book.short_name, chapter_filter)
                work.append((book, chapter))
            else:
                work.extend((book, chapter) for chapter in book.chapters)
        return work

    def _count_pending(self, work: List[Tuple[Book, Chapter]], scope: RegenerationScope) -> int:
        total = 0
        for book, chapter in work:
            for verse in chapter.verses:
                existing = self.store.get_verse((book.short_name, chapter.number, verse.number))
                if resolve_verse(scope, book.short_name, chapter.number, existing) == VerseAction.PROCESS:
                    total += 1
        return total

    def _transform_chapter(self, book: Book, chapter: Chapter, scope: RegenerationScope) -> Chapter:
        stored = self.store.get_chapter(book.short_name, chapter.number)
        verses = []
        for verse in chapter.verses:
            existing = stored.find_verse(verse.number) if stored else None
            action = resolve_verse(scope, book.short_name, chapter.number, existing)
            if action == VerseAction.SKIP:
                verses.append(existing.model_copy())
                self.progress.record_skip()
                continue
            verses.append(self._transform_verse(book, chapter, verse))

        summary = stored.summary if stored and stored.summary else chapter.summary
        return Chapter(number=chapter.number, verses=verses, summary=summary)

    def _transform_verse(self, book: Book, chapter: Chapter, verse: Verse) -> Verse:
        context = VerseContext(book=book.short_name, chapter=chapter.number, verse=verse.number)
        failed = False
        try:
            transformed = self.strategy.transform(verse.original_text, context)
        except TransformError as e:
            logger.error(f"Failed to transform {context}: {e}")
            transformed = failure_sentinel(str(e))
            failed = True

        self.progress.record(failed=failed)
        logger.info(self.progress.format_status(str(context)))
        return Verse(number=verse.number, original_text=verse.original_text, transformed_text=transformed)

"""
Local JSON file checkpoint store.
"""

import logging
from pathlib import Path
from typing import Optional

from plainverse.core.canon import canonical_position
from plainverse.core.corpus_loader import PathLike, load_corpus, save_corpus
from plainverse.core.models import Book, Chapter, Corpus
from .base import CheckpointStore

logger = logging.getLogger(__name__)


class JsonCheckpointStore(CheckpointStore):
    """
    Checkpoint kept in memory and written to a single JSON file.

    A missing file starts an empty checkpoint. A file that exists but cannot
    be parsed raises CorpusStructureError rather than being overwritten.
    """

    def __init__(self, path: PathLike):
        self.path = Path(path)
        if self.path.exists():
            self._corpus = load_corpus(self.path)
            logger.info(
                f"Loaded checkpoint {self.path}: "
                f"{self._corpus.transformed_count()}/{self._corpus.verse_count()} verses transformed"
            )
        else:
            self._corpus = Corpus()
            logger.info(f"No checkpoint at {self.path}, starting empty")

    @property
    def location(self) -> str:
        return str(self.path)

    def get_chapter(self, book: str, chapter: int) -> Optional[Chapter]:
        stored_book = self._corpus.find_book(book)
        if stored_book is None:
            return None
        return stored_book.find_chapter(chapter)

    def put_chapter(self, book: Book, chapter: Chapter) -> None:
        stored_book = self._corpus.find_book(book.short_name)
        if stored_book is None:
            stored_book = Book(name=book.name, short_name=book.short_name, chapters=[])
            self._insert_book(stored_book)

        chapters = [c for c in stored_book.chapters if c.number != chapter.number]
        chapters.append(chapter.model_copy(deep=True))
        stored_book.chapters = sorted(chapters, key=lambda c: c.number)

    def _insert_book(self, book: Book) -> None:
        position = canonical_position(book.short_name)
        index = len(self._corpus.books)
        for i, existing in enumerate(self._corpus.books):
            if canonical_position(existing.short_name) > position:
                index = i
                break
        self._corpus.books.insert(index, book)

    def replace(self, corpus: Corpus) -> None:
        self._corpus = corpus.model_copy(deep=True)

    def snapshot(self) -> Corpus:
        return self._corpus.model_copy(deep=True)

    def persist(self) -> None:
        save_corpus(self._corpus, self.path)
        logger.debug(f"Checkpoint written to {self.path}")

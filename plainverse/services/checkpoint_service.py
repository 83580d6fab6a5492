"""
Checkpoint Service
Maintenance operations on an existing checkpoint: quote repair and status.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from plainverse.core.models import VerseKey
from plainverse.core.normalizer import normalize_text, starts_with_capital
from plainverse.storage.base import CheckpointStore

logger = logging.getLogger(__name__)


@dataclass
class CheckpointStatus:
    total: int
    transformed: int
    failures: List[Tuple[VerseKey, str]] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def untransformed(self) -> int:
        return self.total - self.transformed - self.failed

    @property
    def percent_complete(self) -> float:
        if self.total == 0:
            return 0.0
        return 100.0 * self.transformed / self.total


class CheckpointService:

    def __init__(self, store: CheckpointStore):
        self.store = store

    def renormalize(self) -> int:
        """
        Re-run the normalizer over every stored transformed verse.

        Failure sentinels are left alone. The store is persisted only when
        something changed.

        Returns:
            Number of verses whose text changed
        """
        corpus = self.store.snapshot()
        changed = 0
        for book, chapter, verse in corpus.iter_verses():
            if not verse.is_transformed:
                continue
            normalized = normalize_text(
                verse.transformed_text,
                capitalize_first=starts_with_capital(verse.original_text)
            )
            if normalized != verse.transformed_text:
                logger.debug(f"Normalized {book.short_name} {chapter.number}:{verse.number}")
                verse.transformed_text = normalized
                changed += 1

        if changed:
            self.store.replace(corpus)
            self.store.persist()
        logger.info(f"Normalized {changed} verses in {self.store.location}")
        return changed

    def status(self) -> CheckpointStatus:
        corpus = self.store.snapshot()
        return CheckpointStatus(
            total=corpus.verse_count(),
            transformed=sum(1 for _, _, verse in corpus.iter_verses() if verse.is_transformed),
            failures=corpus.failed_verses(),
        )

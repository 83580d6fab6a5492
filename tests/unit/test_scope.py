#!/usr/bin/env python3
"""
Unit tests for regeneration scope resolution
"""

import pytest

from plainverse.core.models import Verse, failure_sentinel
from plainverse.core.scope import RegenerationScope, VerseAction, resolve_verse


def verse(plain_text=None):
    return Verse(number=1, original_text="And thou art blessed.", transformed_text=plain_text)


class TestRegenerationScope:

    def test_empty_scope_includes_nothing(self):
        scope = RegenerationScope()
        assert scope.is_empty
        assert not scope.includes("1 Nephi", 1)

    def test_all(self):
        assert RegenerationScope(regenerate_all=True).includes("Alma", 32)

    def test_book(self):
        scope = RegenerationScope(book="Alma")
        assert scope.includes("Alma", 1)
        assert scope.includes("Alma", 32)
        assert not scope.includes("Ether", 1)

    def test_chapter(self):
        scope = RegenerationScope.for_chapter("Alma", 32)
        assert scope.includes("Alma", 32)
        assert not scope.includes("Alma", 31)
        assert not scope.includes("Ether", 32)

    def test_chapter_without_book_is_invalid(self):
        with pytest.raises(ValueError):
            RegenerationScope(chapter=3)

    def test_describe(self):
        assert RegenerationScope.for_chapter("Alma", 32).describe() == "chapter Alma 32"


class TestResolveVerse:

    def setup_method(self):
        self.scope = RegenerationScope()

    def test_missing_verse_is_processed(self):
        assert resolve_verse(self.scope, "Alma", 1, None) == VerseAction.PROCESS

    def test_untransformed_verse_is_processed(self):
        assert resolve_verse(self.scope, "Alma", 1, verse()) == VerseAction.PROCESS

    def test_empty_transformed_text_is_processed(self):
        assert resolve_verse(self.scope, "Alma", 1, verse("")) == VerseAction.PROCESS

    def test_failed_verse_is_processed(self):
        failed = verse(failure_sentinel("quota"))
        assert resolve_verse(self.scope, "Alma", 1, failed) == VerseAction.PROCESS

    def test_transformed_verse_is_skipped(self):
        assert resolve_verse(self.scope, "Alma", 1, verse("And you are blessed.")) == VerseAction.SKIP

    def test_transformed_verse_in_scope_is_processed(self):
        scope = RegenerationScope.for_chapter("Alma", 1)
        assert resolve_verse(scope, "Alma", 1, verse("And you are blessed.")) == VerseAction.PROCESS
        assert resolve_verse(scope, "Alma", 2, verse("And you are blessed.")) == VerseAction.SKIP

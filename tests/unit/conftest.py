"""
Shared fixtures for plainverse unit tests
"""
import pytest

from plainverse.core.corpus_loader import parse_corpus

from tests.unit.helpers import make_corpus_data


@pytest.fixture
def source_corpus():
    return parse_corpus(make_corpus_data(), "source")

"""
Plainverse Core Module

This module contains the corpus model, the rule engine, the normalizer and
the transform strategies.
"""

from .models import Book, Chapter, Corpus, Verse
from .rules import apply_rules
from .normalizer import normalize_text
from .transformer import TransformMode, create_transform_strategy

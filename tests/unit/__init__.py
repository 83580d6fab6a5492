"""
Unit Tests

Tests for individual components and functions:
- rules.py / normalizer.py: rule cascade and text cleanup
- transformer.py: transform strategies with a mocked Gemini client
- services/: batch driver, merge and checkpoint maintenance
"""

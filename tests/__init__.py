"""
Plainverse Test Suite

- unit/: Unit tests for individual components
"""

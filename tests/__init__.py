"""
Test suite for ordered_collections

Contains:
- tests/unit/          : Unit tests for individual modules
"""

"""
Test suite for dynconv

Contains:
- tests/unit/          : Unit tests for converters, contexts, engine and host bridge
"""

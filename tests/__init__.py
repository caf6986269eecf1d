"""
Test suite for the tokenomics ledger engine

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/conftest.py    : Shared fixtures (deterministic store, engine, project)
"""

#!/usr/bin/env python3
"""
Test suite for the Power Match service.

All tests run against an in-memory SQLite database created from the ORM
metadata, so no external services are required:

    python -m pytest tests/ -v

Postgres-only behaviour (the scoring SQL function, partial indexes) is
exercised through SQLite equivalents or mocks.
"""

"""
Unit tests for the resume builder.

Services are exercised directly against a throwaway SQLite database and a
fake AI client; no HTTP layer is involved.

Usage:
    # Run all unit tests
    pytest backend/tests/unit/

    # Run one module
    pytest backend/tests/unit/test_config_resolver.py
"""

import logging

logging.getLogger("sqlalchemy").setLevel(logging.CRITICAL)

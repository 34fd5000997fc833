"""
Integration tests for the resume builder API.

Full HTTP request/response cycles through the FastAPI app, with the database,
activity log and AI client replaced by test doubles in ``conftest.py``.

Usage:
    # Run all integration tests
    pytest backend/tests/integration/

    # Run the AI endpoint tests only
    pytest backend/tests/integration/test_ai_api.py
"""

import logging

logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

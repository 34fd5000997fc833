"""
Resume Builder - backend application package.

FastAPI backend for building resumes: CV, job description and resume
documents, AI-assisted extraction, matching and chat through Google Gemini,
and administrator-managed AI task configuration and knowledge.

Package Structure:
- api/: REST API endpoints and route handlers
- core/: Core infrastructure (config, security, database, logging, exceptions)
- models/: SQLAlchemy database models
- schemas/: Pydantic schemas for request/response validation
- services/: Business logic, including the AI task layer in services/ai
- utils/: Small shared helpers
"""

__version__ = "1.0.0"

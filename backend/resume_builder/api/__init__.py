"""
HTTP API for the resume builder.

API Structure:
- v1/: Version 1 API endpoints
  - auth.py, users.py: accounts and profiles
  - cvs.py, job_descriptions.py, resumes.py, templates.py: documents
  - extract.py, chatbot.py: AI-assisted extraction, matching and chat
  - ai_configs.py, knowledge.py: administrator-managed AI task settings
  - user_logs.py: activity history and statistics
"""

API_VERSION = "1.0.0"
API_TITLE = "Resume Builder API"
API_DESCRIPTION = """
## AI-assisted resume building

- **Documents**: CVs, job descriptions, tailored resumes and templates
- **Extraction**: structured CV and job description data from raw text
- **Matching**: resumes tailored to a job description, with section tips
- **Chat**: an assistant routed to the right task by intent detection
- **Administration**: per-task AI configuration, knowledge and activity logs
"""

__all__ = ["API_VERSION", "API_TITLE", "API_DESCRIPTION"]

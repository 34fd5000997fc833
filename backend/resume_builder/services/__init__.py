"""
Business logic services.

- task_config_service: stored AI task configurations and their activation
- knowledge_service: knowledge entries injected into prompts
- activity_log_service: best-effort activity recording and queries
- document_service: owner-scoped CV, job description and resume access
- ai/: configuration resolution, intent routing and task execution
"""

"""Services for the wellness chat.

Services are organized into:
- core/: Orchestration (wellness_chat)
- providers/: External API wrappers (ai_gateway)
- prompts/: System prompts and episode context
- utils/: Usage governor and FAQ cache
- errors: Domain errors translated to HTTP responses in app.main
"""

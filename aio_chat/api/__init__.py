"""FastAPI endpoints for the chat application.

Endpoints:
    - GET /health: Service health status
    - GET /api/models: Model catalog, predefined prompts, default settings
    - POST /api/chat: Chat completion
    - POST /api/chat/stream: Chat completion as Server-Sent Events
    - GET|POST|PUT|PATCH|DELETE /api/chat-sessions: Session management
    - POST /api/upload: Document text extraction for attachments
    - POST /api/translate: Language detection and translation
    - POST /api/web-search: Web search
"""

from aio_chat.api.app import app, create_app

__all__ = ["app", "create_app"]

"""AIO Chat - multi-provider LLM chat with document attachments.

Combines FastAPI for the HTTP API, Agno for provider orchestration,
NiceGUI for the browser interface, and Pydantic for data validation.

Components:
    - api: HTTP endpoints (chat, sessions, upload, translate, web search)
    - providers: Model routing and prompt assembly for OpenAI, Gemini, Claude, Ollama
    - parsing: Text extraction from uploaded documents
    - services: In-memory sessions, translation, web search
    - config: Model catalog, user settings, provider credentials
    - ui: Web interface for chat interactions
    - models: Request/response schemas
"""

__version__ = "0.1.0"

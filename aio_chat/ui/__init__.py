"""NiceGUI interface for the chat application.

Responsibilities:
    - Chat message display with streaming status and incremental replies
    - Document attachments, predefined prompts and per-message actions
    - Session sidebar with create, open, rename and delete
    - Settings dialog for extraction, translation, search and system prompt

All data goes through the HTTP API via ``ApiClient``.
"""

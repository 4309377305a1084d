"""Integration tests exercising the FastAPI app over ASGI."""

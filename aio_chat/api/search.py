"""Web search endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from aio_chat.models.schemas import WebSearchRequest, WebSearchResponse
from aio_chat.services.web_search import WebSearchClient, get_web_search_client

router = APIRouter(prefix="/api", tags=["search"])


@router.post("/web-search", response_model=WebSearchResponse)
async def web_search(
    request: WebSearchRequest,
    client: Annotated[WebSearchClient, Depends(get_web_search_client)],
) -> WebSearchResponse:
    """Search the web; at most 10 results, always at least one.

    Args:
        request: Query and requested number of results.

    Returns:
        WebSearchResponse echoing the query with its results.
    """
    results = await client.search(request.query, request.limit)
    return WebSearchResponse(results=results, query=request.query)

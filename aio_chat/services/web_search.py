"""Web search through the DuckDuckGo Instant Answer API.

The Instant Answer API is free and keyless but often returns nothing for
ordinary queries, so every path ends in at least one result: real topics,
the abstract, or a placeholder explaining that nothing was found.
"""

import logging
from typing import Any

import httpx

from aio_chat.config.provider_config import get_provider_config
from aio_chat.models.schemas import SearchResult

logger = logging.getLogger(__name__)

DUCKDUCKGO_URL = "https://api.duckduckgo.com/"
USER_AGENT = "AIO Travel Itinerary Assistant/1.0"
MAX_RESULTS = 10
TITLE_MAX_LENGTH = 100


def _placeholder(query: str, unavailable: bool = False) -> SearchResult:
    if unavailable:
        snippet = (
            f'Web search temporarily unavailable. This is a mock result for "{query}". '
            "To enable real web search, configure a search API provider."
        )
    else:
        snippet = (
            f'No specific web search results found for "{query}". This is a placeholder '
            "result as web search functionality requires additional API setup."
        )
    return SearchResult(title=f"Search results for: {query}", url="#", snippet=snippet)


def parse_instant_answer(data: dict[str, Any], limit: int) -> list[SearchResult]:
    """Turn an Instant Answer payload into search results.

    Args:
        data: Decoded JSON body.
        limit: Maximum number of related topics to consider.

    Returns:
        Results from RelatedTopics, else from the Abstract, else empty.
    """
    results: list[SearchResult] = []

    topics = data.get("RelatedTopics")
    if isinstance(topics, list):
        for topic in topics[:limit]:
            text = topic.get("Text") if isinstance(topic, dict) else None
            url = topic.get("FirstURL") if isinstance(topic, dict) else None
            if text and url:
                results.append(
                    SearchResult(
                        title=text.split(" - ")[0] or text[:TITLE_MAX_LENGTH],
                        url=url,
                        snippet=text,
                    )
                )

    if not results and data.get("Abstract"):
        results.append(
            SearchResult(
                title=data.get("Heading") or "Search Result",
                url=data.get("AbstractURL") or "#",
                snippet=data["Abstract"],
            )
        )

    return results


def format_search_results(query: str, results: list[SearchResult]) -> str:
    """Render results as a block appended to a user message for the model."""
    if not results:
        return ""

    lines = "\n\n".join(
        f"{i}. {r.title}\n   {r.snippet}\n   URL: {r.url}"
        for i, r in enumerate(results, start=1)
    )
    return (
        f'\n\n--- Web Search Results for "{query}" ---\n'
        f"{lines}\n"
        "--- End of Search Results ---\n"
    )


class WebSearchClient:
    """Async client for the Instant Answer API.

    Args:
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used by tests to stub the API).
    """

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def search(self, query: str, limit: int = 5) -> list[SearchResult]:
        """Search the web for query.

        Never raises: failures are logged and reported as a placeholder result.

        Args:
            query: Search terms.
            limit: Requested number of results, capped at 10.

        Returns:
            At least one SearchResult.
        """
        limit = max(1, min(limit, MAX_RESULTS))
        params = {
            "q": query,
            "format": "json",
            "no_html": "1",
            "skip_disambig": "1",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = await client.get(DUCKDUCKGO_URL, params=params)
                response.raise_for_status()
                # DuckDuckGo answers with application/x-javascript, so decode manually
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Web search error for {query!r}: {e}")
            return [_placeholder(query, unavailable=True)]

        results = parse_instant_answer(data if isinstance(data, dict) else {}, limit)
        if not results:
            logger.info(f"No instant answer results for {query!r}")
            return [_placeholder(query)]
        return results


# Module-level singleton instance
_web_search_client: WebSearchClient | None = None


def get_web_search_client() -> WebSearchClient:
    """Get or create the global web search client."""
    global _web_search_client
    if _web_search_client is None:
        _web_search_client = WebSearchClient(timeout=get_provider_config().request_timeout)
    return _web_search_client

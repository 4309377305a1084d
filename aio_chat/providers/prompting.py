"""Prompt assembly and canned replies for chat providers."""

from agno.models.message import Message as AgnoMessage

from aio_chat.config.app_config import ModelInfo, Provider
from aio_chat.models.schemas import Message
from aio_chat.parsing.documents import truncate

MOCK_FILE_PREVIEW_LENGTH = 500


def format_message_content(message: Message, file_content_limit: int) -> str:
    """Inline a message's attached files after its text.

    Each file becomes a ``--- Content from <name> ---`` section holding at
    most ``file_content_limit`` characters.
    """
    content = message.content
    if message.files:
        content += "\n".join(
            f"\n\n--- Content from {f.name} ---\n{truncate(f.content or '', file_content_limit)}"
            for f in message.files
        )
    return content


def build_prompt(
    history: list[Message],
    file_content_limit: int,
    search_block: str = "",
) -> list[AgnoMessage]:
    """Convert a conversation into provider messages.

    Args:
        history: Ordered conversation, ending with the newest user message.
        file_content_limit: Max characters of each attachment to include.
        search_block: Formatted web search results for the newest user message.

    Returns:
        Agno messages ready to pass to an agent run.
    """
    last_user_index = max(
        (i for i, m in enumerate(history) if m.role == "user"),
        default=None,
    )

    prompt: list[AgnoMessage] = []
    for i, message in enumerate(history):
        content = format_message_content(message, file_content_limit)
        if search_block and i == last_user_index:
            content += search_block
        prompt.append(AgnoMessage(role=message.role, content=content))
    return prompt


def _content_with_file_previews(message: Message) -> str:
    content = message.content
    if message.files:
        previews = "\n".join(
            f"Content from {f.name}: {(f.content or '')[:MOCK_FILE_PREVIEW_LENGTH]}..."
            for f in message.files
        )
        content += f"\n\nFiles uploaded: {previews}"
    return content


def mock_reply(model: ModelInfo, last_message: Message) -> str:
    """Reply used when a provider has no credentials or cannot be reached."""
    provider = model.provider_kind

    if provider is Provider.GEMINI:
        return (
            f'[Gemini Pro Response] I understand you\'re asking: "{_content_with_file_previews(last_message)}". '
            "This is a mock response as Gemini API integration requires additional setup "
            "with Google AI Studio credentials."
        )

    if provider is Provider.CLAUDE:
        return (
            f'[Claude 3 Response] Thank you for your question: "{_content_with_file_previews(last_message)}". '
            "This is a mock response as Claude API integration requires Anthropic API credentials."
        )

    return (
        f'[{model.id} Response] I received your message: "{last_message.content}". '
        "This is a mock response as Ollama server is not running locally. "
        "To use Ollama models, please install and run Ollama locally."
    )

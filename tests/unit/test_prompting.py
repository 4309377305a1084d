"""Unit tests for prompt assembly and canned replies."""

from collections.abc import Callable

import pytest_check as check

from aio_chat.config.app_config import find_model
from aio_chat.models.schemas import Message, UploadedFile
from aio_chat.providers.prompting import build_prompt, format_message_content, mock_reply


class TestFormatMessageContent:
    """Tests for inlining attachments."""

    def test_plain_message(self, make_message: Callable[..., Message]) -> None:
        """Messages without files are unchanged."""
        check.equal(format_message_content(make_message("Hi"), 100), "Hi")

    def test_inlines_files_with_limit(self, make_message: Callable[..., Message]) -> None:
        """Attachment text is appended under a header and truncated."""
        files = [
            UploadedFile(name="a.txt", content="x" * 150),
            UploadedFile(name="b.txt", content="short"),
        ]

        content = format_message_content(make_message("Summarise", files=files), 100)

        check.equal(
            content,
            "Summarise"
            "\n\n--- Content from a.txt ---\n" + "x" * 100 + "..."
            "\n"
            "\n\n--- Content from b.txt ---\nshort",
        )

    def test_file_without_content(self, make_message: Callable[..., Message]) -> None:
        """Missing attachment text renders as an empty section."""
        files = [UploadedFile(name="scan.pdf")]

        content = format_message_content(make_message("Read", files=files), 100)

        check.equal(content, "Read\n\n--- Content from scan.pdf ---\n")


class TestBuildPrompt:
    """Tests for conversion to provider messages."""

    def test_roles_and_order_preserved(self, make_message: Callable[..., Message]) -> None:
        history = [
            make_message("Q1"),
            make_message("A1", role="assistant"),
            make_message("Q2"),
        ]

        prompt = build_prompt(history, 5000)

        check.equal([m.role for m in prompt], ["user", "assistant", "user"])
        check.equal([m.content for m in prompt], ["Q1", "A1", "Q2"])

    def test_search_block_on_latest_user_message(
        self, make_message: Callable[..., Message]
    ) -> None:
        """Search results are appended only to the newest user message."""
        history = [make_message("Q1"), make_message("A1", role="assistant"), make_message("Q2")]

        prompt = build_prompt(history, 5000, search_block="\n\nRESULTS")

        check.equal(prompt[0].content, "Q1")
        check.equal(prompt[2].content, "Q2\n\nRESULTS")


class TestMockReply:
    """Tests for canned provider replies."""

    def test_gemini_includes_file_preview(self, make_message: Callable[..., Message]) -> None:
        model = find_model("gemini-pro")
        message = make_message(
            "Check this", files=[UploadedFile(name="plan.txt", content="y" * 600)]
        )

        reply = mock_reply(model, message)

        check.is_true(reply.startswith("[Gemini Pro Response]"))
        check.is_in("Content from plan.txt: " + "y" * 500 + "...", reply)
        check.is_not_in("y" * 501, reply)

    def test_claude_mentions_credentials(self, make_message: Callable[..., Message]) -> None:
        reply = mock_reply(find_model("claude-3-opus-20240229"), make_message("Hello"))

        check.is_true(reply.startswith('[Claude 3 Response] Thank you for your question: "Hello"'))
        check.is_in("Anthropic API credentials", reply)

    def test_ollama_names_model(self, make_message: Callable[..., Message]) -> None:
        reply = mock_reply(find_model("llama3.2:latest"), make_message("Hello"))

        check.is_true(reply.startswith('[llama3.2:latest Response] I received your message: "Hello"'))
        check.is_in("Ollama server is not running locally", reply)

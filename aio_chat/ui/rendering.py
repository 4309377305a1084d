"""HTML rendering for chat messages: inline markdown and standalone export."""

import html
import re

from aio_chat.models.schemas import Message

_CODE_BLOCK = re.compile(r"```(\w*)\n?([\s\S]*?)```")
_INLINE_CODE = re.compile(r"`([^`]+)`")
_BOLD = re.compile(r"\*\*(.+?)\*\*|__(.+?)__")
_ITALIC = re.compile(r"\*([^*]+)\*|_([^_]+)_")
_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BULLET_ITEM = re.compile(r"^[-*]\s+")
_NUMBERED_ITEM = re.compile(r"^\d+\.\s+")


def _wrap_lists(lines: list[str], item: re.Pattern[str], open_tag: str, close_tag: str) -> list[str]:
    """Group consecutive list-item lines into a single list element."""
    out: list[str] = []
    in_list = False
    for line in lines:
        stripped = line.strip()
        if item.match(stripped):
            if not in_list:
                out.append(open_tag)
                in_list = True
            out.append(f"<li>{item.sub('', stripped)}</li>")
            continue
        if in_list:
            out.append(close_tag)
            in_list = False
        out.append(line)
    if in_list:
        out.append(close_tag)
    return out


def markdown_to_html(text: str) -> str:
    """Convert the markdown subset models commonly emit into HTML.

    Supports code blocks, inline code, bold, italic, links, bulleted and
    numbered lists. Input is HTML-escaped first.
    """
    text = html.escape(text)

    text = _CODE_BLOCK.sub(
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
        r"<code>\2</code></pre>",
        text,
    )
    text = _INLINE_CODE.sub(
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )
    text = _BOLD.sub(lambda m: f"<strong>{m.group(1) or m.group(2)}</strong>", text)
    text = _ITALIC.sub(lambda m: f"<em>{m.group(1) or m.group(2)}</em>", text)
    text = _LINK.sub(
        r'<a href="\2" class="text-blue-600 underline" target="_blank">\1</a>',
        text,
    )

    lines = text.split("\n")
    lines = _wrap_lists(
        lines, _BULLET_ITEM, '<ul class="list-disc list-inside my-2 space-y-1">', "</ul>"
    )
    lines = _wrap_lists(
        lines, _NUMBERED_ITEM, '<ol class="list-decimal list-inside my-2 space-y-1">', "</ol>"
    )
    return "<br>".join(lines)


EXPORT_STYLE = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            max-width: 800px;
            margin: 0 auto;
            padding: 20px;
            background-color: #f9fafb;
        }
        .message {
            background: white;
            border-radius: 12px;
            padding: 20px;
            margin: 20px 0;
            box-shadow: 0 1px 3px rgba(0, 0, 0, 0.1);
        }
        .message-header { margin-bottom: 12px; font-weight: 600; color: #374151; }
        .assistant-message .message-header { color: #6366f1; }
        .message-content { white-space: pre-wrap; color: #374151; }
        .message-timestamp { font-size: 0.875rem; color: #9ca3af; margin-top: 12px; }
        .files { margin-bottom: 12px; padding: 8px; background: #f3f4f6; border-radius: 6px; }
        .file-item { font-size: 0.875rem; color: #6b7280; }
"""


def export_filename(message: Message) -> str:
    """Download name for an exported message."""
    return f"chat-message-{message.timestamp.date().isoformat()}-{message.id}.html"


def message_to_html_document(message: Message) -> str:
    """Render a single message as a standalone HTML page for download."""
    author = "👤 You" if message.role == "user" else "🤖 AI Assistant"

    files_html = ""
    if message.files:
        items = "".join(
            f'<div class="file-item">📄 {html.escape(f.name)}</div>' for f in message.files
        )
        files_html = f'<div class="files"><strong>Attached files:</strong><br>{items}</div>'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Chat Message - {message.timestamp.date().isoformat()}</title>
    <style>{EXPORT_STYLE}    </style>
</head>
<body>
    <h1>Chat Message</h1>
    <div class="message {message.role}-message">
        <div class="message-header">{author}</div>
        {files_html}
        <div class="message-content">{html.escape(message.content)}</div>
        <div class="message-timestamp">{message.timestamp.strftime("%Y-%m-%d %H:%M:%S")}</div>
    </div>
</body>
</html>
"""

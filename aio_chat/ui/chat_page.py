"""NiceGUI chat interface with session sidebar and SSE streaming."""

import logging
import uuid

from nicegui import events, ui

from aio_chat.config.app_config import (
    DEFAULT_MODEL,
    DEFAULT_SETTINGS,
    FILE_CONTENT_LIMIT_MAX,
    FILE_CONTENT_LIMIT_MIN,
    PREDEFINED_PROMPTS,
    SUPPORTED_FILE_TYPES,
    SYSTEM_PROMPT_MAX_LENGTH,
    TRANSLATION_LIMIT_MAX,
    TRANSLATION_LIMIT_MIN,
    WEB_SEARCH_RESULTS_MAX,
    WEB_SEARCH_RESULTS_MIN,
    SettingsConfig,
)
from aio_chat.models.schemas import ChatSession, Message, UploadedFile, utc_now
from aio_chat.ui.api_client import ApiClient, ApiError
from aio_chat.ui.forms import models_by_provider, provider_of, settings_errors, settings_from_form
from aio_chat.ui.rendering import export_filename, markdown_to_html, message_to_html_document

logger = logging.getLogger(__name__)

APP_TITLE = "AIO Travel Itinerary assistant"

STATUS_MESSAGES = {
    "received": "Thinking...",
    "searching": "Searching the web...",
    "generating": "Generating response...",
}

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }
    body { background: #f1f5f9; }

    .header-bar { background: linear-gradient(135deg, #0f766e 0%, #0369a1 100%); }

    .message-user {
        background: #0f766e;
        color: white;
        border-radius: 16px 16px 4px 16px;
    }
    .message-assistant {
        background: white;
        color: #1f2937;
        border: 1px solid #e2e8f0;
        border-radius: 16px 16px 16px 4px;
    }
    .message-user a { color: #ccfbf1; }

    .session-active { background: #ccfbf1; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #0f766e;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }
    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .message-assistant pre { margin: 0.5rem 0; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
</style>
"""

api = ApiClient()


class ChatState:
    """Per-tab conversation state."""

    def __init__(self) -> None:
        self.messages: list[Message] = []
        self.session_id: str | None = None
        self.sessions: list[ChatSession] = []
        self.attachments: list[UploadedFile] = []
        self.model: str = DEFAULT_MODEL
        self.settings: SettingsConfig = DEFAULT_SETTINGS.model_copy()
        self.is_streaming: bool = False

    def reset(self, session_id: str | None = None) -> None:
        self.messages = []
        self.attachments = []
        self.session_id = session_id


def _new_message(role: str, content: str, files: list[UploadedFile] | None = None) -> Message:
    return Message(id=uuid.uuid4().hex, role=role, content=content, files=files or None)


@ui.page("/")
async def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    state = ChatState()

    sessions_container: ui.column
    messages_container: ui.column
    attachments_row: ui.row
    input_field: ui.textarea
    send_btn: ui.button
    model_select: ui.select

    # === Sessions ===

    async def refresh_sessions() -> None:
        try:
            state.sessions = await api.list_sessions()
        except ApiError as e:
            logger.warning(f"Failed to load chat sessions: {e}")
            return
        sessions_container.clear()
        with sessions_container:
            if not state.sessions:
                ui.label("No conversations yet").classes("text-sm text-gray-400 px-2")
            for session in reversed(state.sessions):
                render_session_item(session)

    def render_session_item(session: ChatSession) -> None:
        active = "session-active" if session.id == state.session_id else ""
        with ui.row().classes(f"w-full items-center no-wrap rounded-lg px-2 py-1 {active}"):
            with (
                ui.column()
                .classes("flex-grow gap-0 cursor-pointer min-w-0")
                .on("click", lambda s=session: open_session(s.id))
            ):
                ui.label(session.title).classes("text-sm font-medium truncate w-full")
                ui.label(f"{session.message_count} messages").classes("text-xs text-gray-400")
            ui.button(icon="edit", on_click=lambda s=session: open_rename_dialog(s)).props(
                "flat round dense size=sm"
            )
            ui.button(icon="delete", on_click=lambda s=session: delete_session(s.id)).props(
                "flat round dense size=sm color=negative"
            )

    async def new_chat(notify: bool = True) -> None:
        try:
            session = await api.create_session(title="New Chat")
        except ApiError as e:
            ui.notify(f"Failed to create new chat: {e}", type="negative")
            return
        state.reset(session.id)
        refresh_messages()
        refresh_attachments()
        await refresh_sessions()
        if notify:
            ui.notify("New chat created", type="positive")

    async def open_session(session_id: str) -> None:
        if state.is_streaming:
            return
        try:
            record = await api.get_session(session_id)
        except ApiError as e:
            ui.notify(f"Failed to load chat session: {e}", type="negative")
            return
        state.reset(session_id)
        state.messages = list(record.messages)
        refresh_messages()
        refresh_attachments()
        await refresh_sessions()

    async def delete_session(session_id: str) -> None:
        try:
            await api.delete_session(session_id)
        except ApiError as e:
            ui.notify(f"Failed to delete chat: {e}", type="negative")
            return
        if state.session_id == session_id:
            state.reset()
            refresh_messages()
        await refresh_sessions()
        ui.notify("Chat deleted")

    def open_rename_dialog(session: ChatSession) -> None:
        async def save() -> None:
            title = (title_input.value or "").strip()
            if not title or title == session.title:
                dialog.close()
                return
            try:
                await api.rename_session(session.id, title)
            except ApiError as e:
                ui.notify(f"Failed to rename chat: {e}", type="negative")
                return
            dialog.close()
            await refresh_sessions()
            ui.notify("Chat renamed successfully", type="positive")

        with ui.dialog() as dialog, ui.card().classes("w-96"):
            ui.label("Rename Chat").classes("text-lg font-semibold")
            title_input = (
                ui.input(value=session.title, placeholder="Enter new chat title...")
                .classes("w-full")
                .props("autofocus")
                .on("keydown.enter", save)
            )
            with ui.row().classes("w-full justify-end"):
                ui.button("Cancel", on_click=dialog.close).props("flat")
                ui.button("Rename", on_click=save)
        dialog.open()

    # === Settings ===

    def open_settings_dialog() -> None:
        current = state.settings

        def reset() -> None:
            file_limit.value = DEFAULT_SETTINGS.file_content_limit
            translation_limit.value = DEFAULT_SETTINGS.translation_limit
            translation_switch.value = DEFAULT_SETTINGS.enable_translation
            search_switch.value = DEFAULT_SETTINGS.enable_web_search
            results_limit.value = DEFAULT_SETTINGS.web_search_results_limit
            prompt_input.value = DEFAULT_SETTINGS.system_prompt
            ui.notify("Settings reset to defaults", type="info")

        def save() -> None:
            error = settings_errors(
                file_limit.value,
                translation_limit.value,
                results_limit.value,
                prompt_input.value or "",
            )
            if error:
                ui.notify(error, type="negative")
                return
            state.settings = settings_from_form(
                file_limit.value,
                translation_limit.value,
                translation_switch.value,
                search_switch.value,
                results_limit.value,
                prompt_input.value or "",
            )
            dialog.close()
            ui.notify("Settings saved successfully", type="positive")

        with ui.dialog() as dialog, ui.card().classes("w-[36rem] max-w-full"):
            ui.label("Application Settings").classes("text-lg font-semibold")

            file_limit = ui.number(
                "File Content Reading Limit (characters)",
                value=current.file_content_limit,
                min=FILE_CONTENT_LIMIT_MIN,
                max=FILE_CONTENT_LIMIT_MAX,
                format="%d",
            ).classes("w-full")
            ui.label(
                "Maximum number of characters to read from uploaded files."
            ).classes("text-xs text-gray-500")
            ui.separator()

            translation_switch = ui.switch(
                "Enable automatic translation to English", value=current.enable_translation
            )
            translation_limit = (
                ui.number(
                    "Translation Text Limit (characters)",
                    value=current.translation_limit,
                    min=TRANSLATION_LIMIT_MIN,
                    max=TRANSLATION_LIMIT_MAX,
                    format="%d",
                )
                .classes("w-full")
                .bind_visibility_from(translation_switch, "value")
            )
            ui.separator()

            search_switch = ui.switch(
                "Include web search results", value=current.enable_web_search
            )
            results_limit = (
                ui.number(
                    "Web search results",
                    value=current.web_search_results_limit,
                    min=WEB_SEARCH_RESULTS_MIN,
                    max=WEB_SEARCH_RESULTS_MAX,
                    format="%d",
                )
                .classes("w-full")
                .bind_visibility_from(search_switch, "value")
            )
            ui.separator()

            prompt_input = ui.textarea(
                "System Prompt", value=current.system_prompt
            ).classes("w-full").props(f"autogrow counter maxlength={SYSTEM_PROMPT_MAX_LENGTH}")
            ui.label(
                "This prompt defines the AI's role and behavior. "
                "It is included with every conversation."
            ).classes("text-xs text-gray-500")

            with ui.row().classes("w-full justify-between"):
                ui.button("Reset to Defaults", icon="restart_alt", on_click=reset).props("flat")
                with ui.row():
                    ui.button("Cancel", on_click=dialog.close).props("flat")
                    ui.button("Save Settings", icon="save", on_click=save)
        dialog.open()

    # === Attachments ===

    def refresh_attachments() -> None:
        attachments_row.clear()
        with attachments_row:
            for index, attachment in enumerate(state.attachments):
                ui.chip(
                    attachment.name,
                    icon="description",
                    removable=True,
                    on_value_change=lambda e, i=index: remove_attachment(i) if not e.value else None,
                ).props("dense outline color=teal")

    def remove_attachment(index: int) -> None:
        if 0 <= index < len(state.attachments):
            state.attachments.pop(index)
        refresh_attachments()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        name = e.file.name
        try:
            attachment = await api.upload(
                name, await e.file.read(), e.file.content_type, state.settings
            )
        except ApiError as err:
            ui.notify(f"Failed to upload {name}: {err}", type="negative")
            return
        state.attachments.append(attachment)
        refresh_attachments()
        ui.notify(f"{name} uploaded and processed successfully", type="positive")

    # === Messages ===

    def render_avatar(is_user: bool) -> None:
        color = "bg-teal-700" if is_user else "bg-slate-500"
        icon = "person" if is_user else "smart_toy"
        with ui.element("div").classes(
            f"w-9 h-9 rounded-full flex items-center justify-center shrink-0 {color}"
        ):
            ui.icon(icon).classes("text-white text-lg")

    def render_actions(msg: Message) -> None:
        with ui.button(icon="more_horiz").props("flat round dense size=xs color=grey"):
            with ui.menu():
                ui.menu_item("Copy", on_click=lambda m=msg: copy_message(m))
                if msg.role == "user":
                    ui.menu_item("Retry", on_click=lambda m=msg: retry_message(m))
                    ui.menu_item("Edit", on_click=lambda m=msg: open_edit_dialog(m))
                ui.menu_item("Download as HTML", on_click=lambda m=msg: download_message(m))

    def render_message(msg: Message) -> None:
        is_user = msg.role == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-end no-wrap"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[75%] gap-1"):
                if msg.files:
                    with ui.row().classes("gap-1"):
                        for f in msg.files:
                            ui.chip(f.name, icon="description").props("dense outline")
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    ui.html(markdown_to_html(msg.content), sanitize=False).classes(
                        "text-sm leading-relaxed"
                    )
                with ui.row().classes(
                    f"items-center gap-1 {'self-end' if is_user else 'self-start'}"
                ):
                    ui.label(msg.timestamp.astimezone().strftime("%I:%M %p")).classes(
                        "text-[10px] text-gray-400"
                    )
                    render_actions(msg)
            if is_user:
                render_avatar(True)

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not state.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("travel_explore").classes("text-5xl text-gray-300")
                    ui.label("Start a conversation").classes("text-lg text-gray-400")
                    with ui.row().classes("justify-center gap-2"):
                        for prompt in PREDEFINED_PROMPTS:
                            ui.button(
                                prompt, on_click=lambda p=prompt: use_prompt(p)
                            ).props("outline rounded dense no-caps color=teal")
            else:
                for msg in state.messages:
                    render_message(msg)

    def render_status_indicator() -> tuple[ui.row, ui.label]:
        """Render status indicator with animated dots and status text."""
        with ui.row().classes("w-full justify-start gap-3 items-end") as row:
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    status_label = ui.label("Thinking...").classes(
                        "text-sm text-gray-500 italic"
                    )
        return row, status_label

    def use_prompt(prompt: str) -> None:
        input_field.value = prompt
        input_field.run_method("focus")

    async def copy_message(msg: Message) -> None:
        ui.clipboard.write(msg.content)
        ui.notify("Message copied to clipboard")

    def download_message(msg: Message) -> None:
        ui.download.content(
            message_to_html_document(msg), export_filename(msg), media_type="text/html"
        )
        ui.notify("Message downloaded as HTML")

    async def save_to_session(msg: Message) -> None:
        if not state.session_id:
            return
        try:
            await api.save_message(state.session_id, msg)
        except ApiError as e:
            logger.warning(f"Failed to save message to session {state.session_id}: {e}")

    async def run_turn(user_message: Message) -> None:
        """Append a user message, stream the reply, and store both."""
        state.is_streaming = True
        send_btn.disable()
        try:
            await stream_turn(user_message)
        finally:
            state.is_streaming = False
            send_btn.enable()
            refresh_messages()

        await refresh_sessions()

    async def stream_turn(user_message: Message) -> None:
        state.messages.append(user_message)
        refresh_messages()
        await save_to_session(user_message)

        with messages_container:
            status_row, status_label = render_status_indicator()

        accumulated = ""
        response_html: ui.html | None = None
        failed = False

        def on_status(status: str) -> None:
            if status in STATUS_MESSAGES:
                status_label.set_text(STATUS_MESSAGES[status])

        def on_chunk(content: str) -> None:
            nonlocal accumulated, response_html
            if response_html is None:
                status_row.delete()
                with (
                    messages_container,
                    ui.row().classes("w-full justify-start gap-3 items-end no-wrap"),
                ):
                    render_avatar(False)
                    with ui.element("div").classes("message-assistant px-4 py-3 max-w-[75%]"):
                        response_html = ui.html("", sanitize=False).classes(
                            "text-sm leading-relaxed"
                        )
            accumulated += content
            response_html.set_content(markdown_to_html(accumulated))

        def on_complete() -> None:
            pass

        def on_error(error: str) -> None:
            nonlocal failed
            failed = True
            ui.notify(f"Failed to get response: {error}", type="negative")

        await api.stream_chat(
            list(state.messages),
            state.model,
            state.session_id,
            state.settings,
            on_chunk,
            on_status,
            on_complete,
            on_error,
        )

        if accumulated and not failed:
            assistant_message = _new_message("assistant", accumulated)
            state.messages.append(assistant_message)
            await save_to_session(assistant_message)

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if (not text and not state.attachments) or state.is_streaming:
            return

        user_message = _new_message("user", text, list(state.attachments))
        input_field.value = ""
        state.attachments = []
        refresh_attachments()

        if not state.session_id:
            await new_chat(notify=False)
        await run_turn(user_message)

    async def resend_from(msg: Message, content: str) -> None:
        index = next((i for i, m in enumerate(state.messages) if m.id == msg.id), None)
        if index is None or state.is_streaming:
            return
        state.messages = state.messages[:index]
        # Same id: the session store replaces it and drops the old replies
        await run_turn(msg.model_copy(update={"content": content, "timestamp": utc_now()}))

    async def retry_message(msg: Message) -> None:
        ui.notify("Retrying message...")
        await resend_from(msg, msg.content)

    def open_edit_dialog(msg: Message) -> None:
        async def save() -> None:
            content = (edit_input.value or "").strip()
            if not content:
                return
            dialog.close()
            await resend_from(msg, content)

        with ui.dialog() as dialog, ui.card().classes("w-[32rem] max-w-full"):
            ui.label("Edit message").classes("text-lg font-semibold")
            edit_input = ui.textarea(value=msg.content).classes("w-full").props("autogrow autofocus")
            with ui.row().classes("w-full justify-end"):
                ui.button("Cancel", on_click=dialog.close).props("flat")
                ui.button("Save & Send", icon="send", on_click=save)
        dialog.open()

    def on_provider_change(e: events.ValueChangeEventArguments) -> None:
        models = models_by_provider().get(e.value, {})
        model_select.set_options(models, value=next(iter(models), None))

    def on_model_change(e: events.ValueChangeEventArguments) -> None:
        if e.value:
            state.model = e.value

    # === UI Layout ===

    with ui.header().classes("header-bar items-center justify-between px-4 py-2"):
        with ui.row().classes("items-center gap-2"):
            ui.button(icon="menu", on_click=lambda: drawer.toggle()).props("flat round color=white")
            ui.icon("flight_takeoff").classes("text-white text-2xl")
            ui.label(APP_TITLE).classes("text-lg font-semibold text-white")
        with ui.row().classes("items-center gap-2"):
            provider = provider_of(state.model)
            ui.select(
                list(models_by_provider()),
                value=provider,
                on_change=on_provider_change,
            ).props("dense outlined dark options-dense").classes("w-32")
            model_select = ui.select(
                models_by_provider()[provider],
                value=state.model,
                on_change=on_model_change,
            ).props("dense outlined dark options-dense").classes("w-56")
            ui.button(icon="settings", on_click=open_settings_dialog).props(
                "flat round color=white"
            )

    with ui.left_drawer(value=True).classes("bg-white border-r") as drawer:
        with ui.row().classes("w-full items-center justify-between"):
            ui.label("Chat History").classes("text-base font-semibold")
            ui.button(icon="add", on_click=new_chat).props("flat round dense color=teal")
        ui.separator()
        sessions_container = ui.column().classes("w-full gap-1")

    with ui.column().classes("w-full max-w-4xl mx-auto h-[calc(100vh-5rem)] no-wrap"):
        with ui.scroll_area().classes("flex-grow w-full"):
            messages_container = ui.column().classes("w-full gap-4 p-4")

        with ui.column().classes("w-full gap-2 p-3 bg-white rounded-xl shadow"):
            attachments_row = ui.row().classes("gap-1")
            with ui.row().classes("w-full items-end gap-2 no-wrap"):
                ui.upload(
                    on_upload=handle_upload,
                    multiple=True,
                    auto_upload=True,
                ).props(
                    f'accept="{",".join(SUPPORTED_FILE_TYPES)}" flat dense hide-upload-btn'
                ).classes("w-40")
                input_field = (
                    ui.textarea(placeholder="Ask about your itinerary...")
                    .props("autogrow borderless dense rows=1")
                    .classes("flex-grow")
                    .on("keydown.enter.prevent", send_message)
                )
                send_btn = (
                    ui.button(icon="send", on_click=send_message)
                    .props("round unelevated color=teal")
                )

    refresh_messages()
    refresh_attachments()
    await refresh_sessions()


def main() -> None:
    """Run the UI on its own server, calling the API at the configured base URL."""
    config = get_server_config()
    ui.run(
        title=APP_TITLE,
        host=config.host,
        port=config.ui_port,
        reload=False,
        storage_secret=config.storage_secret,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()

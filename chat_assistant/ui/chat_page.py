"""NiceGUI chat page with SSE streaming support."""

import logging
import uuid
from datetime import datetime

import httpx
from nicegui import ui

from chat_assistant.ui.client import clear_conversation, stream_chat_response

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }

    .message-user {
        background: #667eea;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }
</style>
"""


class ChatSession:
    """Messages shown on one open page, plus its conversation identifier."""

    def __init__(self) -> None:
        self.messages: list[dict] = []
        self.session_id: str = str(uuid.uuid4())
        self.is_pending: bool = False

    def add_message(self, role: str, content: str) -> None:
        self.messages.append({
            "role": role,
            "content": content,
            "time": datetime.now().strftime("%I:%M %p"),
        })

    def reset(self) -> None:
        self.messages.clear()
        self.session_id = str(uuid.uuid4())


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()

    messages_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button
    clear_btn: ui.button

    def render_message(msg: dict) -> None:
        is_user = msg["role"] == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    ui.markdown(msg["content"]).classes("text-sm")
                ui.label(msg["time"]).classes("text-[10px] text-gray-400")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                ui.label("Start a conversation").classes("text-lg text-gray-400")
            for msg in session.messages:
                render_message(msg)

    def set_pending(pending: bool) -> None:
        session.is_pending = pending
        if pending:
            send_btn.disable()
            input_field.disable()
            clear_btn.disable()
        else:
            send_btn.enable()
            input_field.enable()
            clear_btn.enable()

    async def on_send_message() -> None:
        text = input_field.value.strip()
        if not text or session.is_pending:
            return

        input_field.value = ""
        set_pending(True)
        session.add_message("user", text)
        refresh_messages()

        with messages_container, ui.element("div").classes("message-assistant px-4 py-3"):
            reply_view = ui.markdown("...").classes("text-sm")

        accumulated = ""

        def on_chunk(content: str) -> None:
            nonlocal accumulated
            accumulated += content
            reply_view.set_content(accumulated)

        def on_complete() -> None:
            session.add_message("assistant", accumulated)

        def on_error(error: str) -> None:
            session.add_message("assistant", f"Error: {error}")
            ui.notify(error, type="negative")

        try:
            await stream_chat_response(
                text, session.session_id, on_chunk, on_complete, on_error
            )
        finally:
            set_pending(False)
            refresh_messages()

    async def on_clear_conversation() -> None:
        if session.is_pending:
            return
        try:
            await clear_conversation(session.session_id)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to clear conversation {session.session_id}: {e}")
            ui.notify("Could not clear the conversation on the server", type="warning")
        session.reset()
        refresh_messages()

    with ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
        "height: calc(100vh - 4rem)"
    ):
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            ui.label("Chat Assistant").classes("text-lg font-semibold text-white")
            clear_btn = ui.button(
                icon="delete_sweep", on_click=on_clear_conversation
            ).props("flat round color=white")

        with ui.scroll_area().classes("flex-grow w-full bg-gray-50"):
            messages_container = ui.column().classes("w-full gap-4 p-5")
            refresh_messages()

        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            input_field = (
                ui.textarea(placeholder="Type a message...")
                .props("autogrow dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", on_send_message)
            )
            send_btn = ui.button(icon="send", on_click=on_send_message).props(
                "round unelevated"
            )

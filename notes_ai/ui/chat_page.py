"""NiceGUI tutor chat page."""

import os
import re

from nicegui import events, ui

from notes_ai.client.config import ClientConfig
from notes_ai.client.controller import ChatSessionController
from notes_ai.client.corpus import CorpusCache
from notes_ai.client.gateway_client import GatewayClient
from notes_ai.models.schemas import ChatTurn, Role

CHAT_PATH = "/chat"


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Supports: bold, italic, inline code, code blocks, links, lists.
    """
    # Escape HTML entities first
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    # Code blocks (```code```)
    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs"><code>\2</code></pre>',
        text,
    )

    # Inline code (`code`)
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )

    # Bold (**text**)
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)

    # Italic (*text*); underscores are left alone, they are common in Python names
    text = re.sub(r"\*([^*\n]+)\*", r"<em>\1</em>", text)

    # Links [text](url)
    text = re.sub(
        r"\[([^\]]+)\]\(([^)]+)\)",
        r'<a href="\2" class="text-blue-600 underline" target="_blank">\1</a>',
        text,
    )

    text = _wrap_list_items(text, r"^[-*]\s+", "ul", "list-disc")
    text = _wrap_list_items(text, r"^\d+\.\s+", "ol", "list-decimal")

    # Line breaks outside code blocks
    parts = re.split(r"(<pre[\s\S]*?</pre>)", text)
    return "".join(
        part if part.startswith("<pre") else part.replace("\n", "<br>") for part in parts
    )


def _wrap_list_items(text: str, marker: str, tag: str, style: str) -> str:
    in_list = False
    result = []
    for line in text.split("\n"):
        stripped = line.strip()
        if re.match(marker, stripped):
            if not in_list:
                result.append(f'<{tag} class="{style} list-inside my-2 space-y-1">')
                in_list = True
            result.append(f"<li>{re.sub(marker, '', stripped)}</li>")
        else:
            if in_list:
                result.append(f"</{tag}>")
                in_list = False
            result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }
    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }
    .header { background: linear-gradient(135deg, #306998 0%, #ffd43b 160%); }

    .message-user {
        background: #306998;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }
    .message-error {
        background: #fef2f2;
        color: #991b1b;
        border: 1px solid #fecaca;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #306998;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }
    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
    }
    .input-box:focus-within { border-color: #306998; }

    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant a { color: #306998; }
</style>
"""


def register_chat_page(corpus_cache: CorpusCache, config: ClientConfig) -> None:
    """Register the tutor page at /chat.

    Args:
        corpus_cache: Load-once corpus shared by every page session.
        config: Client configuration (gateway URL, timeout).
    """

    @ui.page(CHAT_PATH)
    async def chat_page() -> None:
        ui.add_head_html(CUSTOM_CSS)
        corpus = await corpus_cache.get()
        controller = ChatSessionController(
            corpus=corpus,
            gateway=GatewayClient(config.api_base_url, timeout=config.timeout),
        )

        messages_container: ui.column
        attachment_row: ui.row
        input_field: ui.textarea
        send_btn: ui.button
        upload: ui.upload
        status_container: ui.column

        def render_message(turn: ChatTurn) -> None:
            is_user = turn.role is Role.USER
            align = "justify-end" if is_user else "justify-start"
            bubble = "message-user" if is_user else "message-assistant"
            if turn.is_error:
                bubble += " message-error"

            with ui.row().classes(f"w-full {align} gap-3 items-end"):
                with ui.column().classes("max-w-[75%] gap-1"):
                    with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                        if is_user or turn.is_error:
                            ui.label(turn.text).classes("text-sm whitespace-pre-wrap")
                        else:
                            ui.html(markdown_to_html(turn.text), sanitize=False).classes(
                                "text-sm leading-relaxed"
                            )
                    ui.label(turn.time).classes(
                        f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                    )

        def render_attachment() -> None:
            attachment_row.clear()
            current = controller.attachment
            attachment_row.set_visibility(bool(current.name))
            if not current.name:
                return
            with attachment_row:
                ui.icon("description").classes("text-gray-500")
                ui.label(current.name).classes("text-xs text-gray-600")
                ui.button(icon="close", on_click=remove_attachment).props(
                    "flat round dense size=sm"
                ).tooltip("Remove file")

        def refresh() -> None:
            messages_container.clear()
            with messages_container:
                for turn in controller.transcript:
                    render_message(turn)
            render_attachment()

        def on_pending(pending: bool) -> None:
            send_btn.set_enabled(not pending)
            # Lives outside messages_container, so transcript redraws keep it.
            status_container.clear()
            if pending:
                with status_container:
                    with ui.row().classes("w-full justify-start"):
                        with ui.element("div").classes("message-assistant px-4 py-3"):
                            with ui.row().classes("items-center gap-2"):
                                with ui.row().classes("gap-1"):
                                    for _ in range(3):
                                        ui.element("div").classes("typing-dot")
                                ui.label("Thinking...").classes("text-sm text-gray-500 italic")

        controller.on_change = refresh
        controller.on_pending = on_pending

        async def send_message() -> None:
            text = input_field.value or ""
            if not text.strip() or controller.is_pending:
                return
            input_field.value = ""
            upload.reset()
            await controller.submit(text)

        async def handle_upload(e: events.UploadEventArguments) -> None:
            data = await e.file.read()
            controller.attach_file(e.file.name, data)
            upload.reset()
            render_attachment()

        def remove_attachment() -> None:
            controller.remove_attachment()

        # === UI Layout ===
        with (
            ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
            ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
                "height: calc(100vh - 4rem)"
            ),
        ):
            # Header
            with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
                with ui.row().classes("items-center gap-3"):
                    ui.icon("school").classes("text-white text-3xl")
                    ui.label("PyPro-AI").classes("text-lg font-semibold text-white")
                notes_label = (
                    "Notes unavailable"
                    if corpus.error
                    else f"{len(corpus.sections)} notes loaded"
                )
                with ui.element("div").classes("bg-white/20 rounded-full px-3 py-1"):
                    ui.label(notes_label).classes("text-xs text-white").tooltip(
                        "\n".join(corpus.titles) or notes_label
                    )

            # Messages
            with (
                ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
                ui.column().classes("w-full p-5"),
            ):
                messages_container = ui.column().classes("w-full gap-4")
                status_container = ui.column().classes("w-full pt-4")

            # Input
            with ui.column().classes("w-full p-4 gap-2 bg-white border-t"):
                attachment_row = ui.row().classes("items-center gap-2")
                with ui.row().classes("w-full gap-3 items-end"):
                    upload = (
                        ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1)
                        .props("flat dense hide-upload-btn accept=.py,.txt,.md,.json,.csv,.pdf")
                        .classes("w-40")
                    )
                    with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                        input_field = (
                            ui.textarea(placeholder="Ask about Python...")
                            .props("autogrow borderless dense rows=1")
                            .classes("w-full")
                            .on("keydown.enter.prevent", send_message)
                        )
                    send_btn = ui.button(icon="send", on_click=send_message).props(
                        "round unelevated color=primary"
                    )

        controller.greeting()
        refresh()


def main() -> None:
    """Run the chat page on its own (gateway served elsewhere)."""
    from notes_ai.client.config import get_client_config

    config = get_client_config()
    register_chat_page(CorpusCache(config.manifest_url), config)
    ui.run(title="PyPro-AI", port=int(os.getenv("UI_PORT", "8080")), reload=False)


if __name__ in {"__main__", "__mp_main__"}:
    main()

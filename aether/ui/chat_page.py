"""NiceGUI chat interface with SSE streaming, image upload and citations."""

import base64
import logging
import os
from datetime import datetime

import httpx
from nicegui import events, ui

from aether.models.schemas import ImagePayload, Role
from aether.ui.message_store import Message, MessageStore
from aether.ui.password_gate import is_authenticated, render_password_gate
from aether.ui.render import markdown_to_html, plain_text_to_html
from aether.ui.stream_reducer import API_BASE_URL, UpstreamError, send_turn

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10MB

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

    .header { background: linear-gradient(135deg, #0f766e 0%, #1e3a8a 100%); }

    .message-user {
        background: linear-gradient(135deg, #0f766e 0%, #1e3a8a 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-model {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: linear-gradient(135deg, #0f766e 0%, #1e3a8a 100%); }
    .avatar-model { background: #6b7280; }

    .citation-card { border: 1px solid #e5e7eb; border-radius: 8px; }
    .citation-card:hover { background: #f9fafb; }

    .cursor { animation: pulse 1s infinite; }
    @keyframes pulse { 50% { opacity: 0; } }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
    }
    .input-box:focus-within { border-color: #0f766e; }

    .send-btn { background: linear-gradient(135deg, #0f766e 0%, #1e3a8a 100%) !important; }

    .message-model pre { margin: 0.5rem 0; }
    .message-model code { font-family: 'Menlo', 'Monaco', monospace; }
</style>
"""


def render_avatar(role: Role) -> None:
    icon = "person" if role == Role.USER else "smart_toy"
    avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center avatar-{role.value}"
    with ui.element("div").classes(avatar_classes):
        ui.icon(icon).classes("text-white text-lg")


def render_citations(message: Message) -> None:
    ui.label("Sources").classes("text-xs font-semibold text-gray-500 mt-3")
    with ui.grid(columns=2).classes("w-full gap-2"):
        for citation in message.citations:
            with ui.link(target=citation.url, new_tab=True).classes("no-underline text-inherit"):
                with ui.element("div").classes("citation-card px-3 py-2"):
                    ui.label(f"[{citation.index}] {citation.title or citation.url}").classes(
                        "text-xs font-medium line-clamp-2"
                    )


def render_message(message: Message) -> None:
    is_user = message.role == Role.USER
    align = "justify-end" if is_user else "justify-start"

    with ui.row().classes(f"w-full {align} gap-3 items-end"):
        if not is_user:
            render_avatar(message.role)
        with ui.column().classes("max-w-[75%] gap-1"):
            with ui.element("div").classes(f"px-4 py-3 message-{message.role.value}"):
                if message.image:
                    ui.image(message.image.url).classes("w-64 rounded-md mb-2")
                if message.is_streaming and not message.content:
                    with ui.row().classes("items-center gap-2"):
                        ui.spinner(size="sm")
                        ui.label("Generating...").classes("text-sm text-gray-500 italic")
                else:
                    if is_user:
                        content = plain_text_to_html(message.content)
                    else:
                        content = markdown_to_html(message.content)
                    if message.is_streaming:
                        content += '<span class="cursor">▍</span>'
                    ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                if message.citations:
                    render_citations(message)
            ui.label(message.time).classes(
                f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
            )
        if is_user:
            render_avatar(message.role)


def render_chat(store: MessageStore) -> None:
    """Build the chat panel around a message store."""
    state = {"loading": False, "image": None}

    @ui.refreshable
    def transcript() -> None:
        if not len(store):
            with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                ui.icon("forum").classes("text-5xl text-gray-300")
                ui.label("Start a conversation").classes("text-lg text-gray-400")
            return
        for message in store:
            render_message(message)

    @ui.refreshable
    def image_preview() -> None:
        image: ImagePayload | None = state["image"]
        if image is None:
            return
        with ui.element("div").classes("relative w-32 mb-2"):
            ui.image(f"data:{image.type};base64,{image.data}").classes("w-32 h-32 rounded-md")
            ui.button(icon="close", on_click=clear_image).props("flat round dense size=sm").classes(
                "absolute top-1 right-1 bg-black/50 text-white"
            )

    def on_store_change() -> None:
        transcript.refresh()
        scroll_area.scroll_to(percent=1.0)

    def clear_image() -> None:
        state["image"] = None
        image_preview.refresh()

    def set_loading(loading: bool) -> None:
        state["loading"] = loading
        for control in (send_btn, upload_btn, input_field, download_btn, clear_btn):
            control.set_enabled(not loading)

    async def handle_upload(e: events.UploadEventArguments) -> None:
        data = await e.file.read()
        upload.reset()
        mime_type = e.file.content_type or ""
        if not mime_type.startswith("image/"):
            ui.notify("Only image files can be attached.", type="warning")
            return
        if len(data) > MAX_IMAGE_SIZE:
            ui.notify("Image exceeds maximum allowed size (10MB).", type="warning")
            return
        state["image"] = ImagePayload(data=base64.b64encode(data).decode("ascii"), type=mime_type)
        image_preview.refresh()

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        image: ImagePayload | None = state["image"]
        if (not text and image is None) or state["loading"]:
            return

        input_field.value = ""
        clear_image()
        set_loading(True)
        try:
            async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=120.0) as client:
                await send_turn(client, store, text, image)
        except UpstreamError as e:
            ui.notify(str(e), type="negative")
        finally:
            set_loading(False)

    def clear_chat() -> None:
        logger.info(f"Clearing transcript of {len(store)} messages")
        store.clear()
        clear_dialog.close()

    def download_history() -> None:
        if not len(store):
            ui.notify("There is no conversation to download yet.")
            return
        filename = f"aether-chat-{datetime.now().strftime('%Y%m%dT%H%M%S')}.json"
        ui.download.content(store.export_json(), filename)

    with ui.dialog() as clear_dialog, ui.card():
        ui.label("Clear the conversation?").classes("text-lg font-semibold")
        ui.label("This cannot be undone. All messages will be removed.").classes(
            "text-sm text-gray-500"
        )
        with ui.row().classes("w-full justify-end"):
            ui.button("Cancel", on_click=clear_dialog.close).props("flat")
            ui.button("Clear", on_click=clear_chat).props("color=negative")

    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-4xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("auto_awesome").classes("text-white text-3xl")
                ui.label("Aether").classes("text-lg font-semibold text-white")
            with ui.row().classes("items-center gap-1"):
                download_btn = ui.button(icon="download", on_click=download_history).props(
                    "flat round color=white"
                )
                clear_btn = ui.button(icon="delete", on_click=clear_dialog.open).props(
                    "flat round color=white"
                )

        # Messages
        with ui.scroll_area().classes("flex-grow w-full bg-gray-50") as scroll_area:
            with ui.column().classes("w-full p-5 gap-4"):
                transcript()

        # Input
        with ui.column().classes("w-full p-4 gap-0 bg-white border-t"):
            image_preview()
            with ui.row().classes("w-full gap-3 items-end"):
                upload = (
                    ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1)
                    .props('accept="image/*"')
                    .classes("hidden")
                )
                upload_btn = ui.button(
                    icon="image", on_click=lambda: upload.run_method("pickFiles")
                ).props("flat round")
                with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                    input_field = (
                        ui.textarea(placeholder="Type a message or attach an image...")
                        .props("autogrow borderless dense rows=1")
                        .classes("w-full")
                        .on("keydown.enter.prevent", send_message)
                    )
                send_btn = (
                    ui.button(icon="send", on_click=send_message)
                    .props("round unelevated")
                    .classes("send-btn")
                )

    store.set_listener(on_store_change)


@ui.page("/")
def chat_page() -> None:
    """Main chat page, behind the optional password gate."""
    ui.add_head_html(CUSTOM_CSS)
    store = MessageStore()
    root = ui.column().classes("w-full")

    def show_chat() -> None:
        root.clear()
        with root:
            render_chat(store)

    with root:
        if is_authenticated():
            render_chat(store)
        else:
            render_password_gate(show_chat)


def main() -> None:
    ui.run(
        title="Aether",
        port=int(os.getenv("UI_PORT", "8080")),
        reload=False,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "aether-chat-secret"),
    )


if __name__ == "__main__":
    main()

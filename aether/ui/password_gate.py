"""Optional shared-password gate in front of the chat page.

This is a deterrent, not a security boundary: anyone who can read the server
environment knows the password, and the flag lives in the browser session.
"""

import hmac
import logging
import os
from collections.abc import Callable

from nicegui import app, ui

logger = logging.getLogger(__name__)

SESSION_FLAG = "authenticated"


def access_password() -> str:
    """Configured password; empty disables the gate."""
    return os.getenv("ACCESS_PASSWORD", "")


def check_password(entered: str, expected: str) -> bool:
    """Compare an entered password with the configured one.

    An empty expected password always passes.
    """
    if not expected:
        return True
    return hmac.compare_digest(entered.encode(), expected.encode())


def is_authenticated() -> bool:
    if not access_password():
        return True
    return bool(app.storage.user.get(SESSION_FLAG, False))


def render_password_gate(on_success: Callable[[], None]) -> None:
    """Render the password card; calls ``on_success`` once unlocked."""

    def attempt() -> None:
        if check_password(password.value or "", access_password()):
            app.storage.user[SESSION_FLAG] = True
            ui.notify("Welcome to Aether.", type="positive")
            on_success()
        else:
            logger.info("Rejected access attempt")
            ui.notify("Incorrect password, please try again.", type="negative")
            password.value = ""

    with ui.card().classes("w-full max-w-sm mx-auto mt-24 p-6 gap-4 items-stretch"):
        ui.label("Aether").classes("text-2xl font-semibold text-center")
        ui.label("A password is required to use this app.").classes(
            "text-sm text-gray-500 text-center"
        )
        password = (
            ui.input(placeholder="Access password", password=True)
            .classes("w-full")
            .on("keydown.enter", attempt)
        )
        ui.button("Enter", on_click=attempt).classes("w-full send-btn")

"""
Non-blocking confirmation modal.

ask() opens the dialog and suspends the caller until confirm() or cancel()
resolves it, so the event loop keeps serving other requests meanwhile.
"""

import asyncio
from html import escape
from typing import Any, Optional

from core.i18n import Translator


class ConfirmDialog:
    """A single pending yes/no question."""

    def __init__(self) -> None:
        self.message_key: Optional[str] = None
        self.variables: dict[str, Any] = {}
        self._answer: Optional[asyncio.Future] = None

    @property
    def is_open(self) -> bool:
        return self._answer is not None and not self._answer.done()

    async def ask(self, message_key: str, **variables: Any) -> bool:
        """Open the dialog and wait for the user's answer."""
        if self.is_open:
            # A newer question replaces the pending one
            self._answer.set_result(False)

        self.message_key = message_key
        self.variables = variables
        answer: asyncio.Future = asyncio.get_running_loop().create_future()
        self._answer = answer
        try:
            return await answer
        finally:
            if self._answer is answer:
                self._answer = None
                self.message_key = None
                self.variables = {}

    def resolve(self, confirmed: bool) -> None:
        if self.is_open:
            self._answer.set_result(confirmed)

    def confirm(self) -> None:
        self.resolve(True)

    def cancel(self) -> None:
        self.resolve(False)

    def render(self, t: Translator, confirm_action: str, cancel_action: str) -> str:
        if not self.is_open or self.message_key is None:
            return ""
        message = t(self.message_key, **self.variables)
        return (
            '<div class="modal confirm-dialog">'
            f"<p>{escape(message)}</p>"
            f'<form method="post" action="{escape(cancel_action)}">'
            f'<button type="submit" class="cancel">{escape(t("common.cancel"))}</button></form>'
            f'<form method="post" action="{escape(confirm_action)}">'
            f'<button type="submit" class="confirm">{escape(t("common.delete"))}</button></form>'
            "</div>"
        )

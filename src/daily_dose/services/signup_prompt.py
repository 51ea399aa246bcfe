"""Delayed account-creation nudge shown after a plan first becomes ready."""

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class SignupPrompter:
    """
    Shows the register prompt once per session, a short delay after a pet
    reaches Ready, if nobody is logged in. Dismissing keeps it suppressed;
    a successful login or registration resets it.
    """

    def __init__(
        self,
        has_session: Callable[[], bool],
        *,
        delay_seconds: float = 2.0,
        on_prompt: Callable[[str], None] | None = None,
    ) -> None:
        self._has_session = has_session
        self._delay = delay_seconds
        self._on_prompt = on_prompt
        self._pending = False
        self._visible = False
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def visible(self) -> bool:
        return self._visible

    def notify_ready(self, *_: object) -> None:
        """Call from the event loop when a plan becomes ready."""
        if self._has_session() or self._pending:
            return
        self._pending = True
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)
        logger.debug("Signup prompt scheduled in %.1fs", self._delay)

    def _fire(self) -> None:
        self._handle = None
        if self._has_session():
            self._pending = False
            return
        self._visible = True
        logger.info("Showing signup prompt")
        if self._on_prompt:
            self._on_prompt("register")

    def dismiss(self) -> None:
        self._visible = False

    def satisfied(self, *_: object) -> None:
        """User logged in or registered."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._visible = False
        self._pending = False

"""tmux-backed session bridge."""

import json
import logging
import re
from typing import Iterable, Protocol

from ..config import SessionDescriptor
from .process import ProcessLauncher

logger = logging.getLogger(__name__)

# `&a` style colour/format codes as typed by operators
_FORMAT_CODE = re.compile(r"&([0-9a-fk-or])", re.IGNORECASE)


class SessionBridge(Protocol):
    """Delivers console commands to named sessions."""

    async def send_command(self, session_name: str, raw_command: str) -> None:
        ...


def escape_separator(argument: str) -> str:
    """Keep tmux from reading a trailing `;` as a command separator."""
    if argument.endswith(";"):
        return argument[:-1] + "\\;"
    return argument


def replace_formatting(text: str) -> str:
    """Translate `&x` format codes into section-sign codes."""
    return _FORMAT_CODE.sub(lambda m: "§" + m.group(1).lower(), text)


def format_chat(text: str, template: str = "tellraw @a {payload}") -> str:
    """
    Build a broadcast chat command for ``text``.

    The text is JSON-encoded into a ``{"text": ...}`` component so quotes,
    braces and backslashes cannot break out of the payload, and newlines are
    escaped so the command stays on one console line.
    """
    payload = json.dumps({"text": replace_formatting(text)}, ensure_ascii=False)
    return template.replace("{payload}", payload)


class TmuxBridge:
    """Sends keystrokes to tmux sessions hosting server consoles."""

    def __init__(
        self,
        sessions: Iterable[SessionDescriptor],
        launcher: ProcessLauncher,
        tmux: str = "tmux",
    ) -> None:
        self._handles = {s.name: s.handle for s in sessions}
        self._launcher = launcher
        self._tmux = tmux

    @property
    def session_names(self) -> list[str]:
        return list(self._handles)

    async def send_command(self, session_name: str, raw_command: str) -> None:
        """Type a command into a session's console and press Enter."""
        handle = self._handles.get(session_name)
        if handle is None:
            logger.warning(f"Unknown session {session_name!r}, dropping command")
            return

        logger.info(f"{session_name}={raw_command}")
        # `--` stops a leading dash in the command being read as a flag
        await self._launcher.spawn(
            self._tmux,
            [
                "send-keys", "-t", handle, "-l", "--", escape_separator(raw_command),
                ";", "send-keys", "-t", handle, "Enter",
            ],
        )

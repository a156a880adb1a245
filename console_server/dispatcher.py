"""Operator command protocol."""

import logging
import time

from .bridge import ProcessLauncher, SessionBridge, format_chat
from .config import Config
from .monitor import HealthSampler

logger = logging.getLogger(__name__)

INVALID_COMMAND = "invalid command"
RESTARTING = "restarting..."
RESTART_FAILED = "failed to execute restart script"
NO_RESTART_SCRIPT = "no restart script found"


def parse_command(message: str) -> tuple[str, str | None]:
    """
    Split a message on its first space.

    Returns the keyword and the remainder, or None for the remainder when the
    message contains no space at all.
    """
    keyword, sep, rest = message.partition(" ")
    if not sep:
        return message, None
    return keyword, rest


class CommandDispatcher:
    """
    Executes one operator command and produces at most one response.

    Keywords are case-sensitive. Unrecognized input yields None.
    """

    def __init__(
        self,
        config: Config,
        bridge: SessionBridge,
        sampler: HealthSampler,
        launcher: ProcessLauncher,
    ) -> None:
        self._sessions = tuple(s.name for s in config.sessions)
        self._restart_script = config.restart_script
        self._chat_template = config.bridge.chat_template
        self._bridge = bridge
        self._sampler = sampler
        self._launcher = launcher
        self._last_pong = 0

        self.commands = {
            "MSG": self.broadcast,
            "CMD": self.console_command,
            "RESTART": self.restart,
            "SHELL": self.shell,
            "CHECK": self.check,
            "HEARTBEAT": self.heartbeat,
            "PING": self.ping,
        }

    async def dispatch(self, message: str) -> str | None:
        keyword, rest = parse_command(message)
        handler = self.commands.get(keyword)
        if handler is None:
            return None
        return await handler(rest)

    async def broadcast(self, rest: str | None) -> None:
        """Send a chat line to every configured session."""
        if rest is None:
            return None
        command = format_chat(rest, self._chat_template)
        for name in self._sessions:
            await self._bridge.send_command(name, command)
        return None

    async def console_command(self, rest: str | None) -> str | None:
        """Pass ``<target> <command>`` through to one session verbatim."""
        if rest is None:
            return INVALID_COMMAND
        target, command = parse_command(rest)
        if command is None:
            return None
        await self._bridge.send_command(target, command)
        return None

    async def restart(self, rest: str | None) -> str:
        if not self._restart_script:
            return NO_RESTART_SCRIPT
        logger.info(f"Running restart script {self._restart_script}")
        try:
            status = await self._launcher.run("sh", [self._restart_script])
        except (OSError, ValueError) as e:
            logger.error(f"Could not execute restart script {self._restart_script}: {e}")
            return RESTART_FAILED
        if status == 0:
            return RESTARTING
        logger.warning(f"Restart script exited with status {status}")
        return RESTART_FAILED

    async def shell(self, rest: str | None) -> None:
        """Launch ``<program> [args...]`` detached, ignoring its outcome."""
        tokens = (rest or "").split()
        if not tokens:
            return None
        program, args = tokens[0], tokens[1:]
        logger.info(f"Shell command {program}")
        await self._launcher.spawn(program, args)
        return None

    async def check(self, rest: str | None) -> str:
        await self._sampler.refresh_async()
        return self._sampler.render()

    async def heartbeat(self, rest: str | None) -> str:
        await self._sampler.refresh_async()
        return "true" if self._sampler.is_overloaded() else "false"

    async def ping(self, rest: str | None) -> str:
        # wall clock can step backwards; never report an earlier time
        now = max(time.time_ns() // 1_000_000, self._last_pong)
        self._last_pong = now
        return f"PONG {now}"

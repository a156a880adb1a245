"""Subprocess launching for shell, restart and tmux commands."""

import asyncio
import logging

logger = logging.getLogger(__name__)


class ProcessLauncher:
    """
    Starts external programs on the running event loop.

    Detached processes are reaped by background tasks that this launcher
    keeps referenced until they finish.
    """

    def __init__(self) -> None:
        self._background: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of detached processes not yet reaped."""
        return len(self._background)

    async def spawn(self, program: str, args: list[str] | None = None) -> bool:
        """
        Start a program without waiting for it to exit.

        Output is not captured. Returns False if the program could not be
        launched.
        """
        args = args or []
        try:
            proc = await asyncio.create_subprocess_exec(
                program,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except (OSError, ValueError) as e:
            # ValueError: embedded null byte in an argument
            logger.warning(f"Could not launch {program}: {e}")
            return False

        task = asyncio.create_task(self._reap(program, proc))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return True

    async def run(self, program: str, args: list[str] | None = None) -> int:
        """
        Run a program to completion and return its exit status.

        Raises:
            OSError: If the program could not be launched.
            ValueError: If an argument contains a null byte.
        """
        proc = await asyncio.create_subprocess_exec(program, *(args or []))
        return await proc.wait()

    async def _reap(self, program: str, proc: asyncio.subprocess.Process) -> None:
        returncode = await proc.wait()
        if returncode != 0:
            logger.info(f"{program} (pid {proc.pid}) exited with status {returncode}")

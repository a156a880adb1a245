"""Bridge to external console sessions and processes."""

from .process import ProcessLauncher
from .tmux import SessionBridge, TmuxBridge, escape_separator, format_chat, replace_formatting

__all__ = [
    "ProcessLauncher",
    "SessionBridge",
    "TmuxBridge",
    "escape_separator",
    "format_chat",
    "replace_formatting",
]

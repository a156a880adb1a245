"""Console Server - WebSocket control plane for named console sessions."""

try:
    from importlib.metadata import version
    __version__ = version("console-server")
except Exception:
    __version__ = "unknown"

"""Client for the Niri compositor, queried over its IPC socket."""

from __future__ import annotations

import json
import os
import socket
from pathlib import Path

from keyshift.client import Client


class NiriClient(Client):
    """Reports the focused window of Niri.

    The socket path comes from ``NIRI_SOCKET`` unless one is given. A new
    connection is made for each query.
    """

    def __init__(self, socket_path: str | os.PathLike | None = None, timeout: float = 1.0) -> None:
        self._socket_path = socket_path
        self._timeout = timeout

    def _path(self) -> str | None:
        if self._socket_path is not None:
            return os.fspath(self._socket_path)
        return os.environ.get("NIRI_SOCKET")

    def _connect(self, path: str) -> socket.socket:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self._timeout)
        try:
            sock.connect(path)
        except OSError:
            sock.close()
            raise
        return sock

    def supported(self) -> bool:
        path = self._path()
        if not path or not Path(path).exists():
            return False
        try:
            self._connect(path).close()
        except OSError:
            return False
        return True

    def _active_window(self) -> dict | None:
        path = self._path()
        if not path:
            return None
        try:
            with self._connect(path) as sock:
                sock.sendall(b'"Windows"\n')
                with sock.makefile("rb") as reader:
                    line = reader.readline()
        except OSError:
            return None
        try:
            reply = json.loads(line)
        except ValueError:
            return None
        if not isinstance(reply, dict) or not isinstance(reply.get("Ok"), dict):
            return None
        windows = reply["Ok"].get("Windows")
        if not isinstance(windows, list):
            return None
        return next((w for w in windows if isinstance(w, dict) and w.get("is_focused")), None)

    def current_window(self) -> str | None:
        window = self._active_window()
        if window is None:
            return None
        title = window.get("title")
        return title if title is not None else window.get("app_id")

    def current_application(self) -> str | None:
        window = self._active_window()
        if window is None:
            return None
        app_id = window.get("app_id")
        return app_id if app_id is not None else window.get("title")
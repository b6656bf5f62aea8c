"""Window-manager clients reporting the focused application and window."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Client(ABC):
    """A source of the focused application and window title."""

    @abstractmethod
    def supported(self) -> bool:
        """Return whether this client works in the current session."""

    @abstractmethod
    def current_application(self) -> str | None:
        """Return the focused application, if known."""

    @abstractmethod
    def current_window(self) -> str | None:
        """Return the focused window title, if known."""


class NullClient(Client):
    """A client for sessions without window-manager support."""

    def supported(self) -> bool:
        return False

    def current_window(self) -> str | None:
        return None

    def current_application(self) -> str | None:
        return None


class WMClient:
    """Wraps a client, checking support once and reporting changes."""

    def __init__(self, name: str, client: Client) -> None:
        self.name = name
        self._client = client
        self._supported: bool | None = None
        self._last_application = ""
        self._last_window = ""

    def _is_supported(self) -> bool:
        if self._supported is None:
            self._supported = bool(self._client.supported())
            print(f"application-client: {self.name} (supported: {str(self._supported).lower()})")
        return self._supported

    def current_window(self) -> str | None:
        """Return the focused window title, or None if unknown or unsupported."""
        if not self._is_supported():
            return None
        window = self._client.current_window()
        if window is not None and window != self._last_window:
            self._last_window = window
            print(f"window: {window}")
        return window

    def current_application(self) -> str | None:
        """Return the focused application, or None if unknown or unsupported."""
        if not self._is_supported():
            return None
        application = self._client.current_application()
        if application is not None and application != self._last_application:
            self._last_application = application
            print(f"application: {application}")
        return application


def build_client(kind: str = "none") -> WMClient:
    """Build the client for a window manager: ``"none"`` or ``"niri"``."""
    match kind.lower():
        case "none":
            return WMClient("none", NullClient())
        case "niri":
            from keyshift.niri_client import NiriClient

            return WMClient("Niri", NiriClient())
        case _:
            raise ValueError(f"unknown window manager client: {kind!r}")
"""Opening book links: browser tabs for URLs, the clipboard for local paths."""

from __future__ import annotations

import logging
import platform
import shutil
import subprocess
import webbrowser
from typing import List, Protocol

logger = logging.getLogger(__name__)

_system = platform.system()  # "Linux", "Darwin", "Windows"

try:
    _uname_release = platform.uname().release.lower()
except OSError:
    _uname_release = ""

IS_WINDOWS = _system == "Windows"
IS_MACOS = _system == "Darwin"
IS_WSL = _system == "Linux" and "microsoft" in _uname_release


class Opener(Protocol):
    def open_remote(self, url: str) -> None: ...

    def write_clipboard(self, text: str) -> bool: ...


class SystemOpener:
    """Uses the default web browser and the native clipboard tool."""

    def open_remote(self, url: str) -> None:
        # A fresh tab gets no referrer and no handle back to this process
        if not webbrowser.open_new_tab(url):
            raise RuntimeError(f"No web browser available to open {url}")

    def write_clipboard(self, text: str) -> bool:
        """Copy *text* to the system clipboard. Returns False if no tool worked."""
        for cmd, encoding in _clipboard_commands():
            if not shutil.which(cmd[0]):
                continue
            try:
                subprocess.run(cmd, input=text.encode(encoding), check=True, timeout=2,
                               stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
                return True
            except (subprocess.SubprocessError, OSError):
                logger.debug("Clipboard via %s failed", cmd[0], exc_info=True)
        return False


def _clipboard_commands() -> List[tuple]:
    if IS_WSL:
        return [(["clip.exe"], "utf-16-le")]
    if IS_WINDOWS:
        return [(["clip.exe"], "utf-8")]
    if IS_MACOS:
        return [(["pbcopy"], "utf-8")]
    return [
        (["wl-copy"], "utf-8"),
        (["xclip", "-selection", "clipboard"], "utf-8"),
        (["xsel", "--clipboard", "--input"], "utf-8"),
    ]

"""Keyboard input: terminal mode handling and key decoding."""

from __future__ import annotations

import os
import select
import sys
import time
from contextlib import contextmanager

ESCAPE_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1b[5~": "pgup",
    "\x1b[6~": "pgdown",
    "\x1b[H": "home",
    "\x1b[F": "end",
}

CONTROL_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x03": "ctrl+c",
    "\t": "tab",
    "\x1b": "esc",
}

HELP = {
    "menu": "↑/↓ move · enter choose · q quit",
    "list": "enter choose · r refresh · / filter · esc back",
    "confirm": "y confirm · n cancel",
    "details": "esc back",
    "logs": "←/→ page · esc back",
}

STATE_HELP = {
    "InstanceList": "d details · t start · s stop · x ssh · r refresh · / filter · esc back",
    "ServiceList": "d details · l logs · s stop · f force deploy · r refresh · / filter · esc back",
    "ImageList": "p pull · u push · r refresh · / filter · esc back",
    "ExecutionList": "enter history · e start execution · r refresh · / filter · esc back",
    "ExecutionHistory": "r refresh · / filter · esc back",
    "JobList": "d details · l logs · s stop · r refresh · / filter · esc back",
}


def decode_keys(data: str) -> list[str]:
    """Split raw terminal input into key names."""
    keys: list[str] = []
    i = 0
    while i < len(data):
        if data[i] == "\x1b":
            for length in (4, 3):
                chunk = data[i : i + length]
                if chunk in ESCAPE_SEQUENCES:
                    keys.append(ESCAPE_SEQUENCES[chunk])
                    i += length
                    break
            else:
                # unknown CSI sequence: swallow it rather than emit stray keys
                if data[i + 1 : i + 2] == "[":
                    j = i + 2
                    while j < len(data) and not data[j].isalpha() and data[j] != "~":
                        j += 1
                    i = j + 1
                else:
                    keys.append("esc")
                    i += 1
            continue
        ch = data[i]
        keys.append(CONTROL_KEYS.get(ch, ch))
        i += 1
    return keys


class TerminalKeys:
    """Non-canonical, no-echo stdin so the live screen keeps rendering over SSH."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.fd: int | None = None
        self._saved = None

    def __enter__(self) -> "TerminalKeys":
        try:
            import termios
        except ImportError:
            return self

        try:
            fd = self.stream.fileno()
            self._saved = termios.tcgetattr(fd)
            new = termios.tcgetattr(fd)
            # Disable canonical mode and echo, leave signals intact
            new[3] &= ~(termios.ICANON | termios.ECHO)
            new[6][termios.VMIN] = 0
            new[6][termios.VTIME] = 0
            termios.tcsetattr(fd, termios.TCSADRAIN, new)
            self.fd = fd
        except (termios.error, OSError, ValueError):
            self.fd = None
        return self

    def __exit__(self, *exc) -> None:
        self._restore()

    def _restore(self) -> None:
        if self.fd is not None and self._saved is not None:
            import termios

            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)

    @contextmanager
    def suspended(self):
        """Hand the terminal back in canonical mode, e.g. for an SSH session."""
        self._restore()
        try:
            yield
        finally:
            if self.fd is not None:
                self.__enter__()

    def poll(self, timeout: float) -> list[str]:
        if self.fd is None:
            time.sleep(timeout)
            return []
        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return []
        try:
            data = os.read(self.fd, 64).decode("utf-8", errors="ignore")
        except OSError:
            return []
        return decode_keys(data)

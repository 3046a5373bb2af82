# ABOUTME: Key-press token naming and buffering shared by the recorder
import re
import threading
from typing import Optional

# pynput special key names -> logged token names
KEY_TOKEN_NAMES = {
    "space": "Space",
    "enter": "Return",
    "tab": "Tab",
    "backspace": "Backspace",
    "delete": "Delete",
    "esc": "Escape",
    "caps_lock": "CapsLock",
    "shift": "ShiftLeft",
    "shift_l": "ShiftLeft",
    "shift_r": "ShiftRight",
    "ctrl": "ControlLeft",
    "ctrl_l": "ControlLeft",
    "ctrl_r": "ControlRight",
    "alt": "AltLeft",
    "alt_l": "AltLeft",
    "alt_r": "AltRight",
    "alt_gr": "AltGr",
    "cmd": "MetaLeft",
    "cmd_l": "MetaLeft",
    "cmd_r": "MetaRight",
    "menu": "App",
}

# Virtual key codes with no name of their own (JIS keyboards)
UNNAMED_VK_TOKENS = {
    244: "<F>",
    243: "<H>",
    93: "<App>",
}

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')


def token_for_key(
    char: Optional[str] = None, name: Optional[str] = None, vk: Optional[int] = None
) -> str:
    """Name a key press the way it is written to the log."""
    if char and len(char) == 1 and char.isprintable():
        if char == " ":
            return "<Space>"
        return char
    if name:
        token = KEY_TOKEN_NAMES.get(name)
        if token is None:
            token = "".join(part.capitalize() for part in name.split("_"))
        return f"<{token}>"
    if vk is not None:
        return UNNAMED_VK_TOKENS.get(vk, f"<Unknown({vk})>")
    return "<Unknown>"


def separator_for_gap(gap_seconds: Optional[float], threshold_seconds: float) -> str:
    """A newline after a pause of at least the threshold, a space otherwise."""
    if gap_seconds is None:
        return ""
    return "\n" if gap_seconds >= threshold_seconds else " "


def sanitize_window_title(title: str) -> str:
    """Drop characters that are not allowed in file names."""
    return _INVALID_FILENAME_CHARS.sub("", title)


def window_folder_name(title: str) -> str:
    """Application part of a window title: the text after the last dash."""
    for index in range(len(title) - 1, -1, -1):
        if title[index] in "-—":
            title = title[index + 1 :].strip()
            break
    return "".join(c for c in title if (c.isascii() and c.isalpha()) or c in "_ ")


class KeyBuffer:
    """Thread-safe buffer of logged tokens waiting to be written."""

    def __init__(self, threshold_seconds: float = 0.5):
        self.threshold_seconds = threshold_seconds
        self._lock = threading.Lock()
        self._text: list = []
        self._last_press: Optional[float] = None

    def append(self, token: str, timestamp: float) -> None:
        with self._lock:
            gap = None if self._last_press is None else timestamp - self._last_press
            self._text.append(separator_for_gap(gap, self.threshold_seconds))
            self._text.append(token)
            self._last_press = timestamp

    def drain(self) -> str:
        """Return and clear everything buffered so far."""
        with self._lock:
            text = "".join(self._text)
            self._text.clear()
            return text

    def restore(self, text: str) -> None:
        """Put text that could not be written back in front of newer tokens."""
        if not text:
            return
        with self._lock:
            self._text.insert(0, text)

    def __len__(self) -> int:
        with self._lock:
            return len(self._text)

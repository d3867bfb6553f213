"""Keyboard input parsing for the pager.

Only legacy (xterm/VT) sequences are recognised; the pager never enables
the kitty keyboard protocol.
"""

from __future__ import annotations


class Key:
    """Named key identifiers returned by :func:`parse_key`."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"
    ctrl_c = "ctrl+c"


LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": Key.up,
    "\x1b[B": Key.down,
    "\x1b[C": Key.right,
    "\x1b[D": Key.left,
    "\x1b[H": Key.home,
    "\x1b[F": Key.end,
    "\x1bOA": Key.up,
    "\x1bOB": Key.down,
    "\x1bOC": Key.right,
    "\x1bOD": Key.left,
    "\x1bOH": Key.home,
    "\x1bOF": Key.end,
    "\x1b[5~": Key.page_up,
    "\x1b[6~": Key.page_down,
    "\x1b[1~": Key.home,
    "\x1b[4~": Key.end,
    "\x1b[7~": Key.home,
    "\x1b[8~": Key.end,
}


def split_keys(data: str) -> list[str]:
    """Split a chunk read from stdin into individual key sequences.

    A read can carry several keypresses at once (key repeat, pastes).  Escape
    sequences are kept whole; a trailing lone ``ESC`` is its own key.
    """
    keys: list[str] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch != "\x1b" or i + 1 >= len(data):
            keys.append(ch)
            i += 1
            continue

        nxt = data[i + 1]
        if nxt == "[":
            j = i + 2
            while j < len(data) and not ("\x40" <= data[j] <= "\x7e"):
                j += 1
            keys.append(data[i : j + 1])
            i = j + 1
        elif nxt == "O" and i + 2 < len(data):
            keys.append(data[i : i + 3])
            i += 3
        else:
            keys.append(ch)
            i += 1
    return keys


def parse_key(data: str) -> str | None:
    """Return the key identifier for one key sequence, or ``None``.

    Printable characters are returned as themselves (``"q"``, ``"G"``);
    named keys use the :class:`Key` identifiers.
    """
    if not data:
        return None

    named = LEGACY_KEY_SEQUENCES.get(data)
    if named is not None:
        return named

    if data == "\x1b":
        return Key.escape
    if data in ("\r", "\n"):
        return Key.enter
    if data == "\t":
        return Key.tab
    if data == " ":
        return Key.space
    if data in ("\x7f", "\x08"):
        return Key.backspace
    if data == "\x03":
        return Key.ctrl_c

    if len(data) == 1 and data.isprintable():
        return data

    return None

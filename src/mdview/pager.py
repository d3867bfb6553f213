"""Full-screen interactive pager over a rendered markdown document."""

from __future__ import annotations

import asyncio
import functools
import logging

from mdview.ansi import encode_line
from mdview.config import Config
from mdview.highlight import highlight_code
from mdview.keys import Key, parse_key, split_keys
from mdview.render import render
from mdview.style import Document, Line
from mdview.terminal import Terminal
from mdview.watch import FileWatcher
from mdview.wrap import wrap_spans

logger = logging.getLogger(__name__)

SCROLLBAR_THUMB = "█"
_CLEAR_LINE = "\x1b[2K"


def read_source(path: str) -> str:
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.read()


def display_lines(document: Document, width: int) -> list[Line]:
    """Soft-wrap every document line to *width* columns for display."""
    out: list[Line] = []
    for line in document:
        for spans in wrap_spans(line.spans, width):
            out.append(Line.from_spans(spans))
    return out


class Pager:
    """Scrollable view of a markdown source rendered for the terminal width.

    Input, resize and reload handlers are plain methods so they can be driven
    directly from tests; :meth:`run` wires them to a real terminal and file
    watcher.
    """

    def __init__(
        self,
        terminal: Terminal,
        source: str,
        *,
        path: str | None = None,
        config: Config | None = None,
    ) -> None:
        self.terminal = terminal
        self.source = source
        self.path = path
        self.config = config or Config()
        self.scroll = 0
        self.width = 0
        self.lines: list[Line] = []
        self.running = False
        self.quit_requested = False

        self._highlighter = functools.partial(highlight_code, style=self.config.code_theme)
        self._quit: asyncio.Event | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._watcher: FileWatcher | None = None

        self.rerender()

    # -- geometry -----------------------------------------------------------

    @property
    def viewport_height(self) -> int:
        return max(self.terminal.rows, 0)

    @property
    def max_scroll(self) -> int:
        return max(0, len(self.lines) - self.viewport_height)

    def clamp_scroll(self) -> None:
        self.scroll = min(max(self.scroll, 0), self.max_scroll)

    def scroll_down(self, n: int) -> None:
        self.scroll = min(self.scroll + n, self.max_scroll)

    def scroll_up(self, n: int) -> None:
        self.scroll = max(self.scroll - n, 0)

    # -- rendering ----------------------------------------------------------

    def rerender(self) -> None:
        self.width = self.terminal.columns
        document = render(self.source, self.width, highlighter=self._highlighter)
        self.lines = display_lines(document, self.width)
        self.clamp_scroll()

    def scrollbar_row(self) -> int | None:
        """Row of the scrollbar thumb, or ``None`` when everything fits."""
        max_scroll = self.max_scroll
        if max_scroll == 0 or self.viewport_height == 0:
            return None
        track = self.viewport_height - 1
        return int(self.scroll / max_scroll * track)

    def draw(self) -> None:
        term = self.terminal
        visible = self.lines[self.scroll : self.scroll + self.viewport_height]

        for row in range(self.viewport_height):
            term.move_to(row, 0)
            text = encode_line(visible[row]) if row < len(visible) else ""
            term.write(_CLEAR_LINE + text)

        thumb = self.scrollbar_row()
        if thumb is not None and self.width > 0:
            term.move_to(thumb, self.width - 1)
            term.write(SCROLLBAR_THUMB)

    # -- events -------------------------------------------------------------

    def handle_input(self, data: str) -> None:
        for seq in split_keys(data):
            self.handle_key(parse_key(seq))
            if self.quit_requested:
                return
        self.draw()

    def handle_key(self, key: str | None) -> None:  # noqa: C901
        height = self.viewport_height
        step = self.config.scroll_step

        match key:
            case "q" | Key.escape | Key.ctrl_c:
                self.quit()
            case "j" | Key.down:
                self.scroll_down(step)
            case "k" | Key.up:
                self.scroll_up(step)
            case "d":
                self.scroll_down(height // 2)
            case "u":
                self.scroll_up(height // 2)
            case Key.space | Key.page_down:
                self.scroll_down(max(height - 2, 0))
            case Key.page_up:
                self.scroll_up(max(height - 2, 0))
            case "g" | Key.home:
                self.scroll = 0
            case "G" | Key.end:
                self.scroll = self.max_scroll

    def handle_resize(self) -> None:
        if self.terminal.columns != self.width:
            self.rerender()
        else:
            self.clamp_scroll()
        self.terminal.clear_screen()
        self.draw()

    def reload(self) -> None:
        """Re-read :attr:`path` and re-render, keeping the scroll position."""
        if self.path is None:
            return
        try:
            self.source = read_source(self.path)
        except OSError:
            logger.exception("Failed to reload %s", self.path)
            return
        logger.info("Reloaded %s", self.path)
        self.rerender()
        if self.running:
            self.draw()

    def _on_file_changed(self) -> None:
        # Called from the watchdog observer thread
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self.reload)

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> None:
        self.running = True
        self.terminal.start(self.handle_input, self.handle_resize)
        self.rerender()
        self.terminal.clear_screen()
        self.draw()

    def stop(self) -> None:
        self.running = False
        self.terminal.stop()

    def quit(self) -> None:
        self.quit_requested = True
        if self._quit is not None:
            self._quit.set()

    async def run(self) -> None:
        """Show the pager until the user quits."""
        self._loop = asyncio.get_running_loop()
        self._quit = asyncio.Event()

        if self.path is not None and self.config.watch:
            self._watcher = FileWatcher(self.path, self._on_file_changed)
            self._watcher.start()

        try:
            self.start()
            await self._quit.wait()
        finally:
            if self._watcher is not None:
                self._watcher.stop()
                self._watcher = None
            self.stop()
            self._loop = None
            self._quit = None

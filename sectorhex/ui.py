"""Terminal presentation of a sector: hex grid, ASCII column, prompts."""

from __future__ import annotations

import curses
import enum

from .block_io import MAX_COL, MAX_INPUT_LEN, MAX_ROW

MATCH_PAIR = 1
WARNING_PAIR = 2

_ASCII_COLUMN = 50
_FIRST_GRID_LINE = 2
_PROMPT_COLUMN = MAX_ROW + 10

_HELP_LINES = (
    " [Q] Quit  [/] Search  [X] Delete Word  [Ctrl+U] Redo  [U] Undo",
    " [N] Next Match  [P] Previous Match  [G] Go to Sector",
    " [D] Next Sector  [A] Previous Sector",
    " [I] Insert String  [E] Edit Byte  [L] Load  [S] Save  [R] Replace",
    " [Tab] Toggle Mode  [Arrows] Move Cursor",
)


class DisplayMode(enum.Enum):
    HEX = 0
    ASCII = 1

    def toggled(self) -> "DisplayMode":
        """The other display mode."""
        return DisplayMode.ASCII if self is DisplayMode.HEX else DisplayMode.HEX


def printable(value: int) -> str:
    """The character for a byte, or '.' when it is not printable ASCII."""
    return chr(value) if 32 <= value <= 126 else "."


def format_header(sector, size, cursor_x, cursor_y, mode) -> str:
    """The status line shown above the grid."""
    return (
        f" Sector: {sector}  |  Size: {size} bytes  |  "
        f"Cursor: [{cursor_y:02d}:{cursor_x:02d}]  |  Mode: {mode.name} "
    )


def format_cell(value: int, mode) -> str:
    """Two-character text of one grid cell in the given mode."""
    if mode is DisplayMode.HEX:
        return f"{value:02X}"
    return " " + printable(value)


def format_ascii_row(buffer, row: int) -> str:
    """The ASCII column text for one grid row."""
    return "".join(printable(b) for b in buffer[row * MAX_COL : (row + 1) * MAX_COL])


def _color_attr(pair: int) -> int:
    try:
        return curses.color_pair(pair)
    except curses.error:
        return 0


def _set_echo(enabled: bool) -> None:
    try:
        if enabled:
            curses.echo()
        else:
            curses.noecho()
        curses.curs_set(1 if enabled else 0)
    except curses.error:
        pass


class Screen:
    """Draws the editor on a curses window and reads keys and strings from it."""

    def __init__(self, window):
        self.window = window
        self._match_attr = _color_attr(MATCH_PAIR)
        self._warning_attr = _color_attr(WARNING_PAIR)

    def _size(self) -> tuple[int, int]:
        return self.window.getmaxyx()

    def _put(self, y: int, x: int, text: str, attr: int = 0) -> None:
        try:
            self.window.addstr(y, x, text, attr)
        except curses.error:
            # Writing into the last cell of the window reports an error.
            pass

    def _clear_line(self, y: int) -> None:
        self.window.move(y, 0)
        self.window.clrtoeol()

    def display_sector(self, buffer, sector, cursor_x, cursor_y, mode, matches):
        """Draw the header, the byte grid and the ASCII column."""
        size = len(buffer)
        highlighted = set(matches)
        self._put(
            0,
            0,
            format_header(sector, size, cursor_x, cursor_y, mode),
            curses.A_BOLD | self._warning_attr,
        )
        for row in range(MAX_ROW):
            y = _FIRST_GRID_LINE + row
            for col in range(MAX_COL):
                index = row * MAX_COL + col
                if index >= size:
                    continue
                if row == cursor_y and col == cursor_x:
                    attr = curses.A_REVERSE
                elif index in highlighted:
                    attr = self._match_attr
                else:
                    attr = 0
                self._put(y, 3 * col, format_cell(buffer[index], mode), attr)
                if col == MAX_COL - 1:
                    self._put(y, _ASCII_COLUMN, "| " + format_ascii_row(buffer, row))
        _, cols = self._size()
        try:
            self.window.hline(1, 0, getattr(curses, "ACS_HLINE", ord("-")), cols)
        except curses.error:
            pass
        self.window.refresh()

    def display_error(self, message):
        """Show an error on the top line and wait for a key."""
        self._clear_line(0)
        self._put(0, 0, f"ERROR: {message}", self._warning_attr)
        self.window.refresh()
        self.window.getch()

    def display_message(self, message):
        """Show a message on the bottom line."""
        lines, _ = self._size()
        self._clear_line(lines - 1)
        self._put(lines - 1, 0, message, curses.A_BOLD)
        self.window.refresh()

    def display_help(self):
        """Show the key summary above the bottom line."""
        lines, _ = self._size()
        first = lines - 1 - len(_HELP_LINES)
        self._clear_line(first)
        for offset, text in enumerate(_HELP_LINES):
            self._put(first + offset, 0, text, curses.A_BOLD | self._warning_attr)
        self.window.refresh()

    def read_key(self):
        return self.window.getch()

    def prompt(self, prompt):
        """Ask for a line of text on the bottom line."""
        self.display_message(prompt)
        lines, _ = self._size()
        _set_echo(True)
        try:
            raw = self.window.getstr(lines - 1, _PROMPT_COLUMN, MAX_INPUT_LEN - 1)
        finally:
            _set_echo(False)
        if isinstance(raw, (bytes, bytearray)):
            return bytes(raw).decode("utf-8", errors="replace")
        return raw

    def clear(self):
        self.window.clear()
        self.window.refresh()
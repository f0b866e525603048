"""The interactive sector editor and its command-line entry point."""

from __future__ import annotations

import curses
import sys
from pathlib import Path

from .block_io import (
    MAX_COL,
    MAX_ROW,
    MAX_SECTOR,
    SECTOR_SIZE,
    BlockDevice,
    BlockIOError,
    SectorState,
)
from .editing import (
    EditError,
    delete_bytes_from_cursor,
    delete_string,
    parse_hex_byte,
    replace_string_at_cursor,
    replace_string_in_sector,
    search_string_in_sector,
    set_byte,
)
from .history import History
from .ui import MATCH_PAIR, WARNING_PAIR, DisplayMode, Screen

SECTORS_DIR = "sectors"
_CTRL_U = 21
_TAB = ord("\t")
_HEX_MODE_KEYS = (ord("h"), ord("H"))


def sector_file_path(directory, sector) -> Path:
    """Where a sector is saved to and loaded from."""
    return Path(directory) / f"sector_{sector}.bin"


def create_sectors_directory(directory) -> bool:
    """Create the directory for saved sectors; False if it already exists."""
    path = Path(directory)
    if path.exists():
        return False
    path.mkdir(mode=0o755)
    return True


def _atol(text: str) -> int:
    """Leading integer of a string, 0 when there is none."""
    text = text.lstrip(" \t\n\r\f\v")
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for char in text:
        if not char.isdigit() or not char.isascii():
            break
        digits += char
    return sign * int(digits) if digits else 0


class Editor:
    """Holds the editing session and acts on key presses."""

    def __init__(self, device, screen, sectors_dir=SECTORS_DIR):
        self.device = device
        self.screen = screen
        self.sectors_dir = Path(sectors_dir)
        self.state = SectorState()
        self.history = History()
        self.matches: list[int] = []
        self.match_index = 0
        self.search_in_progress = False
        self.display_mode = DisplayMode.HEX
        self.help_shown = False
        self.exit_requested = False
        self.file_loaded = False
        self._commands = {
            curses.KEY_RIGHT: self.move_right,
            curses.KEY_LEFT: self.move_left,
            curses.KEY_UP: self.move_up,
            curses.KEY_DOWN: self.move_down,
            _TAB: self._toggle_mode,
            _CTRL_U: self._redo,
            ord("g"): self._go_to_prompt,
            ord("x"): self._delete_string,
            ord("X"): self._delete_bytes,
        }
        for letters, action in (
            ("aA", self._previous_sector),
            ("dD", self._next_sector),
            ("eE", self._edit_byte),
            ("hH", self._toggle_help),
            ("iI", self._insert),
            ("lL", self._load_and_write),
            ("nN", self.next_match),
            ("pP", self.previous_match),
            ("qQ", self._quit),
            ("rR", self._replace),
            ("sS", self.save_to_file),
            ("uU", self._undo),
        ):
            for letter in letters:
                self._commands[ord(letter)] = action
        self._commands[ord("/")] = self._search

    def handle_key(self, key):
        """Carry out the command bound to ``key``; unknown keys are ignored."""
        if isinstance(key, str):
            key = ord(key)
        action = self._commands.get(key)
        if action is not None:
            action()

    def _write(self) -> bool:
        try:
            self.device.write_sector(self.state.sector, self.state.buffer)
        except BlockIOError as exc:
            self.screen.display_error(f"Failed to write sector: {exc}")
            return False
        return True

    def _write_and_clear(self) -> None:
        if self._write():
            self.screen.clear()

    def _reset_matches(self) -> None:
        self.matches = []

    def _cursor_to(self, offset: int) -> None:
        self.state.cursor_x = offset % MAX_COL
        self.state.cursor_y = offset // MAX_COL

    def _ask_hex_mode(self, prompt: str) -> bool:
        self.screen.display_message(prompt)
        return self.screen.read_key() in _HEX_MODE_KEYS

    def _previous_sector(self) -> None:
        if self.state.sector > 0:
            self.state.sector -= 1
            self.state.cursor_x = self.state.cursor_y = 0
        self._reset_matches()
        self.screen.clear()

    def _next_sector(self) -> None:
        self.state.sector += 1
        self.state.cursor_x = self.state.cursor_y = 0
        self._reset_matches()
        self.screen.clear()

    def _edit_byte(self) -> None:
        index = self.state.cursor_index()
        try:
            if self.display_mode is DisplayMode.HEX:
                text = self.screen.prompt("Enter HEX value (2 characters, 0-9, A-F): ")
                value = parse_hex_byte(text)
            else:
                self.screen.display_message("Enter ASCII value: ")
                value = self.screen.read_key()
                if not 0x20 <= value <= 0x7E:
                    raise EditError(
                        "Invalid ASCII input. Only printable characters allowed."
                    )
            set_byte(self.state.buffer, index, value, self.history)
        except EditError as exc:
            self.screen.display_error(str(exc))
        self._write_and_clear()

    def _go_to_prompt(self) -> None:
        self.go_to_sector(self.screen.prompt(f"Enter sector number (max {MAX_SECTOR}): "))

    def go_to_sector(self, text) -> bool:
        """Jump to the sector number given as text; False when out of range."""
        number = _atol(text)
        if 0 <= number <= MAX_SECTOR:
            self.state.sector = number
            self.screen.clear()
            return True
        self.screen.display_error("Invalid sector number")
        return False

    def _toggle_help(self) -> None:
        self.help_shown = not self.help_shown
        if self.help_shown:
            self.screen.display_help()
        else:
            self.screen.clear()

    def _insert(self) -> None:
        is_hex = self._ask_hex_mode("Mode (a=ASCII / h=HEX)? ")
        text = self.screen.prompt("Enter string to insert: ")
        try:
            replace_string_at_cursor(
                self.state.buffer, self.state.cursor_index(), text, is_hex, self.history
            )
        except EditError as exc:
            self.screen.display_error(str(exc))
        self._write_and_clear()

    def save_to_file(self):
        """Save the current sector to its file; the path, or None on failure."""
        path = sector_file_path(self.sectors_dir, self.state.sector)
        try:
            path.write_bytes(bytes(self.state.buffer))
        except OSError:
            self.screen.display_error("Failed to open file for writing")
            return None
        self.screen.display_message(f"Sector saved to {path}")
        return path

    def load_from_file(self) -> bool:
        """Fill the buffer from the current sector's file."""
        path = sector_file_path(self.sectors_dir, self.state.sector)
        try:
            with path.open("rb") as handle:
                data = handle.read(SECTOR_SIZE)
        except OSError:
            self.screen.display_error("Failed to open file for reading")
            return False
        self.state.buffer[: len(data)] = data
        if len(data) != SECTOR_SIZE:
            self.screen.display_error("Failed to read full sector from file")
            return False
        self.screen.display_message(f"Sector loaded from {path}")
        return True

    def _load_and_write(self) -> None:
        self.load_from_file()
        self._write()
        self.file_loaded = True

    def _show_match(self):
        offset = self.matches[self.match_index]
        self._cursor_to(offset)
        self.screen.display_message(f"Found at byte {offset}")
        return offset

    def next_match(self):
        """Move the cursor to the next search match; its offset or None."""
        if not (self.search_in_progress and self.matches):
            return None
        self.match_index = (self.match_index + 1) % len(self.matches)
        return self._show_match()

    def previous_match(self):
        """Move the cursor to the previous search match; its offset or None."""
        if not (self.search_in_progress and self.matches):
            return None
        self.match_index = (self.match_index - 1) % len(self.matches)
        return self._show_match()

    def _quit(self) -> None:
        self.exit_requested = True
        self.screen.clear()

    def _search(self) -> None:
        is_hex = self._ask_hex_mode("Search mode: (a) ASCII / (h) HEX? ")
        text = self.screen.prompt("Enter search string: ")
        try:
            self.matches = search_string_in_sector(self.state.buffer, text, is_hex)
        except EditError as exc:
            self.screen.display_error(str(exc))
            self.matches = []
        if self.matches:
            self.match_index = 0
            self.screen.display_message(f"Found {len(self.matches)} matches")
            self._cursor_to(self.matches[0])
        else:
            self.screen.display_message("No matches found")
        self.screen.clear()
        self.search_in_progress = True

    def _replace(self) -> None:
        is_hex = self._ask_hex_mode("Search mode: (a) ASCII / (h) HEX? ")
        search_text = self.screen.prompt("Enter search string: ")
        replace_text = self.screen.prompt("Enter replacement string: ")
        try:
            count = replace_string_in_sector(
                self.state.buffer, search_text, replace_text, is_hex
            )
        except EditError as exc:
            self.screen.display_error(str(exc))
        else:
            self.screen.display_message(
                "Replacement complete." if count else "No matches found."
            )
        self._write()

    def _delete_string(self) -> None:
        is_hex = self._ask_hex_mode("Delete mode: (a) ASCII / (h) HEX? ")
        text = self.screen.prompt("Enter string to delete: ")
        try:
            offset = delete_string(self.state.buffer, text, is_hex, self.history)
        except EditError as exc:
            self.screen.display_error(str(exc))
        else:
            self.screen.display_message(
                "String not found." if offset is None else "String deleted."
            )
        self._write()
        self.screen.clear()

    def _delete_bytes(self) -> None:
        count = _atol(self.screen.prompt("Enter number of bytes to delete: "))
        try:
            delete_bytes_from_cursor(
                self.state.buffer, self.state.cursor_index(), count, self.history
            )
        except EditError as exc:
            self.screen.display_error(str(exc))
        else:
            self.screen.display_message("Bytes deleted.")
        self._write()
        self.screen.clear()

    def move_right(self) -> None:
        state = self.state
        if state.cursor_x < MAX_COL - 1:
            state.cursor_x += 1
        elif state.cursor_y < MAX_ROW - 1:
            state.cursor_y += 1
            state.cursor_x = 0
        else:
            state.sector += 1
            state.cursor_x = state.cursor_y = 0

    def move_left(self) -> None:
        state = self.state
        if state.cursor_x > 0:
            state.cursor_x -= 1
        elif state.cursor_y > 0:
            state.cursor_y -= 1
            state.cursor_x = MAX_COL - 1
        elif state.sector > 0:
            state.sector -= 1
            state.cursor_x = MAX_COL - 1
            state.cursor_y = MAX_ROW - 1

    def move_up(self) -> None:
        if self.state.cursor_y > 0:
            self.state.cursor_y -= 1

    def move_down(self) -> None:
        if self.state.cursor_y < MAX_ROW - 1:
            self.state.cursor_y += 1

    def _toggle_mode(self) -> None:
        self.display_mode = self.display_mode.toggled()

    def _undo(self) -> None:
        if self.history.undo(self.state.buffer):
            self._write_and_clear()
        else:
            self.screen.display_message("No more undo actions available.")

    def _redo(self) -> None:
        if self.history.redo(self.state.buffer):
            self._write_and_clear()
        else:
            self.screen.display_message("No more redo actions available.")

    def run(self) -> None:
        """Read, show and edit sectors until quit or a read fails."""
        while True:
            if self.file_loaded:
                self.file_loaded = False
            else:
                try:
                    self.state.buffer = self.device.read_sector(self.state.sector)
                except BlockIOError:
                    self.screen.display_error("Failed to read sector")
                    break
            self.screen.display_sector(
                self.state.buffer,
                self.state.sector,
                self.state.cursor_x,
                self.state.cursor_y,
                self.display_mode,
                self.matches,
            )
            self.handle_key(self.screen.read_key())
            if self.exit_requested:
                break


def _run_in_terminal(window, device, directory) -> None:
    try:
        curses.start_color()
        curses.init_pair(MATCH_PAIR, curses.COLOR_GREEN, curses.COLOR_BLACK)
        curses.init_pair(WARNING_PAIR, curses.COLOR_YELLOW, curses.COLOR_BLACK)
    except curses.error:
        pass
    curses.cbreak()
    curses.noecho()
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    window.keypad(True)
    Editor(device, Screen(window), directory).run()


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Usage: sectorhex <device/file>", file=sys.stderr)
        return 1
    directory = Path(SECTORS_DIR)
    try:
        created = create_sectors_directory(directory)
    except OSError as exc:
        print(f"Unable to create sectors directory: {exc}", file=sys.stderr)
    else:
        if created:
            print(f"Directory '{SECTORS_DIR}' created successfully")
        else:
            print(f"Directory '{SECTORS_DIR}' already exists")
    try:
        device = BlockDevice(args[0])
    except BlockIOError as exc:
        print(exc, file=sys.stderr)
        return 1
    with device:
        curses.wrapper(_run_in_terminal, device, directory)
    return 0


if __name__ == "__main__":
    sys.exit(main())
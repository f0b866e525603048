import curses

import pytest

from sectorhex.app import Editor, create_sectors_directory, main, sector_file_path
from sectorhex.block_io import SECTOR_SIZE, BlockDevice
from sectorhex.ui import DisplayMode

SECTORS = 4


class FakeScreen:
    def __init__(self, keys=(), answers=()):
        self.keys = [ord(k) if isinstance(k, str) else k for k in keys]
        self.answers = list(answers)
        self.messages = []
        self.errors = []
        self.displayed = []
        self.prompts = []
        self.clears = 0
        self.help_calls = 0

    def display_sector(self, buffer, sector, cursor_x, cursor_y, mode, matches):
        self.displayed.append((bytes(buffer), sector, cursor_x, cursor_y, mode, list(matches)))

    def display_error(self, message):
        self.errors.append(message)

    def display_message(self, message):
        self.messages.append(message)

    def display_help(self):
        self.help_calls += 1

    def read_key(self):
        return self.keys.pop(0)

    def prompt(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0)

    def clear(self):
        self.clears += 1


@pytest.fixture
def image(tmp_path):
    data = bytearray(SECTOR_SIZE * SECTORS)
    data[10:15] = b"HELLO"
    data[100:105] = b"HELLO"
    data[SECTOR_SIZE] = 0x55
    path = tmp_path / "disk.img"
    path.write_bytes(bytes(data))
    return path


@pytest.fixture
def make_editor(image, tmp_path):
    devices = []

    def factory(keys=(), answers=()):
        device = BlockDevice(image)
        devices.append(device)
        sectors_dir = tmp_path / "sectors"
        sectors_dir.mkdir(exist_ok=True)
        editor = Editor(device, FakeScreen(keys, answers), sectors_dir)
        editor.state.buffer = device.read_sector(0)
        return editor

    yield factory
    for device in devices:
        device.close()


def test_sector_file_path(tmp_path):
    assert sector_file_path(tmp_path, 7) == tmp_path / "sector_7.bin"


def test_create_sectors_directory(tmp_path):
    target = tmp_path / "sectors"
    assert create_sectors_directory(target) is True
    assert target.is_dir()
    assert create_sectors_directory(target) is False


def test_move_right_wraps_row_then_sector(make_editor):
    editor = make_editor()
    editor.state.cursor_x = 15
    editor.move_right()
    assert (editor.state.cursor_x, editor.state.cursor_y) == (0, 1)
    editor.state.cursor_x, editor.state.cursor_y = 15, 31
    editor.move_right()
    assert (editor.state.sector, editor.state.cursor_x, editor.state.cursor_y) == (1, 0, 0)


def test_move_left_wraps_back(make_editor):
    editor = make_editor()
    editor.move_left()
    assert (editor.state.sector, editor.state.cursor_x, editor.state.cursor_y) == (0, 0, 0)
    editor.state.sector = 1
    editor.move_left()
    assert (editor.state.sector, editor.state.cursor_x, editor.state.cursor_y) == (0, 15, 31)


def test_move_up_and_down_stop_at_edges(make_editor):
    editor = make_editor()
    editor.move_up()
    assert editor.state.cursor_y == 0
    for _ in range(40):
        editor.move_down()
    assert editor.state.cursor_y == 31


def test_go_to_sector(make_editor):
    editor = make_editor()
    assert editor.go_to_sector("12") is True
    assert editor.state.sector == 12
    assert editor.go_to_sector("2049") is False
    assert editor.state.sector == 12
    assert editor.screen.errors == ["Invalid sector number"]
    assert editor.go_to_sector(" 2abc") is True
    assert editor.state.sector == 2


def test_next_sector_resets_cursor_and_matches(make_editor):
    editor = make_editor()
    editor.state.cursor_x = 4
    editor.matches = [10]
    editor.handle_key("d")
    assert (editor.state.sector, editor.state.cursor_x) == (1, 0)
    assert editor.matches == []
    editor.handle_key("A")
    assert editor.state.sector == 0


def test_edit_byte_hex_writes_device(make_editor):
    editor = make_editor(answers=["7f"])
    editor.handle_key("e")
    assert editor.state.buffer[0] == 0x7F
    assert editor.device.read_sector(0)[0] == 0x7F


def test_edit_byte_invalid_hex_reports_error(make_editor):
    editor = make_editor(answers=["zz"])
    original = bytes(editor.state.buffer)
    editor.handle_key("e")
    assert bytes(editor.state.buffer) == original
    assert editor.screen.errors[0].startswith("Invalid HEX input")


def test_edit_byte_ascii_mode_uses_key(make_editor):
    editor = make_editor(keys=["Q"])
    editor.handle_key("\t")
    assert editor.display_mode is DisplayMode.ASCII
    editor.handle_key("E")
    assert editor.state.buffer[0] == ord("Q")


def test_undo_and_redo_restore_disk(make_editor):
    editor = make_editor(answers=["7f"])
    editor.handle_key("e")
    editor.handle_key("u")
    assert editor.device.read_sector(0)[0] == 0
    editor.handle_key(21)
    assert editor.device.read_sector(0)[0] == 0x7F


def test_undo_with_empty_history_shows_message(make_editor):
    editor = make_editor()
    editor.handle_key("u")
    assert editor.screen.messages == ["No more undo actions available."]


def test_search_and_cycle_matches(make_editor):
    editor = make_editor(keys=["a"], answers=["HELLO"])
    editor.handle_key("/")
    assert editor.matches == [10, 100]
    assert editor.state.cursor_index() == 10
    assert editor.next_match() == 100
    assert editor.state.cursor_index() == 100
    editor.handle_key("p")
    assert editor.state.cursor_index() == 10


def test_match_navigation_needs_search(make_editor):
    editor = make_editor()
    assert editor.next_match() is None
    assert editor.previous_match() is None


def test_replace_key_pads_with_zeros(make_editor):
    editor = make_editor(keys=["a"], answers=["HELLO", "HI"])
    editor.handle_key("r")
    assert editor.state.buffer[10:15] == b"HI" + bytes(3)
    assert editor.device.read_sector(0)[100:105] == b"HI" + bytes(3)


def test_insert_hex_at_cursor(make_editor):
    editor = make_editor(keys=["h"], answers=["DE AD"])
    editor.state.cursor_y = 1
    editor.handle_key("i")
    assert editor.state.buffer[16:18] == bytes.fromhex("DEAD")
    assert editor.device.read_sector(0)[16:18] == bytes.fromhex("DEAD")


def test_delete_string_removes_first_only(make_editor):
    editor = make_editor(keys=["a"], answers=["HELLO"])
    editor.handle_key("x")
    assert editor.state.buffer[10:15] == bytes(5)
    assert editor.state.buffer[100:105] == b"HELLO"
    assert "String deleted." in editor.screen.messages


def test_delete_bytes_from_cursor(make_editor):
    editor = make_editor(answers=["3"])
    editor.state.cursor_x = 10
    editor.handle_key("X")
    assert editor.state.buffer[10:13] == bytes(3)
    assert editor.state.buffer[13:15] == b"LO"


def test_save_and_load_round_trip(make_editor):
    editor = make_editor()
    saved = bytes(editor.state.buffer)
    path = editor.save_to_file()
    assert path.read_bytes() == saved
    editor.state.buffer[10:15] = bytes(5)
    editor.handle_key("l")
    assert bytes(editor.state.buffer) == saved
    assert editor.file_loaded is True
    assert bytes(editor.device.read_sector(0)) == saved


def test_load_missing_file_reports_error(make_editor):
    editor = make_editor()
    editor.state.sector = 3
    assert editor.load_from_file() is False
    assert editor.screen.errors == ["Failed to open file for reading"]


def test_help_key_toggles(make_editor):
    editor = make_editor()
    editor.handle_key("h")
    editor.handle_key("H")
    assert editor.screen.help_calls == 1
    assert editor.help_shown is False


def test_arrow_keys_move_cursor(make_editor):
    editor = make_editor()
    editor.handle_key(curses.KEY_RIGHT)
    editor.handle_key(curses.KEY_DOWN)
    assert (editor.state.cursor_x, editor.state.cursor_y) == (1, 1)


def test_run_reads_each_sector_until_quit(make_editor):
    editor = make_editor(keys=["d", "q"])
    editor.run()
    assert [entry[1] for entry in editor.screen.displayed] == [0, 1]
    assert editor.screen.displayed[1][0][0] == 0x55
    assert editor.exit_requested is True


def test_run_stops_when_read_fails(make_editor):
    editor = make_editor(keys=["g"], answers=["100"])
    editor.run()
    assert editor.state.sector == 100
    assert editor.screen.errors == ["Failed to read sector"]


def test_main_without_arguments_fails():
    assert main([]) == 1


def test_main_with_missing_device_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main([str(tmp_path / "missing.img")]) == 1
    assert (tmp_path / "sectors").is_dir()
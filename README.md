# sectorhex

A terminal hex editor for disk images and block devices. It shows one
512-byte sector at a time as a 16 × 32 grid, with an ASCII column beside
it. Every edit is written straight back to the device.

It needs the standard `curses` module, so it runs on POSIX systems.

## Installation

    pip install .

## Usage

    sectorhex disk.img

The path must be readable and writable. If no path is given, a usage line
is printed and the command exits with status 1. When it starts, the editor
creates a `sectors/` directory in the current working directory if there
is none. Saved sectors go there as `sector_<n>.bin`.

The editor stops when you quit, or when a sector cannot be read in full,
for example when you move past the end of an image file.

## Keys

| Key        | Action |
|------------|--------|
| Left / Right | Move the cursor one byte. Moving past the first or last byte goes to the previous or next sector |
| Up / Down  | Move the cursor one row within the sector |
| `a` / `d`  | Previous / next sector (the cursor goes back to the first byte) |
| `g`        | Go to a sector number from 0 to 2048 |
| `e`        | Edit the byte under the cursor: two hex digits in HEX mode, one printable character in ASCII mode |
| `i`        | Overwrite bytes at the cursor with an ASCII or hex string |
| `/`        | Search the sector for an ASCII or hex pattern |
| `n` / `p`  | Next / previous match |
| `r`        | Replace every match of a pattern. The replacement may not be longer than the pattern; any leftover bytes are zeroed |
| `x`        | Zero the first match of a pattern |
| `X`        | Zero a number of bytes starting at the cursor |
| `u`        | Undo |
| `Ctrl+U`   | Redo |
| `s`        | Save the sector to `sectors/sector_<n>.bin` |
| `l`        | Load the sector from `sectors/sector_<n>.bin` and write it to the device |
| `Tab`      | Switch the grid between HEX and ASCII |
| `h`        | Show or hide the help panel |
| `q`        | Quit |

Letter keys work in either case, except `g` (lower case only) and `x` /
`X`, which are two different commands.

When a command asks for a mode, press `h` for hex; any other key means
ASCII. Hex patterns are pairs of hex digits. Spaces between the pairs are
allowed, as in `de ad be ef`. A pattern can be at most 16 bytes long.
A search finds overlapping matches too and keeps at most 100 of them.

Up to 20 edits are kept for undo. There is one history for the whole
session, not one per sector: undo and redo act on the sector currently on
screen, at the offset where the edit was made.

## Library use

The editing functions work on any mutable sector buffer:

```python
from sectorhex.block_io import BlockDevice
from sectorhex.editing import search_string_in_sector, replace_string_in_sector
from sectorhex.history import History

with BlockDevice("disk.img") as device:
    data = device.read_sector(0)
    print(search_string_in_sector(data, "55 aa", True))   # list of offsets
    replace_string_in_sector(data, "old", "new", False)   # number replaced
    device.write_sector(0, data)
```

- `sectorhex.block_io`: `BlockDevice` reads and writes whole 512-byte
  sectors and raises `BlockIOError` on failures and short reads or writes.
  `SectorState` holds a sector number, a cursor and a buffer.
- `sectorhex.editing`: `parse_hex_string`, `encode_pattern`,
  `parse_hex_byte`, `search_string_in_sector`, `search_bytes_in_sector`,
  `replace_string_in_sector`, `set_byte`, `replace_string_at_cursor`,
  `delete_bytes_from_cursor` and `delete_string`. Bad input raises
  `EditError`. The functions that take a `History` record the edit in it so
  that it can be undone.
- `sectorhex.history`: `History` keeps bounded undo and redo stacks of
  `UndoItem` entries, each tagged with an `Operation`.
- `sectorhex.ui`: `Screen` draws on a curses window. `DisplayMode`,
  `format_header`, `format_cell`, `format_ascii_row` and `printable` build
  the text it shows.
- `sectorhex.app`: `Editor` maps keys to commands. `main` is the
  `sectorhex` command.
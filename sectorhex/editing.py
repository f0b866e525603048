"""Searching and editing operations on a sector buffer."""

from __future__ import annotations

import string

from .block_io import MAX_MATCHES
from .history import History, Operation

MAX_PATTERN_LEN = 16
_HEX_DIGITS = frozenset(string.hexdigits)
_C_SPACE = " \t\n\r\f\v"


class EditError(ValueError):
    """Raised when an edit or search request cannot be carried out."""


def _hex_pair_value(pair: str) -> int:
    """Value of a two-character group the way strtoul reads it, as one byte."""
    text = pair.lstrip(_C_SPACE)
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]
    digits = ""
    for char in text:
        if char not in _HEX_DIGITS:
            break
        digits += char
    value = int(digits, 16) if digits else 0
    return (-value if negative else value) & 0xFF


def parse_hex_string(text: str) -> bytes:
    """Read up to 16 bytes from pairs of hex digits; single spaces separate them."""
    result = bytearray()
    pos = 0
    while pos + 1 < len(text) and len(result) < MAX_PATTERN_LEN:
        if text[pos] == " ":
            pos += 1
            continue
        result.append(_hex_pair_value(text[pos : pos + 2]))
        pos += 2
    return bytes(result)


def encode_pattern(text, is_hex: bool) -> bytes:
    """Bytes that a user-entered string stands for, in hex or text mode."""
    if is_hex:
        return parse_hex_string(text)
    if isinstance(text, (bytes, bytearray)):
        return bytes(text)
    return text.encode("utf-8")


def parse_hex_byte(text: str) -> int:
    """Exactly two hex digits as one byte value."""
    if len(text) == 2 and all(char in _HEX_DIGITS for char in text):
        return int(text, 16)
    raise EditError("Invalid HEX input. Please enter two hexadecimal characters.")


def _checked_pattern(text, is_hex: bool) -> bytes:
    pattern = encode_pattern(text, is_hex)
    if not 0 < len(pattern) <= MAX_PATTERN_LEN:
        raise EditError("Invalid search string length")
    return pattern


def _positions(buffer, pattern: bytes):
    last = len(buffer) - len(pattern)
    return (i for i in range(last + 1) if buffer[i : i + len(pattern)] == pattern)


def search_string_in_sector(buffer, text, is_hex: bool) -> list[int]:
    """Offsets of every occurrence, overlapping ones included, at most MAX_MATCHES."""
    pattern = _checked_pattern(text, is_hex)
    matches = []
    for offset in _positions(buffer, pattern):
        matches.append(offset)
        if len(matches) == MAX_MATCHES:
            break
    return matches


def search_bytes_in_sector(buffer, pattern) -> int:
    """Offset of the first occurrence not ending on the last byte, or -1."""
    return bytes(buffer).find(bytes(pattern), 0, len(buffer) - 1)


def replace_string_in_sector(buffer: bytearray, search_text, replace_text, is_hex: bool) -> int:
    """Replace every occurrence, padding shorter replacements with zeros.

    Returns the number of replacements made.
    """
    search = encode_pattern(search_text, is_hex)
    replacement = encode_pattern(replace_text, is_hex)
    if not (0 < len(search) <= MAX_PATTERN_LEN and 0 < len(replacement) <= MAX_PATTERN_LEN):
        raise EditError("Invalid search or replacement length")
    if len(replacement) > len(search):
        raise EditError("Replacement string is longer than search string!")
    padded = replacement + bytes(len(search) - len(replacement))
    count = 0
    for offset in range(len(buffer) - len(search) + 1):
        if buffer[offset : offset + len(search)] == search:
            buffer[offset : offset + len(search)] = padded
            count += 1
    return count


def set_byte(buffer: bytearray, index: int, value: int, history: History) -> None:
    """Change one byte and record it for undo."""
    if not 0 <= value <= 0xFF:
        raise EditError(f"Byte value out of range: {value}")
    old_value = buffer[index]
    buffer[index] = value
    history.save(Operation.BYTE_CHANGE, index, old_value, value, None, None)
    history.clear_redo()


def replace_string_at_cursor(buffer: bytearray, index: int, text, is_hex: bool, history: History) -> None:
    """Overwrite bytes starting at ``index`` with the given string."""
    data = encode_pattern(text, is_hex)
    if index + len(data) > len(buffer):
        raise EditError("Insert string exceeds sector boundaries!")
    old_data = bytes(buffer[index : index + len(data)])
    history.save(Operation.LINE_REPLACE, index, 0, 0, old_data, data)
    buffer[index : index + len(data)] = data
    history.clear_redo()


def delete_bytes_from_cursor(buffer: bytearray, index: int, count: int, history: History) -> None:
    """Zero ``count`` bytes starting at ``index``."""
    if count < 0:
        raise EditError("Number of bytes to delete must not be negative")
    if index + count > len(buffer):
        raise EditError("Delete range exceeds sector boundaries!")
    old_data = bytes(buffer[index : index + count])
    buffer[index : index + count] = bytes(count)
    history.save(Operation.LINE_REMOVE, index, 0, 0, old_data, None)
    history.clear_redo()


def delete_string(buffer: bytearray, text, is_hex: bool, history: History) -> int | None:
    """Zero the first occurrence of the string; its offset, or None if absent."""
    pattern = _checked_pattern(text, is_hex)
    offset = next(_positions(buffer, pattern), None)
    if offset is None:
        return None
    buffer[offset : offset + len(pattern)] = bytes(len(pattern))
    history.save(Operation.LINE_REMOVE, offset, 0, 0, pattern, None)
    history.clear_redo()
    return offset
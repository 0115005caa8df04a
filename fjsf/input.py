"""Raw terminal input decoding.

Each chunk read from stdin is assumed to hold exactly one keypress and maps
to exactly one logical action; there is no reassembly across chunks.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass

CTRL_C = 0x03
BACKSPACE = 0x08
LINE_FEED = 0x0A
CARRIAGE_RETURN = 0x0D
ESCAPE = 0x1B
DELETE = 0x7F
PRINTABLE_FIRST = 0x20
PRINTABLE_LAST = 0x7E

ARROW_PREFIXES = (b"\x1b[", b"\x1bO")
READ_CHUNK_SIZE = 16


class InputAction(enum.Enum):
    EXIT = "exit"
    CONFIRM = "confirm"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    DELETE = "delete"
    INSERT = "insert"
    IGNORE = "ignore"


@dataclass(frozen=True)
class DecodedInput:
    action: InputAction
    char: str = ""


_IGNORED = DecodedInput(InputAction.IGNORE)


def decode_input(chunk: bytes) -> DecodedInput:
    """Classify one raw input chunk.

    Priority: exit (Ctrl-C, lone ESC, ``q``), confirm (CR/LF), arrow up/down,
    delete (DEL/BS), insert (printable ASCII), otherwise ignore.
    """
    if not chunk:
        return _IGNORED
    first = chunk[0]

    if first == CTRL_C or chunk == b"\x1b" or first == ord("q"):
        return DecodedInput(InputAction.EXIT)
    if first in (CARRIAGE_RETURN, LINE_FEED):
        return DecodedInput(InputAction.CONFIRM)
    if len(chunk) >= 3 and chunk[:2] in ARROW_PREFIXES:
        if chunk[2] == ord("A"):
            return DecodedInput(InputAction.MOVE_UP)
        if chunk[2] == ord("B"):
            return DecodedInput(InputAction.MOVE_DOWN)
        return _IGNORED
    if first in (DELETE, BACKSPACE):
        return DecodedInput(InputAction.DELETE)
    if PRINTABLE_FIRST <= first <= PRINTABLE_LAST:
        return DecodedInput(InputAction.INSERT, chr(first))
    return _IGNORED


def read_chunk(fd: int, size: int = READ_CHUNK_SIZE) -> bytes:
    """Block for the next raw chunk; ``b""`` signals end of input."""
    return os.read(fd, size)

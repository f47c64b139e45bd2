"""
ESC/POS Command Definitions.

This module provides the closed set of printer operations understood by
ESC/POS-class thermal receipt printers and their exact byte encodings.

Every command encodes to one fixed-shape byte sequence and never depends on
what was sent before it. The printer itself is stateful, the commands are not.

Control introducers:
    ESC: 0x1B (most text and paper commands)
    GS:  0x1D (reverse printing, cutter, barcode setup)
    LF:  0x0A (print and line feed)
"""

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Iterable, Optional, Union

from .exceptions import UnsupportedCommandError


ESC = 0x1B
GS = 0x1D
LF = 0x0A


class PrintMode(IntFlag):
    """Print mode bits sent with ESC !."""
    FONT_B = 0x01         # Compressed font
    EMPHASIZED = 0x08
    DOUBLE_HEIGHT = 0x10
    DOUBLE_WIDTH = 0x20
    UNDERLINE = 0x80      # Legacy; underline thickness is set with ESC -


class UnderlineMode(IntEnum):
    """Underline thickness (ESC -)."""
    OFF = 0
    ONE_DOT = 1
    TWO_DOT = 2


class Font(IntEnum):
    """Character font (ESC M)."""
    A = 0
    B = 1
    C = 2


class Justification(IntEnum):
    """Horizontal alignment (ESC a)."""
    LEFT = 0
    CENTER = 1
    RIGHT = 2


class CutMode(IntEnum):
    """Cutter mode (GS V). Full cut is code 0."""
    FULL = 0
    PARTIAL = 1


class CharCodeTable(IntEnum):
    """Character code tables (ESC t)."""
    PC437 = 0            # USA: Standard Europe
    KATAKANA = 1
    PC850 = 2            # Multilingual
    PC860 = 3            # Portuguese
    PC863 = 4            # Canadian-French
    PC865 = 5            # Nordic
    WPC1252 = 16
    PC866 = 17           # Cyrillic #2
    PC852 = 18           # Latin 2
    PC858 = 19           # Euro
    THAI_CHAR_CODE_42 = 20
    THAI_CHAR_CODE_11 = 21
    THAI_CHAR_CODE_13 = 22
    THAI_CHAR_CODE_14 = 23
    THAI_CHAR_CODE_16 = 24
    THAI_CHAR_CODE_17 = 25
    THAI_CHAR_CODE_18 = 26
    USER_DEFINED_1 = 254
    USER_DEFINED_2 = 255

    @property
    def codec(self) -> Optional[str]:
        """Python codec producing bytes in this table, if there is one."""
        return _TABLE_CODECS.get(self)


_TABLE_CODECS = {
    CharCodeTable.PC437: "cp437",
    CharCodeTable.PC850: "cp850",
    CharCodeTable.PC860: "cp860",
    CharCodeTable.PC863: "cp863",
    CharCodeTable.PC865: "cp865",
    CharCodeTable.WPC1252: "cp1252",
    CharCodeTable.PC866: "cp866",
    CharCodeTable.PC852: "cp852",
    CharCodeTable.PC858: "cp858",
}


def _flag(enabled: bool) -> int:
    """ASCII '1' or '0' parameter used by the on/off commands."""
    return ord("1") if enabled else ord("0")


def _check_byte(name: str, value: int):
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must be in range 0-255, got {value}")


class Command:
    """Base class of all printer commands."""

    def encode(self) -> bytes:
        """Encode command to bytes for transmission."""
        raise NotImplementedError

    def __bytes__(self) -> bytes:
        return self.encode()


# ---- Printer setup ----


@dataclass(frozen=True)
class InitializePrinter(Command):
    """Reset printer to power-on defaults (ESC @)."""

    def encode(self) -> bytes:
        return bytes([ESC, ord("@")])


@dataclass(frozen=True)
class SelectCharCodeTable(Command):
    """Select the 8-bit character table (ESC t n)."""
    table: CharCodeTable

    def encode(self) -> bytes:
        return bytes([ESC, ord("t"), int(self.table)])


# ---- Character formatting ----


@dataclass(frozen=True)
class SelectPrintMode(Command):
    """Set font, emphasis and size bits at once (ESC ! n)."""
    mode: PrintMode = PrintMode(0)

    def encode(self) -> bytes:
        return bytes([ESC, ord("!"), int(self.mode) & 0xFF])


@dataclass(frozen=True)
class SelectUnderlineMode(Command):
    """Set underline thickness (ESC - n)."""
    level: UnderlineMode

    def encode(self) -> bytes:
        return bytes([ESC, ord("-"), int(self.level)])


@dataclass(frozen=True)
class SelectEmphasized(Command):
    """Turn emphasized mode on or off (ESC E)."""
    enabled: bool

    def encode(self) -> bytes:
        return bytes([ESC, ord("E"), _flag(self.enabled)])


@dataclass(frozen=True)
class SelectDoubleStrike(Command):
    """Turn double-strike mode on or off (ESC G)."""
    enabled: bool

    def encode(self) -> bytes:
        return bytes([ESC, ord("G"), _flag(self.enabled)])


@dataclass(frozen=True)
class SelectFont(Command):
    """Select character font (ESC M)."""
    font: Font

    def encode(self) -> bytes:
        return bytes([ESC, ord("M"), ord("0") + int(self.font)])


@dataclass(frozen=True)
class SelectPrintColor(Command):
    """Select first or second print color (ESC r)."""
    second_color: bool

    def encode(self) -> bytes:
        return bytes([ESC, ord("r"), _flag(self.second_color)])


@dataclass(frozen=True)
class SelectReversePrinting(Command):
    """Turn white/black reverse printing on or off (GS B)."""
    enabled: bool

    def encode(self) -> bytes:
        return bytes([GS, ord("B"), _flag(self.enabled)])


@dataclass(frozen=True)
class SelectJustification(Command):
    """Select horizontal alignment (ESC a)."""
    justification: Justification

    def encode(self) -> bytes:
        return bytes([ESC, ord("a"), ord("0") + int(self.justification)])


# ---- Paper movement ----


@dataclass(frozen=True)
class PrintAndLineFeed(Command):
    """Print the buffer and feed one line (LF)."""

    def encode(self) -> bytes:
        return bytes([LF])


@dataclass(frozen=True)
class PrintAndFeedLines(Command):
    """Print the buffer and feed n lines (ESC d n)."""
    lines: int

    def __post_init__(self):
        _check_byte("lines", self.lines)

    def encode(self) -> bytes:
        return bytes([ESC, ord("d"), self.lines])


@dataclass(frozen=True)
class PrintAndReverseFeedLines(Command):
    """Print the buffer and feed n lines backwards (ESC e n)."""
    lines: int

    def __post_init__(self):
        _check_byte("lines", self.lines)

    def encode(self) -> bytes:
        return bytes([ESC, ord("e"), self.lines])


@dataclass(frozen=True)
class CutPaper(Command):
    """Cut the receipt (GS V)."""
    mode: CutMode = CutMode.PARTIAL

    def encode(self) -> bytes:
        return bytes([GS, ord("V"), ord("0") + int(self.mode)])


# ---- Barcodes ----


@dataclass(frozen=True)
class SelectBarCodeHeight(Command):
    """Set the height of subsequent barcodes in dots (GS h n)."""
    height: int

    def __post_init__(self):
        _check_byte("height", self.height)

    def encode(self) -> bytes:
        return bytes([GS, ord("h"), self.height])


# ---- Payload ----


@dataclass(frozen=True)
class Text(Command):
    """
    Literal text payload.

    Strings are encoded with the given codec; characters the codec cannot
    represent become '?'. Bytes pass through unchanged. Without an explicit
    encoding, a printer uses its current one and a bare encode() uses UTF-8.
    """
    text: Union[str, bytes]
    encoding: Optional[str] = None

    def encode(self) -> bytes:
        if isinstance(self.text, bytes):
            return self.text
        return self.text.encode(self.encoding or "utf-8", errors="replace")


# ---- Reserved ----


@dataclass(frozen=True)
class SelectPaperSensorMode(Command):
    """Select paper sensors that trigger paper-end signals (reserved)."""
    sensors: int = 0

    def encode(self) -> bytes:
        raise UnsupportedCommandError(self)


@dataclass(frozen=True)
class GeneratePulse(Command):
    """Generate a pulse on the drawer kick-out connector (reserved)."""
    pin: bool = False

    def encode(self) -> bytes:
        raise UnsupportedCommandError(self)


@dataclass(frozen=True)
class PrintBarCode(Command):
    """Print a barcode (reserved)."""
    system: int = 0

    def encode(self) -> bytes:
        raise UnsupportedCommandError(self)


def encode(command: Command) -> bytes:
    """Encode a single command."""
    return command.encode()


def encode_all(commands: Iterable[Command]) -> bytes:
    """
    Encode a sequence of commands into one buffer.

    Args:
        commands: Commands in transmission order

    Returns:
        Concatenated encodings

    Raises:
        UnsupportedCommandError: If any command is a reserved one
    """
    return b"".join(cmd.encode() for cmd in commands)

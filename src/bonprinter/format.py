"""
Formatted Text for ESC/POS Printers.

A FormattedStr wraps a piece of text together with the visual attributes
it should be printed with. Rendering emits the attribute-enter commands,
the text, and the matching attribute-exit commands:

    [reverse on] [underline n] print mode  TEXT  print mode 0 [underline off] [reverse off]

Enter and exit sequences mirror each other (reverse outermost, print mode
innermost), so the printer is back at its baseline state after every
rendered string and attributes never leak onto the text that follows.

Printer state lives in the printer, so two requests whose sequences
interleave on the wire will corrupt each other. Writers sharing one
transport must serialize whole rendered strings (see printer.ThermalPrinter).
"""

from dataclasses import dataclass, replace
from typing import Union

from .commands import (
    Command,
    PrintMode,
    SelectPrintMode,
    SelectReversePrinting,
    SelectUnderlineMode,
    Text,
    UnderlineMode,
)


@dataclass(frozen=True)
class FormattedStr:
    """Text with applied formatting, built up by chained attribute calls."""
    text: Union[str, bytes]
    mode: PrintMode = PrintMode(0)
    underline: UnderlineMode = UnderlineMode.OFF
    reverse_color: bool = False

    # ---- Attribute builders ----

    def emph(self) -> "FormattedStr":
        """Emphasized (bold) text."""
        return replace(self, mode=self.mode | PrintMode.EMPHASIZED)

    def higher(self) -> "FormattedStr":
        """Double-height text."""
        return replace(self, mode=self.mode | PrintMode.DOUBLE_HEIGHT)

    def wider(self) -> "FormattedStr":
        """Double-width text."""
        return replace(self, mode=self.mode | PrintMode.DOUBLE_WIDTH)

    def small(self) -> "FormattedStr":
        """Compressed font (font B)."""
        return replace(self, mode=self.mode | PrintMode.FONT_B)

    def underline1(self) -> "FormattedStr":
        """One-dot underline. Replaces any previous underline level."""
        return replace(self, underline=UnderlineMode.ONE_DOT)

    def underline2(self) -> "FormattedStr":
        """Two-dot underline. Replaces any previous underline level."""
        return replace(self, underline=UnderlineMode.TWO_DOT)

    def reverse(self) -> "FormattedStr":
        """White on black."""
        return replace(self, reverse_color=True)

    # ---- Serialization ----

    def enter_commands(self) -> list[Command]:
        """Commands sent before the text."""
        commands: list[Command] = []
        if self.reverse_color:
            commands.append(SelectReversePrinting(True))
        if self.underline != UnderlineMode.OFF:
            commands.append(SelectUnderlineMode(self.underline))
        # Always sent, even when empty, to reset any mode left on the printer
        commands.append(SelectPrintMode(self.mode))
        return commands

    def exit_commands(self) -> list[Command]:
        """Commands sent after the text, restoring the baseline state."""
        commands: list[Command] = [SelectPrintMode(PrintMode(0))]
        if self.underline != UnderlineMode.OFF:
            commands.append(SelectUnderlineMode(UnderlineMode.OFF))
        if self.reverse_color:
            commands.append(SelectReversePrinting(False))
        return commands

    def commands(self, encoding: str = "utf-8") -> list[Command]:
        """Full command sequence: enter, text, exit."""
        return [
            *self.enter_commands(),
            Text(self.text, encoding),
            *self.exit_commands(),
        ]

    def encode(self, encoding: str = "utf-8") -> bytes:
        """
        Render to the byte stream sent to the printer.

        Args:
            encoding: Codec for the text payload (should match the
                character code table selected on the printer)
        """
        return b"".join(cmd.encode() for cmd in self.commands(encoding))

    def __bytes__(self) -> bytes:
        return self.encode()


def render(formatted: FormattedStr, encoding: str = "utf-8") -> bytes:
    """Render a FormattedStr to bytes."""
    return formatted.encode(encoding)


# Shortcuts that start a formatting chain from plain text,
# e.g. emph("Total").wider()

def emph(text: Union[str, bytes]) -> FormattedStr:
    return FormattedStr(text).emph()


def higher(text: Union[str, bytes]) -> FormattedStr:
    return FormattedStr(text).higher()


def wider(text: Union[str, bytes]) -> FormattedStr:
    return FormattedStr(text).wider()


def small(text: Union[str, bytes]) -> FormattedStr:
    return FormattedStr(text).small()


def underline1(text: Union[str, bytes]) -> FormattedStr:
    return FormattedStr(text).underline1()


def underline2(text: Union[str, bytes]) -> FormattedStr:
    return FormattedStr(text).underline2()


def reverse(text: Union[str, bytes]) -> FormattedStr:
    return FormattedStr(text).reverse()

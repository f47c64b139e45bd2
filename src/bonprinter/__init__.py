"""ESC/POS Thermal Receipt Printer Driver."""

__version__ = "0.1.0"

from .commands import (
    CharCodeTable,
    Command,
    CutMode,
    CutPaper,
    Font,
    GeneratePulse,
    InitializePrinter,
    Justification,
    PrintAndFeedLines,
    PrintAndLineFeed,
    PrintAndReverseFeedLines,
    PrintBarCode,
    PrintMode,
    SelectBarCodeHeight,
    SelectCharCodeTable,
    SelectDoubleStrike,
    SelectEmphasized,
    SelectFont,
    SelectJustification,
    SelectPaperSensorMode,
    SelectPrintColor,
    SelectPrintMode,
    SelectReversePrinting,
    SelectUnderlineMode,
    Text,
    UnderlineMode,
    encode,
    encode_all,
)
from .format import FormattedStr, render
from .directives import apply_directives, format_message
from .connection import MemoryConnection, SerialConnection
from .printer import ThermalPrinter
from .config import Settings, Role, User, PrinterSettings, load_settings, load_or_create_default
from .exceptions import (
    NotConnectedError,
    PrinterError,
    SettingsError,
    TransportError,
    UnknownDirectiveError,
    UnsupportedCommandError,
)

__all__ = [
    "ThermalPrinter",
    "SerialConnection",
    "MemoryConnection",
    "Command",
    "InitializePrinter",
    "PrintAndLineFeed",
    "SelectPrintMode",
    "SelectUnderlineMode",
    "SelectEmphasized",
    "SelectDoubleStrike",
    "SelectFont",
    "SelectJustification",
    "SelectPaperSensorMode",
    "PrintAndFeedLines",
    "PrintAndReverseFeedLines",
    "GeneratePulse",
    "SelectPrintColor",
    "SelectCharCodeTable",
    "SelectReversePrinting",
    "CutPaper",
    "SelectBarCodeHeight",
    "PrintBarCode",
    "Text",
    "PrintMode",
    "UnderlineMode",
    "Font",
    "Justification",
    "CutMode",
    "CharCodeTable",
    "encode",
    "encode_all",
    "FormattedStr",
    "render",
    "apply_directives",
    "format_message",
    "Settings",
    "Role",
    "User",
    "PrinterSettings",
    "load_settings",
    "load_or_create_default",
    "PrinterError",
    "UnsupportedCommandError",
    "TransportError",
    "NotConnectedError",
    "SettingsError",
    "UnknownDirectiveError",
]

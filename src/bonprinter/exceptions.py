"""Exception classes for the bonprinter package."""

import typing

if typing.TYPE_CHECKING:
    from .commands import Command


class PrinterError(Exception):
    """Base exception for all printer errors."""

    pass


class UnsupportedCommandError(PrinterError):
    """A reserved command was asked to encode itself."""

    def __init__(self, command: 'Command'):
        self.command: 'Command' = command
        super().__init__(f"{type(command).__name__} is not supported by this encoder")


class TransportError(PrinterError):
    """The byte sink rejected or failed a write."""

    pass


class NotConnectedError(TransportError):
    """A write was attempted before the transport was opened."""

    def __init__(self, port: str):
        self.port: str = port
        super().__init__(f"Not connected to printer at {port}")


class SettingsError(PrinterError):
    """Settings file could not be opened, parsed or created."""

    def __init__(self, message: str, path: str):
        self.path: str = path
        super().__init__(f"{message}: {path}")


class UnknownDirectiveError(PrinterError, ValueError):
    """A formatting directive name is not recognised."""

    def __init__(self, name: str):
        self.name: str = name
        super().__init__(f"Unknown formatting directive: '{name}'")

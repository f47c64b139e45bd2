"""
High-Level ESC/POS Printer Interface.

Provides a simple API for printing formatted text on a thermal receipt
printer over a serial link.
"""

import threading
from typing import Optional, Union

from .commands import (
    CharCodeTable,
    Command,
    CutMode,
    CutPaper,
    InitializePrinter,
    PrintAndFeedLines,
    PrintAndReverseFeedLines,
    SelectCharCodeTable,
    Text,
)
from .connection import MemoryConnection, SerialConnection
from .directives import format_message
from .exceptions import (
    NotConnectedError,
    PrinterError,
    TransportError,
    UnsupportedCommandError,
)
from .format import FormattedStr

Printable = Union[Command, FormattedStr, str, bytes]
Connection = Union[SerialConnection, MemoryConnection]


class ThermalPrinter:
    """
    High-level interface to an ESC/POS receipt printer.

    Every call to write() encodes all of its items into a single buffer
    and hands it to the connection in one locked write, so print requests
    from different threads never interleave on the wire.
    """

    # Lines fed before cutting so the last printed line clears the cutter
    DEFAULT_FEED_LINES = 4

    def __init__(self, connection: Connection, encoding: str = "utf-8"):
        """
        Initialize printer interface.

        Args:
            connection: Byte sink to the printer (SerialConnection, MemoryConnection)
            encoding: Codec used for text until a code table is selected
        """
        self.connection = connection
        self.encoding = encoding
        self._default_encoding = encoding
        self._lock = threading.RLock()
        self._debug = False

    @classmethod
    def open_serial(cls, port: str, baudrate: int = SerialConnection.DEFAULT_BAUD_RATE,
                    encoding: str = "utf-8") -> "ThermalPrinter":
        """Create a printer on a serial port and initialize it."""
        printer = cls(SerialConnection(port, baudrate), encoding=encoding)
        printer.connect()
        return printer

    def set_debug(self, enabled: bool):
        """Enable/disable debug output."""
        self._debug = enabled

    def _log(self, message: str):
        """Print debug message if enabled."""
        if self._debug:
            print(f"[BON] {message}")

    def connect(self):
        """
        Open the connection and reset the printer to its defaults.

        The reset also restores the power-on code table, so the text
        encoding goes back to the one the printer was created with.

        Raises:
            TransportError: If the port cannot be opened or written
        """
        self._log(f"Connecting to {self.connection.port}...")
        self.connection.open()
        with self._lock:
            self.execute(InitializePrinter())
            self.encoding = self._default_encoding
        self._log("Printer initialized")

    def disconnect(self):
        """Close the connection."""
        self.connection.close()
        self._log("Disconnected")

    def encode(self, *items: Printable) -> bytes:
        """
        Encode printable items into one buffer.

        Strings are encoded with the current printer encoding, bytes are
        passed through, commands and formatted strings render themselves.
        A SelectCharCodeTable item switches the encoding for the items
        that follow it.

        Raises:
            UnsupportedCommandError: If an item is a reserved command
        """
        buffer = bytearray()
        with self._lock:
            previous = self.encoding
            try:
                self._encode_into(buffer, items)
            except Exception:
                # Nothing was sent, so the printer is still on the old table
                self.encoding = previous
                raise
        return bytes(buffer)

    def _encode_into(self, buffer: bytearray, items):
        for item in items:
            if isinstance(item, FormattedStr):
                buffer += item.encode(self.encoding)
            elif isinstance(item, Text):
                buffer += Text(item.text, item.encoding or self.encoding).encode()
            elif isinstance(item, Command):
                buffer += item.encode()
                if isinstance(item, SelectCharCodeTable):
                    self._select_encoding(item.table)
            elif isinstance(item, (str, bytes)):
                buffer += Text(item, self.encoding).encode()
            else:
                raise TypeError(f"Cannot print item of type {type(item).__name__}")

    def write(self, *items: Printable) -> int:
        """
        Encode items and send them to the printer in a single write.

        Returns:
            Number of bytes written

        Raises:
            UnsupportedCommandError: If an item is a reserved command
            TransportError: If the write fails (not retried)
        """
        with self._lock:
            data = self.encode(*items)
            return self.send_raw(data)

    def send_raw(self, data: bytes) -> int:
        """Send raw bytes to the printer."""
        self._log(f"TX: {data.hex() if len(data) < 50 else data[:50].hex() + '...'}")
        with self._lock:
            return self.connection.write(data)

    def execute(self, *commands: Command) -> int:
        """
        Send commands to the printer.

        Selecting a character code table also switches the encoding used
        for subsequent text, when Python has a codec for that table.
        """
        return self.write(*commands)

    def _select_encoding(self, table: CharCodeTable):
        if table.codec is not None:
            self.encoding = table.codec
            self._log(f"Text encoding: {self.encoding}")
        else:
            self._log(f"No codec for {table.name}, keeping {self.encoding}")

    def select_code_table(self, table: CharCodeTable) -> int:
        """Select a character code table on the printer."""
        return self.execute(SelectCharCodeTable(table))

    def feed(self, lines: int = 1) -> int:
        """Feed paper forward by a number of lines."""
        return self.execute(PrintAndFeedLines(lines))

    def reverse_feed(self, lines: int = 1) -> int:
        """Feed paper backward by a number of lines."""
        return self.execute(PrintAndReverseFeedLines(lines))

    def cut(self, mode: CutMode = CutMode.PARTIAL) -> int:
        """Cut the paper."""
        return self.execute(CutPaper(mode))

    def write_and_cut(
        self,
        *items: Printable,
        feed_lines: int = DEFAULT_FEED_LINES,
        cut_mode: CutMode = CutMode.PARTIAL,
    ) -> int:
        """
        Print items, feed the paper past the cutter and cut, as one write.

        Args:
            items: Things to print
            feed_lines: Lines fed before cutting
            cut_mode: Full or partial cut
        """
        return self.write(*items, PrintAndFeedLines(feed_lines), CutPaper(cut_mode))

    def print_message(
        self,
        first_name: str,
        text: str,
        last_name: Optional[str] = None,
        **kwargs,
    ) -> int:
        """
        Print a chat message as a cut receipt.

        Keyword arguments are passed to write_and_cut().
        """
        self._log(f"Printing message from {first_name} ({len(text)} chars)")
        return self.write_and_cut(*format_message(first_name, text, last_name), **kwargs)

    @property
    def is_connected(self) -> bool:
        """Check if currently connected to a printer."""
        return self.connection.is_connected

    def __enter__(self) -> "ThermalPrinter":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()


__all__ = [
    "ThermalPrinter",
    "Printable",
    "PrinterError",
    "TransportError",
    "NotConnectedError",
    "UnsupportedCommandError",
]

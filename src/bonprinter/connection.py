"""
Serial Connection Handler for ESC/POS Printers.

Handles the byte link to the printer using pySerial. Anything
serial.serial_for_url understands can be used as the port: device paths
(/dev/serial0, /dev/ttyUSB0, COM3), or URLs such as socket://host:9100
and loop:// (loopback, for testing).

The connection is a plain byte sink. It does not retry and does not
resume partial writes; failures are raised to the caller as TransportError.
"""

from typing import Optional

import serial

from .exceptions import NotConnectedError, TransportError


class SerialConnection:
    """Manages the serial link to a receipt printer."""

    DEFAULT_BAUD_RATE = 9600
    DEFAULT_TIMEOUT = 10.0  # seconds, for both reads and writes

    def __init__(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUD_RATE,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.serial: Optional[serial.SerialBase] = None

    def open(self):
        """
        Open the port.

        Raises:
            TransportError: If the port cannot be opened
        """
        if self.is_connected:
            return

        try:
            self.serial = serial.serial_for_url(
                self.port,
                baudrate=self.baudrate,
                timeout=self.timeout,
                write_timeout=self.timeout,
            )
        except (serial.SerialException, ValueError) as e:
            self.serial = None
            raise TransportError(f"Failed to open {self.port}: {e}") from e

    def close(self):
        """Close the port."""
        if self.serial is not None:
            try:
                self.serial.close()
            finally:
                self.serial = None

    def write(self, data: bytes) -> int:
        """
        Write all of data to the printer and flush.

        Returns:
            Number of bytes written

        Raises:
            NotConnectedError: If the port is not open
            TransportError: If the write fails or is cut short
        """
        if not self.is_connected:
            raise NotConnectedError(self.port)

        try:
            written = self.serial.write(data)
            self.serial.flush()
        except serial.SerialException as e:
            raise TransportError(f"Write to {self.port} failed: {e}") from e

        if written is not None and written != len(data):
            raise TransportError(
                f"Short write to {self.port}: {written} of {len(data)} bytes"
            )
        return len(data)

    def read(self, size: int = 1) -> bytes:
        """Read up to size bytes (status responses, loopback)."""
        if not self.is_connected:
            raise NotConnectedError(self.port)

        try:
            return self.serial.read(size)
        except serial.SerialException as e:
            raise TransportError(f"Read from {self.port} failed: {e}") from e

    @property
    def is_connected(self) -> bool:
        """Check if the port is open."""
        return self.serial is not None and self.serial.is_open

    def __enter__(self) -> "SerialConnection":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        return f"SerialConnection(port={self.port!r}, baudrate={self.baudrate})"


class MemoryConnection:
    """Byte sink that keeps everything written to it (dry runs, tests)."""

    def __init__(self, port: str = "memory"):
        self.port = port
        self.buffer = bytearray()
        self._open = False

    def open(self):
        self._open = True

    def close(self):
        self._open = False

    def write(self, data: bytes) -> int:
        if not self._open:
            raise NotConnectedError(self.port)
        self.buffer.extend(data)
        return len(data)

    @property
    def data(self) -> bytes:
        """Everything written so far."""
        return bytes(self.buffer)

    @property
    def is_connected(self) -> bool:
        return self._open

    def __enter__(self) -> "MemoryConnection":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

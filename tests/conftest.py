"""
Pytest configuration for bonprinter tests.

Provides fixtures and command-line options for hardware tests.
"""

import pytest

from bonprinter import MemoryConnection, ThermalPrinter, TransportError


def pytest_addoption(parser):
    """Add command-line options for hardware tests."""
    parser.addoption(
        "--port",
        action="store",
        default=None,
        help="Serial port of the printer for hardware tests",
    )


@pytest.fixture
def printer_port(request):
    """Get the printer port from command line."""
    port = request.config.getoption("--port")
    if port is None:
        pytest.skip("No printer port provided (use --port=/dev/serial0)")
    return port


@pytest.fixture
def memory_connection():
    """An open in-memory byte sink."""
    conn = MemoryConnection()
    conn.open()
    return conn


@pytest.fixture
def memory_printer():
    """A printer writing into memory, already initialized."""
    printer = ThermalPrinter(MemoryConnection())
    printer.connect()
    yield printer
    printer.disconnect()


@pytest.fixture
def connected_printer(printer_port):
    """Provide a connected printer instance."""
    try:
        printer = ThermalPrinter.open_serial(printer_port)
    except TransportError as e:
        pytest.skip(f"Could not open printer at {printer_port}: {e}")
    printer.set_debug(True)

    yield printer

    printer.disconnect()

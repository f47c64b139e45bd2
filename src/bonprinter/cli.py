"""
Command-Line Interface for ESC/POS Receipt Printers.

Usage:
    bonprint print TEXT...       - Print formatted text and cut
    bonprint cut                 - Cut the paper
    bonprint feed LINES          - Feed paper
    bonprint raw HEX             - Send raw bytes
    bonprint codepages           - List character code tables
    bonprint init-config         - Write default settings
"""

import re
import sys
from pathlib import Path
from typing import Callable, Optional

import click

from .commands import CharCodeTable, CutMode, SelectCharCodeTable
from .config import SETTINGS_FILE, Settings, load_settings, save_settings
from .connection import MemoryConnection, SerialConnection
from .exceptions import (
    PrinterError,
    SettingsError,
    TransportError,
    UnknownDirectiveError,
    UnsupportedCommandError,
)
from .directives import apply_directives
from .printer import ThermalPrinter


# Device paths: /dev/serial0, /dev/ttyUSB0, /dev/cu.usbserial-1420
DEVICE_PATH_PATTERN = re.compile(r"^/dev/[\w.\-/]+$")

# Windows COM ports: COM1 .. COM256
COM_PORT_PATTERN = re.compile(r"^COM\d{1,3}$", re.IGNORECASE)

# pySerial URL handlers: loop://, socket://host:port, rfc2217://host:port
SERIAL_URL_PATTERN = re.compile(r"^(loop|socket|rfc2217|spy|alt|hwgrep)://\S*$")


def validate_port(ctx, param, value):
    """Validate serial port format.

    Accepts:
        - Device path: /dev/serial0 (Linux/macOS)
        - COM port: COM3 (Windows)
        - pySerial URL: loop://, socket://host:9100

    Returns:
        The validated port (COM ports uppercased)

    Raises:
        click.BadParameter: If the port format is invalid
    """
    if value is None:
        return None
    if DEVICE_PATH_PATTERN.match(value) or SERIAL_URL_PATTERN.match(value):
        return value
    if COM_PORT_PATTERN.match(value):
        return value.upper()
    raise click.BadParameter(
        f"Invalid serial port: '{value}'. "
        "Expected a device path (/dev/ttyUSB0), a COM port (COM3) "
        "or a pySerial URL (socket://host:9100)"
    )


def port_options(func):
    """Common options for commands that talk to the printer."""
    func = click.option(
        "--dry-run",
        is_flag=True,
        help="Print the encoded bytes as hex instead of sending them",
    )(func)
    func = click.option("--baud", type=int, default=None, help="Baud rate (default from settings)")(func)
    func = click.option(
        "--port",
        "-p",
        callback=validate_port,
        help="Serial port (default from settings)",
    )(func)
    return func


def get_settings(ctx) -> Settings:
    """Settings from --config, or defaults when no settings file exists."""
    path = Path(ctx.obj["config"])
    if not path.exists():
        return Settings.default()
    return load_settings(path)


def run_job(ctx, port: Optional[str], baud: Optional[int], dry_run: bool,
            job: Callable[[ThermalPrinter, Settings], None]):
    """Open the printer, run job, and report errors the same way for every command."""
    try:
        settings = get_settings(ctx)
        if dry_run:
            connection = MemoryConnection()
        else:
            connection = SerialConnection(
                port or settings.printer.path,
                baud or settings.printer.baud_rate,
            )

        printer = ThermalPrinter(connection, encoding=settings.printer.encoding)
        printer.set_debug(ctx.obj["debug"])

        if not dry_run:
            click.echo(f"Connecting to {connection.port}...")

        printer.connect()
        try:
            job(printer, settings)
        finally:
            printer.disconnect()

        if dry_run:
            click.echo(connection.data.hex())

    except SettingsError as e:
        click.echo(f"Settings error: {e}", err=True)
        sys.exit(1)
    except UnsupportedCommandError as e:
        click.echo(f"Unsupported command: {e}", err=True)
        sys.exit(1)
    except TransportError as e:
        click.echo(f"Connection error: {e}", err=True)
        sys.exit(1)
    except PrinterError as e:
        click.echo(f"Printer error: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Invalid value: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option("--debug/--no-debug", default=False, help="Enable debug output")
@click.option(
    "--config",
    type=click.Path(dir_okay=False),
    default=str(SETTINGS_FILE),
    help="Settings file",
)
@click.pass_context
def main(ctx, debug, config):
    """ESC/POS Receipt Printer CLI."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config


@main.command("print")
@click.argument("text", nargs=-1, required=True)
@click.option("--bold", is_flag=True, help="Emphasized text")
@click.option("--high", is_flag=True, help="Double-height text")
@click.option("--wide", is_flag=True, help="Double-width text")
@click.option("--small", is_flag=True, help="Compressed font")
@click.option(
    "--underline",
    type=click.IntRange(0, 2),
    default=0,
    help="Underline thickness in dots (0-2)",
)
@click.option("--reverse", is_flag=True, help="White on black")
@click.option(
    "--style",
    "-s",
    multiple=True,
    help="Named formatting directive (repeatable), e.g. -s bold -s underline2",
)
@click.option(
    "--codepage",
    type=click.Choice([t.name for t in CharCodeTable], case_sensitive=False),
    default=None,
    help="Character code table to select before printing",
)
@click.option("--cut/--no-cut", default=True, help="Cut the paper after printing")
@port_options
@click.pass_context
def print_text(ctx, text, bold, high, wide, small, underline, reverse, style,
               codepage, cut, port, baud, dry_run):
    """Print TEXT with the given formatting.

    Multiple arguments are joined with spaces. A newline is appended.
    """
    directives = []
    if bold:
        directives.append("bold")
    if high:
        directives.append("high")
    if wide:
        directives.append("wide")
    if small:
        directives.append("small")
    if underline:
        directives.append(f"underline{underline}")
    if reverse:
        directives.append("reverse")
    directives.extend(style)

    try:
        formatted = apply_directives(" ".join(text), directives)
    except UnknownDirectiveError as e:
        raise click.BadParameter(str(e), param_hint="--style")

    def _print(printer: ThermalPrinter, settings: Settings):
        if codepage:
            printer.execute(SelectCharCodeTable(CharCodeTable[codepage.upper()]))
        if cut:
            printer.write_and_cut(
                formatted,
                "\n",
                feed_lines=settings.printer.feed_lines,
                cut_mode=settings.printer.cut,
            )
        else:
            printer.write(formatted, "\n")

    run_job(ctx, port, baud, dry_run, _print)
    if not dry_run:
        click.echo("Print complete!")


@main.command()
@click.option("--full", is_flag=True, help="Full cut instead of partial")
@click.option(
    "--feed",
    "feed_lines",
    type=click.IntRange(0, 255),
    default=0,
    help="Lines to feed before cutting",
)
@port_options
@click.pass_context
def cut(ctx, full, feed_lines, port, baud, dry_run):
    """Cut the paper."""

    def _cut(printer: ThermalPrinter, settings: Settings):
        if feed_lines:
            printer.feed(feed_lines)
        printer.cut(CutMode.FULL if full else CutMode.PARTIAL)

    run_job(ctx, port, baud, dry_run, _cut)


@main.command()
@click.argument("lines", type=click.IntRange(0, 255))
@click.option("--reverse", is_flag=True, help="Feed backwards")
@port_options
@click.pass_context
def feed(ctx, lines, reverse, port, baud, dry_run):
    """Feed LINES lines of paper."""

    def _feed(printer: ThermalPrinter, settings: Settings):
        if reverse:
            printer.reverse_feed(lines)
        else:
            printer.feed(lines)

    run_job(ctx, port, baud, dry_run, _feed)


@main.command()
@click.argument("hex_data")
@click.option(
    "--force",
    is_flag=True,
    help="Acknowledge risks and skip warning prompt",
)
@port_options
@click.pass_context
def raw(ctx, hex_data, force, port, baud, dry_run):
    """Send raw hex data to printer (for debugging/testing).

    WARNING: Raw bytes bypass the formatter, so attributes switched on
    here stay on for everything printed afterwards.
    """
    try:
        data = bytes.fromhex(hex_data)
    except ValueError:
        click.echo("Invalid hex data!", err=True)
        sys.exit(1)

    if not force and not dry_run:
        click.echo(
            "WARNING: Raw mode sends arbitrary data directly to the printer "
            "and can leave it in an unexpected state.",
            err=True,
        )
        if not click.confirm("Do you want to continue?"):
            click.echo("Aborted.")
            return

    def _raw(printer: ThermalPrinter, settings: Settings):
        printer.send_raw(data)

    run_job(ctx, port, baud, dry_run, _raw)


@main.command()
def codepages():
    """List character code tables and their codes."""
    for table in CharCodeTable:
        codec = table.codec or "-"
        click.echo(f"  {int(table):3d}  {table.name:<20} {codec}")


@main.command("init-config")
@click.option("--force", is_flag=True, help="Overwrite an existing settings file")
@click.pass_context
def init_config(ctx, force):
    """Write a default settings file."""
    path = Path(ctx.obj["config"])
    if path.exists() and not force:
        click.echo(f"Settings file already exists: {path} (use --force to overwrite)", err=True)
        sys.exit(1)

    try:
        save_settings(Settings.default(), path)
    except SettingsError as e:
        click.echo(f"Settings error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Wrote {path}")


if __name__ == "__main__":
    main()

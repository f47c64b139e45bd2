"""Tests for CLI functionality."""

import json

import click
import pytest
from click.testing import CliRunner

from bonprinter.cli import main, validate_port
from bonprinter.config import PrinterSettings, Settings, save_settings


INIT = "1b40"
RESET = "1b2100"
FEED_AND_CUT = "1b6404" + "1d5631"


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def config(tmp_path):
    """Path to a settings file that does not exist yet."""
    return str(tmp_path / "settings.json")


def invoke(runner, config, *args, **kwargs):
    return runner.invoke(main, ["--config", config, *args], **kwargs)


class TestPortValidation:
    """Test CLI serial port validation."""

    @pytest.mark.parametrize("port", [
        "/dev/serial0",
        "/dev/ttyUSB0",
        "/dev/cu.usbserial-1420",
        "loop://",
        "socket://192.168.1.50:9100",
        "rfc2217://printer:4000",
    ])
    def test_valid_ports(self, port):
        """Device paths and pySerial URLs are accepted unchanged."""
        assert validate_port(None, None, port) == port

    def test_com_port_uppercased(self):
        """Windows COM ports are returned uppercased."""
        assert validate_port(None, None, "com3") == "COM3"

    def test_none_port_returns_none(self):
        """None port returns None (falls back to settings)."""
        assert validate_port(None, None, None) is None

    @pytest.mark.parametrize("port", ["printer", "/tmp/x y", "http://host", "COM"])
    def test_invalid_port_raises_bad_parameter(self, port):
        """Invalid ports raise click.BadParameter."""
        with pytest.raises(click.BadParameter) as exc_info:
            validate_port(None, None, port)
        assert "Invalid serial port" in str(exc_info.value)

    @pytest.mark.parametrize("command", [
        ["print", "hi"],
        ["cut"],
        ["feed", "1"],
        ["raw", "00"],
    ])
    def test_commands_reject_invalid_port(self, runner, config, command):
        """Every printer command validates --port."""
        result = invoke(runner, config, *command, "--port", "not-a-port")
        assert result.exit_code != 0
        assert "Invalid serial port" in result.output


class TestPrintCommand:
    """Test the print command in dry-run mode."""

    def test_plain_text(self, runner, config):
        """Text is printed, a newline added, then feed and partial cut."""
        result = invoke(runner, config, "print", "--dry-run", "Hi")
        assert result.exit_code == 0
        assert result.output.strip() == INIT + RESET + "4869" + RESET + "0a" + FEED_AND_CUT

    def test_words_are_joined(self, runner, config):
        """Multiple arguments are joined with spaces."""
        result = invoke(runner, config, "print", "--dry-run", "a", "b")
        assert "612062" in result.output

    def test_bold(self, runner, config):
        """--bold sets the emphasized bit."""
        result = invoke(runner, config, "print", "--dry-run", "--bold", "x")
        assert result.output.strip().startswith(INIT + "1b2108" + "78" + RESET)

    def test_flags_combine(self, runner, config):
        """Flags OR into one print mode byte."""
        result = invoke(runner, config, "print", "--dry-run", "--bold", "--high", "--wide", "--small", "x")
        assert "1b2139" in result.output

    def test_underline_and_reverse(self, runner, config):
        """Underline and reverse wrap the print mode."""
        result = invoke(runner, config, "print", "--dry-run", "--underline", "2", "--reverse", "x")
        expected = "1d4231" + "1b2d02" + RESET + "78" + RESET + "1b2d00" + "1d4230"
        assert result.output.strip() == INIT + expected + "0a" + FEED_AND_CUT

    def test_style_option(self, runner, config):
        """--style takes named directives."""
        result = invoke(runner, config, "print", "--dry-run", "-s", "bold", "-s", "underline1", "x")
        assert "1b2d01" + "1b2108" in result.output

    def test_unknown_style(self, runner, config):
        """Unknown directives are rejected as bad parameters."""
        result = invoke(runner, config, "print", "--dry-run", "-s", "blink", "x")
        assert result.exit_code == 2
        assert "Unknown formatting directive" in result.output

    def test_underline_out_of_range(self, runner, config):
        """Underline only accepts 0-2."""
        result = invoke(runner, config, "print", "--dry-run", "--underline", "3", "x")
        assert result.exit_code == 2

    def test_no_cut(self, runner, config):
        """--no-cut leaves out feed and cut."""
        result = invoke(runner, config, "print", "--dry-run", "--no-cut", "x")
        assert result.output.strip() == INIT + RESET + "78" + RESET + "0a"

    def test_codepage(self, runner, config):
        """--codepage selects the table and encodes text with it."""
        result = invoke(runner, config, "print", "--dry-run", "--codepage", "pc437", "ü")
        assert result.exit_code == 0
        assert result.output.strip() == INIT + "1b7400" + RESET + "81" + RESET + "0a" + FEED_AND_CUT

    def test_settings_control_cut(self, runner, config):
        """Feed lines and cut mode come from the settings file."""
        settings = Settings(printer=PrinterSettings(feed_lines=2, cut_mode="full"))
        save_settings(settings, config)
        result = invoke(runner, config, "print", "--dry-run", "x")
        assert result.output.strip().endswith("1b6402" + "1d5630")

    def test_settings_encoding(self, runner, config):
        """The starting encoding comes from the settings file."""
        save_settings(Settings(printer=PrinterSettings(encoding="cp858")), config)
        result = invoke(runner, config, "print", "--dry-run", "--no-cut", "€")
        assert result.output.strip() == INIT + RESET + "d5" + RESET + "0a"

    def test_debug_output(self, runner, config):
        """--debug logs transmitted bytes."""
        result = invoke(runner, config, "--debug", "print", "--dry-run", "x")
        assert "[BON] TX:" in result.output

    def test_print_over_loopback(self, runner, config):
        """Printing to a real port reports progress."""
        result = invoke(runner, config, "print", "--port", "loop://", "Hi")
        assert result.exit_code == 0
        assert "Connecting to loop://..." in result.output
        assert "Print complete!" in result.output


class TestErrors:
    """Test error reporting."""

    def test_connection_error(self, runner, config):
        """Ports that cannot be opened exit with status 1."""
        result = invoke(runner, config, "print", "--port", "/dev/does-not-exist-bonprinter", "x")
        assert result.exit_code == 1
        assert "Connection error:" in result.output
        assert "Print complete!" not in result.output

    def test_broken_settings(self, runner, config):
        """Unreadable settings exit with status 1."""
        with open(config, "w") as f:
            f.write("{broken")
        result = invoke(runner, config, "print", "--dry-run", "x")
        assert result.exit_code == 1
        assert "Settings error:" in result.output

    def test_unknown_encoding(self, runner, config):
        """An unknown encoding in the settings exits with status 1."""
        with open(config, "w") as f:
            json.dump({"printer": {"encoding": "nope"}}, f)
        result = invoke(runner, config, "print", "--dry-run", "hi")
        assert result.exit_code == 1
        assert "Settings error:" in result.output
        assert "Unknown encoding" in result.output

    def test_invalid_cut_mode(self, runner, config):
        """An invalid cut mode in the settings exits with status 1."""
        with open(config, "w") as f:
            json.dump({"printer": {"cut_mode": "half"}}, f)
        result = invoke(runner, config, "print", "--dry-run", "x")
        assert result.exit_code == 1
        assert "Invalid value:" in result.output


class TestPaperCommands:
    """Test cut and feed commands."""

    def test_cut(self, runner, config):
        """cut makes a partial cut by default."""
        result = invoke(runner, config, "cut", "--dry-run")
        assert result.output.strip() == INIT + "1d5631"

    def test_full_cut_with_feed(self, runner, config):
        """--full --feed N feeds then cuts fully."""
        result = invoke(runner, config, "cut", "--dry-run", "--full", "--feed", "3")
        assert result.output.strip() == INIT + "1b6403" + "1d5630"

    def test_feed(self, runner, config):
        """feed N sends ESC d N."""
        result = invoke(runner, config, "feed", "5", "--dry-run")
        assert result.output.strip() == INIT + "1b6405"

    def test_reverse_feed(self, runner, config):
        """feed --reverse sends ESC e N."""
        result = invoke(runner, config, "feed", "5", "--reverse", "--dry-run")
        assert result.output.strip() == INIT + "1b6505"

    def test_feed_out_of_range(self, runner, config):
        """Line counts above 255 are rejected."""
        result = invoke(runner, config, "feed", "256", "--dry-run")
        assert result.exit_code == 2


class TestRawCommand:
    """Test raw command."""

    def test_raw_dry_run(self, runner, config):
        """Raw bytes are sent unchanged."""
        result = invoke(runner, config, "raw", "1b4531", "--dry-run")
        assert result.exit_code == 0
        assert result.output.strip() == INIT + "1b4531"

    def test_invalid_hex(self, runner, config):
        """Invalid hex exits with status 1."""
        result = invoke(runner, config, "raw", "zz", "--dry-run")
        assert result.exit_code == 1
        assert "Invalid hex data!" in result.output

    def test_raw_prompts_without_force(self, runner, config):
        """Without --force the user is warned and can abort."""
        result = invoke(runner, config, "raw", "00", "--port", "loop://", input="n\n")
        assert "WARNING" in result.output
        assert "Aborted." in result.output
        assert "Connecting" not in result.output

    def test_raw_force_skips_prompt(self, runner, config):
        """--force sends without asking."""
        result = invoke(runner, config, "raw", "00", "--port", "loop://", "--force")
        assert result.exit_code == 0
        assert "WARNING" not in result.output
        assert "Connecting to loop://..." in result.output


class TestCodepagesCommand:
    """Test codepages listing."""

    def test_lists_all_tables(self, runner):
        """Every table is listed with its code and codec."""
        result = runner.invoke(main, ["codepages"])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert len(lines) == 19
        assert lines[0].split() == ["0", "PC437", "cp437"]
        assert lines[-1].split() == ["255", "USER_DEFINED_2", "-"]


class TestInitConfig:
    """Test init-config command."""

    def test_writes_defaults(self, runner, config):
        """A default settings file is written."""
        result = invoke(runner, config, "init-config")
        assert result.exit_code == 0
        assert f"Wrote {config}" in result.output
        with open(config) as f:
            data = json.load(f)
        assert data["roles"][0]["name"] == "admin"

    def test_refuses_to_overwrite(self, runner, config):
        """An existing file is kept unless --force is given."""
        with open(config, "w") as f:
            f.write("{}")
        result = invoke(runner, config, "init-config")
        assert result.exit_code == 1
        assert "already exists" in result.output
        with open(config) as f:
            assert f.read() == "{}"

    def test_force_overwrites(self, runner, config):
        """--force replaces an existing file."""
        with open(config, "w") as f:
            f.write("{}")
        result = invoke(runner, config, "init-config", "--force")
        assert result.exit_code == 0
        with open(config) as f:
            assert "admin" in f.read()

"""
Printer and user settings.

Settings are an explicit value: load them once at startup and pass them
to whatever needs them. They are stored as JSON in the user's config
directory.
"""

import codecs
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional, Union

from .commands import CutMode
from .exceptions import SettingsError

# Config directory location
CONFIG_DIR = Path.home() / ".config" / "bonprinter"
SETTINGS_FILE = CONFIG_DIR / "settings.json"


@dataclass
class Role:
    """Permission set shared by a group of users."""

    name: str
    read: bool = False
    write: bool = False
    print: bool = False
    max_print_len: int = 280
    minutes_between_prints: int = 0


@dataclass
class User:
    """A known user and the name of their role."""

    id: int
    role: str


@dataclass
class PrinterSettings:
    """Serial port and paper handling."""

    path: str = "/dev/null"
    baud_rate: int = 9600
    encoding: str = "utf-8"
    feed_lines: int = 4
    cut_mode: str = "partial"  # "partial" or "full"

    def __post_init__(self):
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding: '{self.encoding}'") from None

    @property
    def cut(self) -> CutMode:
        """Cut mode as the command enum."""
        try:
            return CutMode[self.cut_mode.upper()]
        except KeyError:
            raise ValueError(f"Invalid cut_mode: '{self.cut_mode}'") from None


@dataclass
class BotSettings:
    """Credentials of the message front end."""

    token: str = "[YOUR BOT TOKEN]"


@dataclass
class Settings:
    """All settings of a printer deployment."""

    roles: list[Role] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    printer: PrinterSettings = field(default_factory=PrinterSettings)
    bot: BotSettings = field(default_factory=BotSettings)
    admin_id: Optional[int] = None

    @classmethod
    def default(cls) -> "Settings":
        """Settings written on first start: one admin role, no users."""
        return cls(
            roles=[Role(name="admin", read=True, write=True, print=True)],
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """
        Build settings from parsed JSON.

        Raises:
            KeyError, TypeError, ValueError: If the data is malformed
        """
        return cls(
            roles=[Role(**role) for role in data.get("roles", [])],
            users=[User(id=int(user["id"]), role=user["role"]) for user in data.get("users", [])],
            printer=PrinterSettings(**data.get("printer", {})),
            bot=BotSettings(**data.get("bot", {})),
            admin_id=int(data["admin_id"]) if data.get("admin_id") is not None else None,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def get_user(self, user_id: int) -> Optional[User]:
        """Find a user by id."""
        for user in self.users:
            if user.id == user_id:
                return user
        return None

    def get_role(self, user_id: int) -> Optional[Role]:
        """Find the role of a user, None for unknown users or roles."""
        user = self.get_user(user_id)
        if user is None:
            return None
        for role in self.roles:
            if role.name == user.role:
                return role
        return None

    @property
    def user_ids(self) -> list[int]:
        """Ids of all known users."""
        return [user.id for user in self.users]


def load_settings(path: Union[str, Path] = SETTINGS_FILE) -> Settings:
    """
    Load settings from a JSON file.

    Raises:
        SettingsError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise SettingsError("Could not open settings file", str(path)) from e

    try:
        return Settings.from_dict(json.loads(text))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        raise SettingsError(f"Could not parse settings file ({e})", str(path)) from e


def save_settings(settings: Settings, path: Union[str, Path] = SETTINGS_FILE) -> None:
    """
    Write settings to a JSON file, creating its directory.

    Raises:
        SettingsError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(settings.to_dict(), indent=2))
    except OSError as e:
        raise SettingsError("Could not create settings file", str(path)) from e


def load_or_create_default(path: Union[str, Path] = SETTINGS_FILE) -> Settings:
    """Load settings, writing and returning the defaults if the file is missing."""
    path = Path(path)
    if not path.exists():
        settings = Settings.default()
        save_settings(settings, path)
        return settings
    return load_settings(path)

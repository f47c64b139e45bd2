"""
Named Formatting Directives.

Maps the formatting names used by message front ends (chat commands,
CLI flags) onto FormattedStr builder calls, and builds the standard
layout of a printed chat message.
"""

from typing import Iterable, Optional, Union

from .exceptions import UnknownDirectiveError
from .format import FormattedStr


# Directive name -> builder method name
DIRECTIVES = {
    "bold": "emph",
    "emph": "emph",
    "emphasized": "emph",
    "high": "higher",
    "higher": "higher",
    "double-height": "higher",
    "wide": "wider",
    "wider": "wider",
    "double-width": "wider",
    "small": "small",
    "compressed": "small",
    "underline1": "underline1",
    "underline2": "underline2",
    "reverse": "reverse",
}


def normalize_directive(name: str) -> str:
    """Lowercase a directive name and accept '_' for '-'."""
    return name.strip().lower().replace("_", "-")


def apply_directive(formatted: FormattedStr, name: str) -> FormattedStr:
    """
    Apply one named directive.

    Raises:
        UnknownDirectiveError: If the name is not a known directive
    """
    method = DIRECTIVES.get(normalize_directive(name))
    if method is None:
        raise UnknownDirectiveError(name)
    return getattr(formatted, method)()


def apply_directives(
    text: Union[str, bytes, FormattedStr],
    names: Iterable[str] = (),
) -> FormattedStr:
    """
    Apply named directives to text, in order.

    Args:
        text: Plain text or an already formatted string
        names: Directive names, e.g. ["bold", "underline2"]

    Returns:
        The formatted string
    """
    formatted = text if isinstance(text, FormattedStr) else FormattedStr(text)
    for name in names:
        formatted = apply_directive(formatted, name)
    return formatted


def format_message(
    first_name: str,
    text: str,
    last_name: Optional[str] = None,
) -> list[Union[FormattedStr, str]]:
    """
    Build the printed layout of a chat message.

    The sender name is printed reversed with one space of padding on each
    side, followed by ": ", the message and a newline.

    Returns:
        Items ready for ThermalPrinter.write
    """
    if last_name:
        name = f" {first_name} {last_name} "
    else:
        name = f" {first_name} "
    return [FormattedStr(name).reverse(), f": {text}\n"]

import re
from typing import Callable, Optional

from klipperconf.errors import InvalidInput

# [name] optionally followed by whitespace and a '#' or ';' comment.
_HEADER_RE = re.compile(r'^\[([^\[\]]+)\]\s*(?:[#;].*)?$')


def validate_section_name(name: str) -> str:
    """
    Validates a section name and returns its trimmed form.

    Args:
        name (str): The name as it appears between the brackets, e.g. "update_manager beacon".

    Returns:
        str: The whitespace-trimmed name.

    Raises:
        InvalidInput: If the name is empty or contains brackets or line breaks.
    """
    if not isinstance(name, str):
        raise InvalidInput(f"Section name must be a string, got {type(name).__name__}")
    trimmed = name.strip()
    if len(trimmed) == 0:
        raise InvalidInput("Section name must not be empty")
    if any(c in trimmed for c in "[]\r\n"):
        raise InvalidInput(f"Section name contains invalid characters: {name!r}")
    return trimmed


def header_name(line: str) -> Optional[str]:
    """
    Returns the trimmed section name if the line is a section header, otherwise None.
    """
    match = _HEADER_RE.match(line.strip())
    if match is None:
        return None
    return match.group(1).strip()


def is_header(line: str, name: Optional[str] = None) -> bool:
    found = header_name(line)
    if found is None:
        return False
    return name is None or found == name


def field_key_matcher(key: str) -> Callable[[str], bool]:
    """
    Creates a predicate that matches `<key><whitespace>:<value>` lines for the given key.
    Indented lines continue a multi-line value and never match.

    Args:
        key (str): The field key, matched literally and case-sensitive.

    Returns:
        Callable[[str], bool]: The predicate, it accepts the raw line.
    """
    pattern = re.compile(r'^' + re.escape(key) + r'\s*:')
    return lambda line: pattern.match(line) is not None

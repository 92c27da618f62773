import logging
import os
import shutil
import stat
import tempfile
from typing import Callable, Iterable, Iterator, Tuple

from klipperconf.errors import IOFailure

_logger = logging.getLogger(__name__)


class ConfigDocument:
    '''
        An ordered, immutable sequence of config file lines.
        Lines are stored without their terminator, the trailing_newline flag
        tells if the file ended with a line break.
    '''

    def __init__(self, lines: Iterable[str] = (), trailing_newline: bool = True) -> None:
        self._lines: Tuple[str, ...] = tuple(lines)
        self._trailing_newline: bool = trailing_newline if len(self._lines) > 0 else False

    @staticmethod
    def from_text(text: str) -> 'ConfigDocument':
        if len(text) == 0:
            return ConfigDocument()
        trailing_newline = text.endswith("\n")
        if trailing_newline:
            text = text[:-1]
        return ConfigDocument(text.split("\n"), trailing_newline)

    @property
    def lines(self) -> Tuple[str, ...]:
        return self._lines

    @property
    def trailing_newline(self) -> bool:
        return self._trailing_newline

    @property
    def text(self) -> str:
        if len(self._lines) == 0:
            return ""
        return "\n".join(self._lines) + ("\n" if self._trailing_newline else "")

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigDocument):
            return NotImplemented
        return self._lines == other._lines and self._trailing_newline == other._trailing_newline

    def __hash__(self) -> int:
        return hash((self._lines, self._trailing_newline))

    def __repr__(self) -> str:
        return f"ConfigDocument(lines={len(self._lines)}, trailing_newline={self._trailing_newline})"


def read_document(path: str, missing_ok: bool = False) -> ConfigDocument:
    """
    Reads a config file into a ConfigDocument.

    Args:
        path (str): The file to read.
        missing_ok (bool, optional): Treat a missing file as an empty document. Defaults to False.

    Returns:
        ConfigDocument: The file content.

    Raises:
        IOFailure: If the file can not be read.
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as file:
            text = file.read()
    except FileNotFoundError as e:
        if missing_ok:
            _logger.debug("Config file %s does not exist, using an empty document", path)
            return ConfigDocument()
        raise IOFailure("Config file not found", path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise IOFailure(f"Failed to read config file: {e}", path) from e
    return ConfigDocument.from_text(text)


def write_document(path: str, document: ConfigDocument) -> None:
    """
    Atomically replaces the file at path with the document's text.
    The content is written to a temp file next to the target and renamed over it,
    so readers never see a half written file. A symlinked path is resolved first,
    the link stays in place and its target gets the new content.

    Raises:
        IOFailure: If writing or renaming fails. The target is left untouched in that case.
    """
    path = os.path.realpath(path)
    directory = os.path.dirname(path)
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as file:
            file.write(document.text)
            file.flush()
            os.fsync(file.fileno())
        if os.path.exists(path):
            shutil.copymode(path, tmp_path)
        else:
            os.chmod(tmp_path, stat.S_IRUSR | stat.S_IWUSR | stat.S_IRGRP | stat.S_IROTH)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise IOFailure(f"Failed to write config file: {e}", path) from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
    _logger.debug("Wrote %i lines to %s", len(document), path)


def apply_to_file(path: str, transform: Callable[[ConfigDocument], Tuple[ConfigDocument, bool]], missing_ok: bool = False) -> bool:
    """
    Reads the file, runs the transform and writes the result back only if it changed.

    Args:
        path (str): The config file.
        transform (Callable): Receives the document, returns (document, changed).
        missing_ok (bool, optional): Start from an empty document if the file is missing. Defaults to False.

    Returns:
        bool: True if the file was rewritten.
    """
    document = read_document(path, missing_ok)
    result, changed = transform(document)
    if changed:
        write_document(path, result)
    return changed

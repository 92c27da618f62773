import logging
from typing import Tuple

from klipperconf.document import ConfigDocument
from klipperconf.errors import InvalidInput
from klipperconf.matching import is_header, validate_section_name

_logger = logging.getLogger(__name__)


def has_section(document: ConfigDocument, name: str) -> bool:
    """
    Checks if a section header with the given name exists in the document.
    Trailing whitespace and same-line comments after the header are tolerated,
    the name itself has to match exactly.

    Args:
        document (ConfigDocument): The document to search.
        name (str): The section name without brackets.

    Returns:
        bool: True if at least one matching header exists.
    """
    name = validate_section_name(name)
    return any(is_header(line, name) for line in document)


def append_section_if_missing(document: ConfigDocument, name: str, block_text: str) -> Tuple[ConfigDocument, bool]:
    """
    Appends a fully formatted section block to the end of the document, unless
    a section with the same name already exists.

    Args:
        document (ConfigDocument): The document to extend.
        name (str): The section name the block declares.
        block_text (str): The block, including its header line. Emitted verbatim.

    Returns:
        Tuple[ConfigDocument, bool]: The resulting document and if it was changed.
    """
    name = validate_section_name(name)
    if not isinstance(block_text, str) or len(block_text.strip()) == 0:
        raise InvalidInput(f"Block text for [{name}] must not be empty")
    if not any(is_header(line, name) for line in block_text.split("\n")):
        raise InvalidInput(f"Block text does not declare [{name}]")

    if has_section(document, name):
        _logger.info("[%s] already present, skipping append", name)
        return document, False

    text = document.text
    # Separate from prior content by exactly one line break.
    if len(text) > 0 and not text.endswith("\n"):
        text += "\n"
    text += block_text
    if not block_text.endswith("\n"):
        text += "\n"

    result = ConfigDocument.from_text(text)
    _logger.info("Appended [%s]", name)
    return result, True

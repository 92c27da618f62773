import logging
import warnings
from enum import Enum
from typing import Callable, List, NamedTuple, Sequence, Set, Tuple, Union

from klipperconf.document import ConfigDocument
from klipperconf.errors import InvalidInput, MalformedSection
from klipperconf.matching import field_key_matcher, is_header, validate_section_name

_logger = logging.getLogger(__name__)


class DesiredField(NamedTuple):
    '''
        A field key and the full line that should represent it inside the target section,
        e.g. DesiredField("homing_retract_dist", "homing_retract_dist: 0").
    '''
    key: str
    line: str


class _State(Enum):
    OUTSIDE = 1
    INSIDE = 2
    # The first occurrence of the target section was processed, everything else is passthrough.
    DONE = 3


def _prepare_fields(desired_fields: Sequence[Union[DesiredField, Tuple[str, str]]]) -> List[Tuple[DesiredField, Callable[[str], bool]]]:
    prepared: List[Tuple[DesiredField, Callable[[str], bool]]] = []
    keys: Set[str] = set()
    for entry in desired_fields:
        try:
            key, line = entry
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Desired field must be a (key, line) pair, got {entry!r}") from e
        if not isinstance(key, str) or len(key.strip()) == 0:
            raise InvalidInput(f"Desired field key must be a non-empty string, got {key!r}")
        if not isinstance(line, str) or "\n" in line or "\r" in line:
            raise InvalidInput(f"Desired line for '{key}' must be a single line string")
        key = key.strip()
        if key in keys:
            raise InvalidInput(f"Duplicate desired field key '{key}'")
        matcher = field_key_matcher(key)
        # Otherwise a second merge would not recognize the line and inject it again.
        if not matcher(line):
            raise InvalidInput(f"Desired line {line!r} does not declare field '{key}'")
        keys.add(key)
        prepared.append((DesiredField(key, line), matcher))

    if len(prepared) == 0:
        raise InvalidInput("At least one desired field is required")
    return prepared


def merge_fields(document: ConfigDocument, section_name: str, desired_fields: Sequence[Union[DesiredField, Tuple[str, str]]]) -> Tuple[ConfigDocument, bool]:
    """
    Normalizes a set of fields inside the first occurrence of a section.

    The first line of every desired key is replaced by its desired line, later
    duplicates of that key are dropped. Keys missing from the section get
    injected at the end of the section, right before the next header or the end
    of the document, in the order they were given. Everything outside the
    section is passed through unchanged.

    If the section does not exist the document is returned unchanged, creating
    it is up to the caller. If it exists more than once only the first
    occurrence is normalized and a MalformedSection warning is emitted.

    Keys only match at column 0. An indented line continues the previous value,
    as in Klipper's own parser, so "  endstop_pin: x" is kept as it is and the
    desired endstop_pin line is injected as well. This is stricter than the
    whitespace tolerant key match of a plain grep.

    Args:
        document (ConfigDocument): The document to normalize.
        section_name (str): The target section, e.g. "stepper_z".
        desired_fields (Sequence): Ordered (key, line) pairs.

    Returns:
        Tuple[ConfigDocument, bool]: The resulting document and if it was changed.
    """
    section_name = validate_section_name(section_name)
    fields = _prepare_fields(desired_fields)

    state = _State.OUTSIDE
    seen: Set[str] = set()
    output: List[str] = []
    repeated = 0

    def flush_missing() -> None:
        for field, _ in fields:
            if field.key not in seen:
                _logger.debug("Injecting '%s' into [%s]", field.key, section_name)
                output.append(field.line)
                seen.add(field.key)

    for line in document:
        if state is _State.INSIDE:
            if is_header(line):
                flush_missing()
                state = _State.DONE
                if is_header(line, section_name):
                    repeated += 1
                output.append(line)
                continue

            field = next((f for f, matches in fields if matches(line)), None)
            if field is None:
                output.append(line)
            elif field.key not in seen:
                output.append(field.line)
                seen.add(field.key)
            else:
                _logger.debug("Dropping duplicate '%s' in [%s]", field.key, section_name)
            continue

        if is_header(line, section_name):
            if state is _State.OUTSIDE:
                state = _State.INSIDE
                seen.clear()
            else:
                repeated += 1
        output.append(line)

    if state is _State.INSIDE:
        flush_missing()

    if state is _State.OUTSIDE:
        _logger.info("[%s] not found, nothing to merge", section_name)
        return document, False

    if repeated > 0:
        warnings.warn(
            f"[{section_name}] occurs {repeated + 1} times, only the first occurrence was updated",
            MalformedSection, stacklevel=2)

    if tuple(output) == document.lines:
        _logger.info("[%s] already up to date", section_name)
        return document, False

    _logger.info("Updated fields %s in [%s]", ", ".join(f.key for f, _ in fields), section_name)
    return ConfigDocument(output, trailing_newline=True), True

"""
Line and field scanning for EPW text.

The scanner turns a text source into logical lines and, on demand, turns a
line into comma-delimited fields. It knows nothing about the EPW schema;
arity and value checks belong to the record parsers.
"""

import csv
import io
import logging
from dataclasses import dataclass
from typing import IO, Any, Iterator, List, Union

from .exceptions import MalformedLineError

logger = logging.getLogger(__name__)

Source = Union[str, bytes, bytearray, IO[str], IO[bytes]]

_BOM = "\ufeff"


@dataclass(frozen=True)
class RawField:
    """A scanned token with its position in the source."""

    text: str
    column: int  # 0-based
    line: int  # 1-based

    def is_empty(self) -> bool:
        return self.text == ""


def split_fields(text: str, line: int) -> List[RawField]:
    """Split one line of text into fields.

    Empty fields are preserved, each field is stripped of leading and
    trailing whitespace only, and commas inside double quotes do not split.
    """
    try:
        row = next(csv.reader([text], delimiter=",", quotechar='"'), [])
    except csv.Error as e:
        raise MalformedLineError(f"Could not tokenize line: {e}", line=line) from e

    return [RawField(value.strip(), column, line) for column, value in enumerate(row)]


@dataclass(frozen=True)
class Line:
    """A non-blank logical line, decoded lazily."""

    number: int
    raw: Union[str, bytes]
    encoding: str = "utf-8"

    @property
    def text(self) -> str:
        if isinstance(self.raw, str):
            return self.raw
        try:
            return self.raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise MalformedLineError(
                f"Line is not valid {self.encoding} text: {e.reason}",
                line=self.number,
            ) from e

    def fields(self) -> List[RawField]:
        """Split this line into fields."""
        return split_fields(self.text, self.number)


class Scanner:
    """Produces the logical lines of an EPW source.

    ``source`` may be a ``str``, ``bytes``, or an open text or binary
    stream. Both LF and CRLF line endings are accepted. Blank lines are
    skipped but still counted, so line numbers always match the source.
    """

    def __init__(self, source: Source, encoding: str = "utf-8"):
        if not isinstance(source, (str, bytes, bytearray)) and not hasattr(
            source, "read"
        ):
            raise TypeError(
                f"EPW source must be str, bytes or a readable stream, not {type(source).__name__}"
            )
        self._source = source
        self.encoding = encoding

    def _raw_lines(self) -> Iterator[Any]:
        if isinstance(self._source, str):
            return iter(io.StringIO(self._source, newline=""))
        if isinstance(self._source, (bytes, bytearray)):
            return iter(io.BytesIO(bytes(self._source)))
        return iter(self._source)  # type: ignore[arg-type]

    def lines(self) -> Iterator[Line]:
        """Lazily yield the non-blank lines of the source."""
        raw_lines = self._raw_lines()
        number = 0
        while True:
            number += 1
            try:
                raw = next(raw_lines)
            except StopIteration:
                break
            except UnicodeDecodeError as e:
                # The stream's position is unknown after a decode failure.
                raise MalformedLineError(
                    f"Line is not valid text: {e.reason}", line=number
                ) from e

            if isinstance(raw, (bytes, bytearray)):
                raw = bytes(raw).rstrip(b"\r\n")
                if number == 1 and raw.startswith(_BOM.encode("utf-8")):
                    raw = raw[3:]
                if not raw.strip():
                    continue
            else:
                raw = raw.rstrip("\r\n")
                if number == 1 and raw.startswith(_BOM):
                    raw = raw[1:]
                if not raw.strip():
                    continue

            yield Line(number, raw, self.encoding)

        logger.debug(f"Scanned {number - 1} lines")

    def __iter__(self) -> Iterator[Line]:
        return self.lines()

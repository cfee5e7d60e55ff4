"""
CardReader
==========

Splits raw FORTRAN source into fixed-column :class:`~fortran_cards.models.Card`
records, one per physical line.

Column layout (same for every card):

  - Columns  1–5  : Label field
  - Column   6    : Continuation marker
  - Columns  7–72 : Body field (always padded / truncated to 66 characters)
  - Columns 73–80 : Identification field (kept for information only)
  - Columns 81+   : Discarded

Three entry points produce the same cards for the same content:

* :meth:`CardReader.read_text` – a ``str``.
* :meth:`CardReader.read_bytes` – a binary stream, decoded incrementally.
* :meth:`CardReader.read_stream` – an already-decoded text stream.

``\\r\\n``, ``\\r`` and ``\\n`` all terminate a line, whatever newline
translation the stream itself applies.  Reading is lazy: a line is only read
when the consumer asks for its card (or peeks at it).
"""
from __future__ import annotations

import codecs
import io
import logging
import re
from typing import IO, Iterable, Iterator, Optional, Union

from ..errors import ReadError
from ..models import (
    BODY_FIELD,
    CARD_WIDTH,
    CONTINUATION_COLUMN,
    LABEL_FIELD,
    TRAILER_FIELD,
    Card,
)
from .peeking import PeekingIterator

logger = logging.getLogger(__name__)

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


class CardReader:
    """
    Reads a source deck into a lookahead sequence of cards.

    Parameters
    ----------
    encoding:
        Default encoding for :meth:`read_bytes`.
    errors:
        Codec error handler for :meth:`read_bytes` (``"strict"`` makes
        undecodable input a :class:`~fortran_cards.errors.ReadError`).
    """

    def __init__(self, encoding: str = "utf-8", errors: str = "strict") -> None:
        codecs.lookup(encoding)
        self.encoding = encoding
        self.errors = errors

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def read(self, source: Union[str, bytes, IO]) -> PeekingIterator[Card]:
        """Dispatch on the kind of *source* to the matching ``read_*`` method."""
        if isinstance(source, str):
            return self.read_text(source)
        if isinstance(source, (bytes, bytearray)):
            return self.read_bytes(io.BytesIO(source))
        if isinstance(source, (io.RawIOBase, io.BufferedIOBase)) or "b" in str(
            getattr(source, "mode", "")
        ):
            return self.read_bytes(source)
        if isinstance(source, (list, tuple)) and source and isinstance(
            source[0], (bytes, bytearray)
        ):
            return self.read_bytes(source)
        return self.read_stream(source)

    def read_text(self, source: str) -> PeekingIterator[Card]:
        """Read cards from source code held in a string."""
        return PeekingIterator(self._cards(_split_lines([source])))

    def read_bytes(
        self,
        stream: IO[bytes],
        encoding: Optional[str] = None,
    ) -> PeekingIterator[Card]:
        """
        Read cards from a binary stream.

        The line number of a :class:`~fortran_cards.errors.ReadError` is
        counted from the terminators decoded so far, so it stays exact when
        the stream hands over several lines (or a ``\\r``-terminated deck)
        in one chunk.

        Parameters
        ----------
        stream:
            Any binary file-like object that can be iterated, or an
            iterable of ``bytes`` chunks.
        encoding:
            Overrides the reader's default encoding for this stream.
        """
        decoder = codecs.getincrementaldecoder(encoding or self.encoding)(self.errors)

        def chunks() -> Iterator[str]:
            lines, tail = 0, ""
            raws = iter(stream)
            while True:
                try:
                    raw = next(raws, None)
                    if raw is None:
                        text = decoder.decode(b"", final=True)
                    else:
                        text = decoder.decode(raw)
                except UnicodeDecodeError as exc:
                    decoded = bytes(exc.object[:exc.start]).decode(exc.encoding, "replace")
                    line_number = lines + _terminators(tail, decoded) + 1
                    raise ReadError(f"cannot read source: {exc}", line_number) from exc
                except (OSError, ValueError) as exc:
                    raise ReadError(f"cannot read source: {exc}", lines + 1) from exc
                lines += _terminators(tail, text)
                tail = (tail + text)[-1:]
                yield text
                if raw is None:
                    return

        return PeekingIterator(self._cards(_split_lines(chunks())))

    def read_stream(self, stream: IO[str]) -> PeekingIterator[Card]:
        """
        Read cards from a decoded text stream (e.g. ``open(path)`` or ``StringIO``).

        A decoding failure inside the stream is reported without a line
        number: a text wrapper decodes blocks of many lines at a time.
        """
        return PeekingIterator(self._cards(_split_lines(stream)))

    @staticmethod
    def card_from_line(line: str, line_number: int) -> Card:
        """Slice one physical *line* (no terminator) into a :class:`Card`."""
        padded = line[:CARD_WIDTH].ljust(CARD_WIDTH)
        return Card(
            line_number=line_number,
            label=padded[LABEL_FIELD].strip(),
            continuation_marker=padded[CONTINUATION_COLUMN],
            body=padded[BODY_FIELD],
            trailer=padded[TRAILER_FIELD].rstrip(),
            raw=line,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _cards(self, lines: Iterable[str]) -> Iterator[Card]:
        line_number = 0
        it = iter(lines)
        while True:
            try:
                line = next(it)
            except StopIteration:
                break
            except UnicodeDecodeError as exc:
                raise ReadError(f"cannot read source: {exc}") from exc
            except (OSError, ValueError) as exc:
                # reading a closed file raises ValueError
                raise ReadError(f"cannot read source: {exc}", line_number + 1) from exc
            line_number += 1
            yield self.card_from_line(line, line_number)
        logger.debug("Read %d cards", line_number)


def _split_lines(chunks: Iterable[str]) -> Iterator[str]:
    """
    Re-split arbitrary text *chunks* into lines without their terminators.

    A ``\\r`` at the very end of a chunk is held back until the next chunk
    shows whether it is half of a ``\\r\\n`` pair.  A final line without a
    terminator is still yielded; a trailing terminator adds no empty line.
    """
    buffer = ""
    for chunk in chunks:
        if not isinstance(chunk, str):
            raise TypeError(
                f"expected text lines, got {type(chunk).__name__}; "
                "use read_bytes() for binary sources"
            )
        buffer += chunk
        start = 0
        for match in _NEWLINE_RE.finditer(buffer):
            if match.group() == "\r" and match.end() == len(buffer):
                break
            yield buffer[start:match.start()]
            start = match.end()
        buffer = buffer[start:]
    if buffer:
        yield buffer[:-1] if buffer.endswith("\r") else buffer


def _terminators(tail: str, text: str) -> int:
    """Count line terminators in *text*, pairing a ``\\r`` left in *tail* with a leading ``\\n``."""
    return len(_NEWLINE_RE.findall(tail + text)) - len(_NEWLINE_RE.findall(tail))

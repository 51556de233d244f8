import logging

from enum import Enum
from typing import Callable, Iterable, Iterator, Optional, Union

from .checksum import finalize_and_compare, parse_hex_digit, update_checksum
from .dispatcher import parse_sentence
from .enums import SentenceKind, Source
from .errors import ChecksumError, FormatError, ParseError
from .filter import SentenceFilter
from .sentences import Outcome

__all__ = ("MAX_SENTENCE_LENGTH", "NMEAParser", "create_nmea_parser")


log = logging.getLogger(__name__)

MAX_SENTENCE_LENGTH = 82
"""Maximum length of an NMEA sentence, from ``$`` to the line terminator."""

_BUFFER_CAPACITY = MAX_SENTENCE_LENGTH - 3

_START = 0x24  # $
_CHECKSUM = 0x2A  # *
_CR = 0x0D
_LF = 0x0A


class NMEAParserState(Enum):
    IDLE = 1
    BUFFERING = 2
    CHECKSUM_HI = 3
    CHECKSUM_LO = 4
    AWAIT_CR = 5
    AWAIT_LF = 6


class _Signal(Enum):
    """Internal results of feeding a byte that do not produce an outcome."""

    INCOMPLETE = "incomplete"
    FILTERED = "filtered"


class NMEAParser:
    """Stateful incremental NMEA 0183 parser.

    Each completed sentence yields exactly one outcome: a ParseResult_ if the
    sentence was decoded, or a ParseError_ instance describing why it was
    rejected. Sentences rejected by the filter of the parser yield nothing.
    The parser never raises on malformed input and does not need to be
    re-created after an error.
    """

    filter: SentenceFilter
    """Filter that decides which sentences are decoded."""

    _buffer: bytearray
    _view: memoryview
    _length: int
    _checksum: int
    _digits: bytearray
    _state: NMEAParserState

    def __init__(self, filter: Optional[SentenceFilter] = None):
        """Constructor.

        Parameters:
            filter: the filter that selects the sentences to decode; `None`
                means that all sentences are decoded
        """
        self.filter = filter if filter is not None else SentenceFilter()

        self._buffer = bytearray(_BUFFER_CAPACITY)
        self._view = memoryview(self._buffer)
        self._digits = bytearray(2)
        self.reset()

    def reset(self) -> None:
        """Discards the sentence being accumulated and waits for the next
        ``$`` delimiter.
        """
        self._length = 0
        self._checksum = 0
        self._state = NMEAParserState.IDLE

    @property
    def state(self) -> NMEAParserState:
        return self._state

    def feed(self, data: bytes) -> list[Outcome]:
        """Feeds some raw bytes into the parser.

        Returns:
            the outcomes of all the sentences completed by the given bytes
        """
        return list(self.parse_from_bytes(data))

    def parse_from_byte(self, byte: int) -> Optional[Outcome]:
        """Feeds a single byte into the parser.

        Returns:
            the outcome of the sentence completed by the byte, or `None` if
            no sentence was completed or the completed sentence was filtered
        """
        result = self._feed_byte(byte)
        return None if isinstance(result, _Signal) else result

    def parse_from_bytes(self, data: Iterable[int]) -> Iterator[Outcome]:
        """Lazily feeds the given bytes into the parser and yields the outcome
        of each sentence completed along the way.

        Sentences may span multiple calls; the state of the parser is kept
        between them.
        """
        for byte in data:
            result = self._feed_byte(byte)
            if not isinstance(result, _Signal):
                yield result

    def _feed_byte(self, byte: int) -> Union[Outcome, _Signal]:
        state = self._state

        if state is NMEAParserState.IDLE:
            if byte == _START:
                self._start_sentence()

        elif state is NMEAParserState.BUFFERING:
            if byte == _CHECKSUM:
                self._state = NMEAParserState.CHECKSUM_HI
            elif byte == _START:
                # Resynchronize on the new sentence
                self._start_sentence()
            elif byte == _CR or byte == _LF:
                return self._recover(byte, "Sentence terminated without checksum")
            elif self._length >= _BUFFER_CAPACITY:
                self.reset()
                return self._report(FormatError("NMEA sentence is too long"))
            else:
                self._buffer[self._length] = byte
                self._length += 1
                self._checksum = update_checksum(self._checksum, byte)

        elif state is NMEAParserState.CHECKSUM_HI:
            if not self._store_digit(0, byte):
                return self._recover(byte, f"Invalid hex character: {byte:#04x}")
            self._state = NMEAParserState.CHECKSUM_LO

        elif state is NMEAParserState.CHECKSUM_LO:
            if not self._store_digit(1, byte):
                return self._recover(byte, f"Invalid hex character: {byte:#04x}")
            self._state = NMEAParserState.AWAIT_CR

        elif state is NMEAParserState.AWAIT_CR:
            if byte != _CR:
                return self._recover(byte, "Expected CR after checksum")
            self._state = NMEAParserState.AWAIT_LF

        elif state is NMEAParserState.AWAIT_LF:
            if byte != _LF:
                return self._recover(byte, "Expected LF after CR")
            result = self._complete_sentence()
            self.reset()
            return result

        return _Signal.INCOMPLETE

    def _start_sentence(self) -> None:
        self._length = 0
        self._checksum = 0
        self._state = NMEAParserState.BUFFERING

    def _store_digit(self, index: int, byte: int) -> bool:
        try:
            parse_hex_digit(byte)
        except FormatError:
            return False
        self._digits[index] = byte
        return True

    def _recover(self, byte: int, message: str) -> FormatError:
        """Drops the current sentence after a structural error. The byte that
        caused the error starts a new sentence if it is a ``$``.
        """
        if byte == _START:
            self._start_sentence()
        else:
            self.reset()
        return self._report(FormatError(message))

    def _complete_sentence(self) -> Union[Outcome, _Signal]:
        if not finalize_and_compare(self._checksum, self._digits):
            expected = int(self._digits.decode("ascii"), 16)
            return self._report(ChecksumError(expected, self._checksum))

        try:
            body = str(self._view[: self._length], "ascii")
        except UnicodeDecodeError:
            return self._report(FormatError("Sentence contains non-ASCII bytes"))

        try:
            result = parse_sentence(body, self.filter)
        except ParseError as ex:
            return self._report(ex)

        if result is None:
            log.debug("Sentence filtered: %s", body[:6])
            return _Signal.FILTERED

        return result

    def _report(self, error: ParseError) -> ParseError:
        log.debug("Dropped NMEA sentence: %s", error)
        return error


def create_nmea_parser(
    sources: Optional[Source] = None, sentences: Optional[SentenceKind] = None
) -> Callable[[bytes], Iterable[Outcome]]:
    """Creates an NMEA-0183 parser function that can be fed with chunks of
    raw bytes, e.g. as they arrive from a serial port.

    Parameters:
        sources: the sources to accept; `None` means all sources
        sentences: the sentence kinds to accept; `None` means all kinds

    Returns:
        the parser function
    """
    return NMEAParser(SentenceFilter(sources=sources, sentences=sentences)).feed

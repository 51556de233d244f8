from typing import Optional, Sequence, TYPE_CHECKING

from .decoders import SENTENCE_DECODERS
from .enums import SentenceKind, Source
from .errors import FormatError, UnsupportedSentenceError
from .sentences import ParseResult

if TYPE_CHECKING:
    from .filter import SentenceFilter

__all__ = ("dispatch", "identify_sentence", "parse_sentence", "split_header")


def split_header(header: str) -> tuple[str, str]:
    """Splits the header of a sentence (its first comma-separated field) into
    the talker prefix and the three-letter sentence identifier.

    Raises:
        FormatError: if the header is not five or six uppercase letters
    """
    if not 5 <= len(header) <= 6 or not header.isalpha() or not header.isupper():
        raise FormatError(f"Malformed sentence header: {header!r}")
    return header[:-3], header[-3:]


def identify_sentence(header: str) -> tuple[Source, SentenceKind]:
    """Determines the source and the kind of a sentence from its header.

    Raises:
        FormatError: if the header is malformed
        UnsupportedSourceError: if the talker prefix is not known
        UnsupportedSentenceError: if the sentence identifier is not supported
    """
    talker, identifier = split_header(header)
    return Source.from_talker(talker), SentenceKind.from_identifier(identifier)


def dispatch(
    source: Source, kind: SentenceKind, fields: Sequence[str]
) -> ParseResult:
    """Decodes the fields of a sentence with the decoder registered for its
    kind and tags the result with the source and the kind.
    """
    decoder = SENTENCE_DECODERS.get(kind)
    if decoder is None:
        raise UnsupportedSentenceError(f"Unsupported sentence type: {kind!r}")
    return ParseResult(kind=kind, source=source, data=decoder(source, fields))


def parse_sentence(
    body: str, filter: Optional["SentenceFilter"] = None
) -> Optional[ParseResult]:
    """Parses the body of a sentence, i.e. the text between ``$`` and ``*``.

    The checksum is not verified here; this is the job of the caller.

    Parameters:
        body: the sentence body
        filter: optional filter to consult before decoding the fields

    Returns:
        the parsed sentence, or `None` if the filter rejected it

    Raises:
        ParseError: if the sentence cannot be parsed
    """
    header, *fields = body.split(",")
    talker, identifier = split_header(header)

    # Excluded sources yield no outcome, even for unsupported sentence types
    source = Source.from_talker(talker)
    if filter is not None and not filter.accepts_source(source):
        return None

    kind = SentenceKind.from_identifier(identifier)
    if filter is not None and not filter.accepts(source, kind):
        return None

    return dispatch(source, kind, fields)

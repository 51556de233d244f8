"""Error classes for the NMEA stream parser.

Parse errors are not raised out of the parser; they are returned to the caller
as ordinary outcomes, one per offending sentence.
"""

__all__ = (
    "Error",
    "ParseError",
    "ChecksumError",
    "FormatError",
    "UnsupportedSentenceError",
    "UnsupportedSourceError",
)


class Error(RuntimeError):
    """Base class for all exceptions that are thrown from this package."""

    pass


class ParseError(Error):
    """Superclass for errors that may be reported for a single sentence."""

    def __eq__(self, other):
        return type(self) is type(other) and self.args == other.args

    def __hash__(self):
        return hash((type(self), self.args))


class ChecksumError(ParseError):
    """Error reported when the checksum transmitted with a sentence does not
    match the checksum calculated from its body.
    """

    def __init__(self, expected: int, actual: int):
        """Constructor.

        Parameters:
            expected: the checksum that was transmitted after the ``*``
            actual: the checksum calculated from the sentence body
        """
        super().__init__(expected, actual)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return (
            f"Checksum mismatch: expected {self.expected:02X}, "
            f"got {self.actual:02X}"
        )


class FormatError(ParseError):
    """Error reported for structural violations: malformed hex digits,
    out-of-range fields, wrong field counts, overlong sentences or broken
    line terminators.
    """

    pass


class UnsupportedSentenceError(ParseError):
    """Error reported when the sentence identifier is not one of the
    sentence kinds that the parser can decode.
    """

    pass


class UnsupportedSourceError(ParseError):
    """Error reported when the talker prefix of a sentence does not belong to
    any known source.
    """

    pass

from __future__ import annotations

from enum import Enum, Flag, IntEnum, auto

from .errors import FormatError, UnsupportedSentenceError, UnsupportedSourceError

__all__ = (
    "GPSQuality",
    "Hemisphere",
    "Mode",
    "SentenceKind",
    "Source",
    "Status",
)


class Source(Flag):
    """Navigation systems that may originate an NMEA sentence.

    Members can be combined with ``|`` to form an inclusion set for
    filtering.
    """

    GPS = auto()
    GLONASS = auto()
    GALILEO = auto()
    BEIDOU = auto()
    QZSS = auto()
    GNSS = auto()
    """Combined solution from multiple satellite systems."""

    @classmethod
    def from_talker(cls, talker: str) -> Source:
        """Returns the source corresponding to the given talker prefix.

        Raises:
            UnsupportedSourceError: if the talker prefix is not known
        """
        try:
            return _talker_to_source[talker]
        except KeyError:
            raise UnsupportedSourceError(
                f"Source is not supported: {talker!r}"
            ) from None

    def describe(self) -> str:
        result = _source_to_string.get(self)
        return result or f"unknown source: {self!r}"

    @property
    def talker(self) -> str:
        """The talker prefix used when sentences are generated for this
        source.
        """
        try:
            return _source_to_talker[self]
        except KeyError:
            raise ValueError(f"No talker prefix for {self!r}") from None


_talker_to_source: dict[str, Source] = {
    "GP": Source.GPS,
    "GL": Source.GLONASS,
    "GA": Source.GALILEO,
    "BD": Source.BEIDOU,
    "GB": Source.BEIDOU,
    "GQ": Source.QZSS,
    "GN": Source.GNSS,
}

_source_to_talker: dict[Source, str] = {
    Source.GPS: "GP",
    Source.GLONASS: "GL",
    Source.GALILEO: "GA",
    Source.BEIDOU: "BD",
    Source.QZSS: "GQ",
    Source.GNSS: "GN",
}

_source_to_string: dict[Source, str] = {
    Source.GPS: "GPS",
    Source.GLONASS: "GLONASS",
    Source.GALILEO: "Galileo",
    Source.BEIDOU: "BeiDou",
    Source.QZSS: "QZSS",
    Source.GNSS: "GNSS",
}


class SentenceKind(Flag):
    """Sentence kinds that the parser knows how to decode.

    Members can be combined with ``|`` to form an inclusion set for
    filtering.
    """

    GGA = auto()
    """Position fix with fix quality and altitude."""

    RMC = auto()
    """Recommended minimum course: position, date, speed and course."""

    VTG = auto()
    """Track made good and speed over ground."""

    GLL = auto()
    """Geographic position with time of fix."""

    @classmethod
    def from_identifier(cls, identifier: str) -> SentenceKind:
        """Returns the sentence kind corresponding to the given three-letter
        sentence identifier.

        Raises:
            UnsupportedSentenceError: if the identifier is not supported
        """
        member = cls.__members__.get(identifier)
        if member is None:
            raise UnsupportedSentenceError(
                f"Unsupported sentence type: {identifier!r}"
            )
        return member


class GPSQuality(IntEnum):
    """Quality of the position solution, as reported in GGA sentences."""

    NO_FIX = 0
    GPS = 1
    DGPS = 2
    PPS = 3
    RTK = 4
    FLOAT_RTK = 5
    ESTIMATED = 6
    MANUAL = 7
    SIMULATED = 8

    @property
    def has_fix(self) -> bool:
        return self is not GPSQuality.NO_FIX


class Hemisphere(Enum):
    """Hemisphere indicator of a latitude or longitude field."""

    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def sign(self) -> int:
        return -1 if self in (Hemisphere.SOUTH, Hemisphere.WEST) else 1


class Status(Enum):
    """Data status field of RMC and GLL sentences."""

    VALID = "A"
    NOT_VALID = "V"

    @property
    def is_valid(self) -> bool:
        return self is Status.VALID


class Mode(Enum):
    """FAA mode indicator, present in NMEA 2.3 and later."""

    AUTONOMOUS = "A"
    DIFFERENTIAL = "D"
    ESTIMATED = "E"
    FLOAT_RTK = "F"
    MANUAL = "M"
    NOT_VALID = "N"
    PRECISE = "P"
    RTK = "R"
    SIMULATOR = "S"

    @classmethod
    def from_status(cls, status: Status) -> Mode:
        """Returns the mode implied by a data status field for sentences
        that were sent without a mode indicator.
        """
        return cls.AUTONOMOUS if status.is_valid else cls.NOT_VALID

    @classmethod
    def from_char(cls, value: str) -> Mode:
        try:
            return cls(value)
        except ValueError:
            raise FormatError(f"Wrong mode character: {value!r}") from None

    @property
    def is_valid(self) -> bool:
        return self in _valid_modes


_valid_modes = frozenset(
    (Mode.AUTONOMOUS, Mode.DIFFERENTIAL, Mode.FLOAT_RTK, Mode.PRECISE, Mode.RTK)
)

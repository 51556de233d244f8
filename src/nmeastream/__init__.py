"""Incremental parser for NMEA 0183 sentences arriving in a raw byte stream."""

from .enums import GPSQuality, Mode, SentenceKind, Source, Status
from .errors import (
    ChecksumError,
    Error,
    FormatError,
    ParseError,
    UnsupportedSentenceError,
    UnsupportedSourceError,
)
from .filter import SentenceFilter
from .parser import NMEAParser, create_nmea_parser
from .sentences import GGA, GLL, RMC, VTG, Outcome, ParseResult, Speed
from .version import __version__, __version_info__

__all__ = (
    "__version__",
    "__version_info__",
    "ChecksumError",
    "create_nmea_parser",
    "Error",
    "FormatError",
    "GGA",
    "GLL",
    "GPSQuality",
    "Mode",
    "NMEAParser",
    "Outcome",
    "ParseError",
    "ParseResult",
    "RMC",
    "SentenceFilter",
    "SentenceKind",
    "Source",
    "Speed",
    "Status",
    "UnsupportedSentenceError",
    "UnsupportedSourceError",
    "VTG",
)

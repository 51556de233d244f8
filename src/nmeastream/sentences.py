"""Decoded NMEA sentence types."""

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional, Union

from .enums import GPSQuality, Mode, SentenceKind, Source
from .errors import ParseError

__all__ = (
    "GGA",
    "GLL",
    "Outcome",
    "ParseResult",
    "RMC",
    "Sentence",
    "Speed",
    "VTG",
)


@dataclass(frozen=True)
class Speed:
    """Speed over ground, stored in knots as transmitted by the receiver."""

    knots: float

    @classmethod
    def from_kph(cls, speed: float):
        return cls(knots=speed / 1.852)

    @classmethod
    def from_mps(cls, speed: float):
        return cls(knots=speed * 3.6 / 1.852)

    @classmethod
    def from_mph(cls, speed: float):
        return cls(knots=speed * 1.609344 / 1.852)

    @property
    def kph(self) -> float:
        """Speed in kilometers per hour."""
        return self.knots * 1.852

    @property
    def mph(self) -> float:
        """Speed in miles per hour."""
        return self.knots * 1.852 / 1.609344

    @property
    def mps(self) -> float:
        """Speed in meters per second."""
        return self.knots * 1.852 / 3.6


@dataclass(frozen=True)
class GGA:
    """Position fix with fix quality, satellite count and altitude."""

    source: Source

    #: Time of fix, in UTC
    time: time

    #: Latitude in decimal degrees, positive to the North
    latitude: float

    #: Longitude in decimal degrees, positive to the East
    longitude: float

    gps_quality: GPSQuality

    #: Number of satellites used in the solution
    satellites_in_use: int

    #: Horizontal dilution of precision
    hdop: float

    #: Altitude above mean sea level, in meters
    altitude: float

    #: Height of the geoid above the WGS84 ellipsoid, in meters
    geoidal_separation: Optional[float] = None

    #: Age of differential corrections, in seconds; `None` if DGPS is not used
    dgps_age: Optional[float] = None

    #: ID of the DGPS reference station; `None` if DGPS is not used
    dgps_station_id: Optional[int] = None


@dataclass(frozen=True)
class RMC:
    """Recommended minimum navigation information."""

    source: Source

    #: Date and time of fix, in UTC
    timestamp: datetime

    latitude: float
    longitude: float
    speed: Speed

    #: Course over ground relative to true North, in degrees
    course: Optional[float]

    #: Course over ground relative to magnetic North, in degrees
    magnetic_course: Optional[float]

    mode: Mode


@dataclass(frozen=True)
class VTG:
    """Course and speed relative to the ground."""

    source: Source

    #: Course over ground relative to true North; some receivers omit it
    #: when not moving
    course: Optional[float]

    #: Course over ground relative to magnetic North
    magnetic_course: Optional[float]

    speed: Speed
    mode: Mode


@dataclass(frozen=True)
class GLL:
    """Geographic position with time of fix."""

    source: Source
    time: time
    latitude: float
    longitude: float
    mode: Mode


Sentence = Union[GGA, RMC, VTG, GLL]


@dataclass(frozen=True)
class ParseResult:
    """A sentence that passed checksum verification, tagged with its kind and
    source.

    `data` is `None` when the sentence was valid but the receiver had no
    usable solution to report.
    """

    kind: SentenceKind
    source: Source
    data: Optional[Sentence] = None

    @property
    def is_empty(self) -> bool:
        return self.data is None


Outcome = Union[ParseResult, ParseError]
"""Type of the values produced by the parser for each completed sentence."""

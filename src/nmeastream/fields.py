"""Decoders for the individual comma-separated fields of NMEA sentences.

Every decoder accepts the raw text of a field. An empty field is not an error;
it means that the receiver had no data for the field, and the decoders return
``None`` for it. Malformed fields raise a FormatError_.
"""

import re

from datetime import date, time
from typing import Optional

from .enums import GPSQuality, Hemisphere, Mode, Status
from .errors import FormatError

__all__ = (
    "parse_date",
    "parse_float",
    "parse_gps_quality",
    "parse_hemisphere",
    "parse_int",
    "parse_latitude",
    "parse_longitude",
    "parse_magnetic_course",
    "parse_mode",
    "parse_status",
    "parse_time",
)


_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_INT_RE = re.compile(r"\d+")
_LATITUDE_RE = re.compile(r"(\d{2})(\d{2}(?:\.\d*)?)")
_LONGITUDE_RE = re.compile(r"(\d{3})(\d{2}(?:\.\d*)?)")
_TIME_RE = re.compile(r"(\d{2})(\d{2})(\d{2})(?:\.(\d+))?")
_DATE_RE = re.compile(r"(\d{2})(\d{2})(\d{2})")

_LATITUDE_HEMISPHERES = (Hemisphere.NORTH, Hemisphere.SOUTH)
_LONGITUDE_HEMISPHERES = (Hemisphere.EAST, Hemisphere.WEST)


def parse_float(value: str) -> Optional[float]:
    """Parses a fixed-point decimal field such as speed, course, altitude or
    HDOP.

    Only an optional sign, decimal digits and an optional fractional part are
    accepted; exponents, whitespace, ``inf`` and ``nan`` are rejected.
    """
    if not value:
        return None
    if not _FLOAT_RE.fullmatch(value):
        raise FormatError(f"Wrong float field format: {value!r}")
    return float(value)


def parse_int(value: str) -> Optional[int]:
    """Parses an unsigned integer field such as a satellite count."""
    if not value:
        return None
    if not _INT_RE.fullmatch(value):
        raise FormatError(f"Wrong unsigned int field format: {value!r}")
    return int(value)


def parse_hemisphere(value: str, allowed=None) -> Optional[Hemisphere]:
    """Parses a hemisphere indicator.

    Parameters:
        value: the raw field
        allowed: the hemispheres that are valid in the context of the field;
            ``None`` means all four
    """
    if not value:
        return None

    try:
        result = Hemisphere(value)
    except ValueError:
        raise FormatError(f"Wrong hemisphere field format: {value!r}") from None

    if allowed is not None and result not in allowed:
        raise FormatError(f"Hemisphere {value!r} is not valid here")

    return result


def _parse_coordinate(
    value: str, hemisphere: str, *, pattern, allowed, limit: float, name: str
) -> Optional[float]:
    if not value and not hemisphere:
        return None
    if not value:
        raise FormatError(f"Could not parse {name} from hemisphere only")
    if not hemisphere:
        raise FormatError(f"Could not parse {name} from coordinate only")

    match = pattern.fullmatch(value)
    if not match:
        raise FormatError(f"Wrong {name} field format: {value!r}")

    sign = parse_hemisphere(hemisphere, allowed).sign  # type: ignore
    degrees = int(match.group(1))
    minutes = float(match.group(2))
    if minutes >= 60:
        raise FormatError(f"Minutes of {name} not in range 0-60: {value!r}")

    result = degrees + minutes / 60
    if result > limit:
        raise FormatError(f"{name.capitalize()} out of range: {value!r}")

    return sign * result


def parse_latitude(value: str, hemisphere: str) -> Optional[float]:
    """Parses a latitude given in ``DDMM.MMMM`` format and its hemisphere
    indicator into signed decimal degrees, positive to the North.

    Returns ``None`` if both fields are empty.
    """
    return _parse_coordinate(
        value,
        hemisphere,
        pattern=_LATITUDE_RE,
        allowed=_LATITUDE_HEMISPHERES,
        limit=90,
        name="latitude",
    )


def parse_longitude(value: str, hemisphere: str) -> Optional[float]:
    """Parses a longitude given in ``DDDMM.MMMM`` format and its hemisphere
    indicator into signed decimal degrees, positive to the East.

    Returns ``None`` if both fields are empty.
    """
    return _parse_coordinate(
        value,
        hemisphere,
        pattern=_LONGITUDE_RE,
        allowed=_LONGITUDE_HEMISPHERES,
        limit=180,
        name="longitude",
    )


def parse_time(value: str) -> Optional[time]:
    """Parses a UTC time of day in ``HHMMSS[.sss]`` format.

    The fractional part is kept with microsecond resolution; extra digits are
    truncated.
    """
    if not value:
        return None

    match = _TIME_RE.fullmatch(value)
    if not match:
        raise FormatError(f"Wrong time field format: {value!r}")

    hours, minutes, seconds = (int(match.group(i)) for i in (1, 2, 3))
    if hours > 23:
        raise FormatError(f"Hours not in range 0-23: {value!r}")
    if minutes > 59:
        raise FormatError(f"Minutes not in range 0-59: {value!r}")
    if seconds > 59:
        raise FormatError(f"Seconds not in range 0-59: {value!r}")

    fraction = match.group(4) or ""
    microseconds = int(fraction[:6].ljust(6, "0"))

    return time(hours, minutes, seconds, microseconds)


def parse_date(value: str) -> Optional[date]:
    """Parses a date in ``DDMMYY`` format.

    Two-digit years above 69 are mapped to 19xx, the rest to 20xx.
    """
    if not value:
        return None

    match = _DATE_RE.fullmatch(value)
    if not match:
        raise FormatError(f"Wrong date field format: {value!r}")

    day, month, year = (int(match.group(i)) for i in (1, 2, 3))
    year += 1900 if year > 69 else 2000

    try:
        return date(year, month, day)
    except ValueError:
        raise FormatError(f"Date out of range: {value!r}") from None


def parse_gps_quality(value: str) -> Optional[GPSQuality]:
    """Parses the fix quality indicator of a GGA sentence."""
    if not value:
        return None
    if len(value) != 1 or not value.isdigit():
        raise FormatError(f"Wrong GPS quality indicator: {value!r}")
    try:
        return GPSQuality(int(value))
    except ValueError:
        raise FormatError(f"Wrong GPS quality indicator: {value!r}") from None


def parse_status(value: str) -> Optional[Status]:
    """Parses the data status field of RMC and GLL sentences."""
    if not value:
        return None
    try:
        return Status(value)
    except ValueError:
        raise FormatError(f"Invalid status field: {value!r}") from None


def parse_mode(value: str) -> Optional[Mode]:
    """Parses an FAA mode indicator."""
    if not value:
        return None
    return Mode.from_char(value)


def parse_magnetic_course(
    course: Optional[float], variation: str, direction: str
) -> Optional[float]:
    """Calculates the magnetic course from the true course and the magnetic
    variation fields of an RMC sentence.

    Easterly variation is subtracted from the true course, westerly variation
    is added to it.
    """
    if not variation and not direction:
        return None
    if not variation or not direction:
        raise FormatError("Magnetic variation needs both a value and a direction")

    magnitude = parse_float(variation)
    sign = parse_hemisphere(direction, _LONGITUDE_HEMISPHERES).sign  # type: ignore
    if course is None:
        return None

    return (course - sign * magnitude) % 360  # type: ignore

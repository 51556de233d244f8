"""Decoders that turn the field lists of checksum-verified sentences into
typed records.

Each decoder receives the fields following the header and returns either a
record or `None` when the sentence is valid but reports no usable solution.
"""

from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from .enums import Mode, SentenceKind, Source, Status
from .errors import FormatError
from .fields import (
    parse_date,
    parse_float,
    parse_gps_quality,
    parse_int,
    parse_latitude,
    parse_longitude,
    parse_magnetic_course,
    parse_mode,
    parse_status,
    parse_time,
)
from .sentences import GGA, GLL, RMC, VTG, Sentence, Speed

__all__ = (
    "SENTENCE_DECODERS",
    "decode_gga",
    "decode_gll",
    "decode_rmc",
    "decode_vtg",
)


Fields = Sequence[str]
Decoder = Callable[[Source, Fields], Optional[Sentence]]


def _check_arity(kind: str, fields: Fields, allowed: tuple[int, ...]) -> None:
    if len(fields) not in allowed:
        expected = " or ".join(str(count) for count in allowed)
        raise FormatError(
            f"{kind} sentence must have {expected} fields, got {len(fields)}"
        )


def _require_status(kind: str, value: str) -> Status:
    status = parse_status(value)
    if status is None:
        raise FormatError(f"Status field is mandatory for {kind} sentence")
    return status


def decode_gga(source: Source, fields: Fields) -> Optional[GGA]:
    """Decodes a GGA (position fix data) sentence.

    Fields: time, latitude, N/S, longitude, E/W, fix quality, satellites in
    use, HDOP, altitude, altitude unit, geoidal separation, separation unit,
    DGPS age, DGPS station ID.
    """
    _check_arity("GGA", fields, (14,))

    gps_quality = parse_gps_quality(fields[5])
    if gps_quality is None or not gps_quality.has_fix:
        return None

    fix_time = parse_time(fields[0])
    latitude = parse_latitude(fields[1], fields[2])
    longitude = parse_longitude(fields[3], fields[4])
    satellites_in_use = parse_int(fields[6])
    hdop = parse_float(fields[7])
    altitude = parse_float(fields[8])
    # fields[9] and fields[11] are units, always meters
    geoidal_separation = parse_float(fields[10])
    dgps_age = parse_float(fields[12])
    dgps_station_id = parse_int(fields[13])

    if (
        fix_time is None
        or latitude is None
        or longitude is None
        or satellites_in_use is None
        or hdop is None
        or altitude is None
    ):
        return None

    return GGA(
        source=source,
        time=fix_time,
        latitude=latitude,
        longitude=longitude,
        gps_quality=gps_quality,
        satellites_in_use=satellites_in_use,
        hdop=hdop,
        altitude=altitude,
        geoidal_separation=geoidal_separation,
        dgps_age=dgps_age,
        dgps_station_id=dgps_station_id,
    )


def decode_rmc(source: Source, fields: Fields) -> Optional[RMC]:
    """Decodes an RMC (recommended minimum navigation information) sentence.

    Fields: time, status, latitude, N/S, longitude, E/W, speed in knots,
    course, date, magnetic variation, E/W, then the mode indicator (NMEA 2.3)
    and the navigational status (NMEA 4.1) when present.
    """
    _check_arity("RMC", fields, (11, 12, 13))

    status = _require_status("RMC", fields[1])
    mode = parse_mode(fields[11]) if len(fields) > 11 else None
    if mode is None:
        mode = Mode.from_status(status)

    if not status.is_valid or mode is Mode.NOT_VALID:
        return None

    fix_time = parse_time(fields[0])
    latitude = parse_latitude(fields[2], fields[3])
    longitude = parse_longitude(fields[4], fields[5])
    speed = parse_float(fields[6])
    course = parse_float(fields[7])
    fix_date = parse_date(fields[8])
    magnetic_course = parse_magnetic_course(course, fields[9], fields[10])

    if (
        fix_time is None
        or fix_date is None
        or latitude is None
        or longitude is None
        or speed is None
    ):
        return None

    return RMC(
        source=source,
        timestamp=datetime.combine(fix_date, fix_time, tzinfo=timezone.utc),
        latitude=latitude,
        longitude=longitude,
        speed=Speed(knots=speed),
        course=course,
        magnetic_course=magnetic_course,
        mode=mode,
    )


def decode_vtg(source: Source, fields: Fields) -> Optional[VTG]:
    """Decodes a VTG (track made good and ground speed) sentence.

    Fields: true course, ``T``, magnetic course, ``M``, speed in knots, ``N``,
    speed in km/h, ``K``, and the mode indicator (NMEA 2.3) when present.
    """
    _check_arity("VTG", fields, (8, 9))

    mode = parse_mode(fields[8]) if len(fields) > 8 else None
    if mode is Mode.NOT_VALID:
        return None

    course = parse_float(fields[0])
    magnetic_course = parse_float(fields[2])
    speed_knots = parse_float(fields[4])
    speed_kph = parse_float(fields[6])

    if speed_knots is not None:
        speed = Speed(knots=speed_knots)
    elif speed_kph is not None:
        speed = Speed.from_kph(speed_kph)
    else:
        return None

    return VTG(
        source=source,
        course=course,
        magnetic_course=magnetic_course,
        speed=speed,
        mode=mode or Mode.AUTONOMOUS,
    )


def decode_gll(source: Source, fields: Fields) -> Optional[GLL]:
    """Decodes a GLL (geographic position) sentence.

    Fields: latitude, N/S, longitude, E/W, time, status, and the mode
    indicator (NMEA 2.3) when present.
    """
    _check_arity("GLL", fields, (6, 7))

    status = _require_status("GLL", fields[5])
    mode = parse_mode(fields[6]) if len(fields) > 6 else None
    if mode is None:
        mode = Mode.from_status(status)

    if not status.is_valid or mode is Mode.NOT_VALID:
        return None

    latitude = parse_latitude(fields[0], fields[1])
    longitude = parse_longitude(fields[2], fields[3])
    fix_time = parse_time(fields[4])

    if latitude is None or longitude is None or fix_time is None:
        return None

    return GLL(
        source=source,
        time=fix_time,
        latitude=latitude,
        longitude=longitude,
        mode=mode,
    )


SENTENCE_DECODERS: dict[SentenceKind, Decoder] = {
    SentenceKind.GGA: decode_gga,
    SentenceKind.RMC: decode_rmc,
    SentenceKind.VTG: decode_vtg,
    SentenceKind.GLL: decode_gll,
}
"""Mapping from sentence kinds to the functions that decode them."""

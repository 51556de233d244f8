import pynmea2

from datetime import date, time
from typing import Callable, Optional

from .enums import SentenceKind
from .sentences import GGA, GLL, RMC, VTG, Sentence

__all__ = ("create_nmea_sentence", "encode_sentence")


def _number(value: Optional[float]) -> str:
    if value is None:
        return ""
    text = f"{value:.6f}".rstrip("0")
    return text + "0" if text.endswith(".") else text


def _coordinate(value: float, width: int, hemispheres: str) -> tuple[str, str]:
    hemisphere = hemispheres[1] if value < 0 else hemispheres[0]
    degrees, minutes = divmod(round(abs(value) * 60, 4), 60)
    return f"{int(degrees):0{width}d}{minutes:07.4f}", hemisphere


def _time(value: time) -> str:
    return f"{value:%H%M%S}.{value.microsecond // 1000:03d}"


def _date(value: date) -> str:
    return f"{value:%d%m%y}"


def _gga_fields(record: GGA) -> list[str]:
    separation = _number(record.geoidal_separation)
    station_id = record.dgps_station_id
    return [
        _time(record.time),
        *_coordinate(record.latitude, 2, "NS"),
        *_coordinate(record.longitude, 3, "EW"),
        str(int(record.gps_quality)),
        f"{record.satellites_in_use:02d}",
        _number(record.hdop),
        _number(record.altitude),
        "M",
        separation,
        "M" if separation else "",
        _number(record.dgps_age),
        f"{station_id:04d}" if station_id is not None else "",
    ]


def _rmc_fields(record: RMC) -> list[str]:
    variation, direction = "", ""
    if record.course is not None and record.magnetic_course is not None:
        # Easterly variation makes the magnetic course smaller
        delta = (record.course - record.magnetic_course) % 360
        if delta > 180:
            delta -= 360
        variation = _number(abs(delta))
        direction = "E" if delta >= 0 else "W"

    return [
        _time(record.timestamp.time()),
        "A",
        *_coordinate(record.latitude, 2, "NS"),
        *_coordinate(record.longitude, 3, "EW"),
        _number(record.speed.knots),
        _number(record.course),
        _date(record.timestamp.date()),
        variation,
        direction,
        record.mode.value,
    ]


def _vtg_fields(record: VTG) -> list[str]:
    return [
        _number(record.course),
        "T",
        _number(record.magnetic_course),
        "M",
        _number(record.speed.knots),
        "N",
        _number(record.speed.kph),
        "K",
        record.mode.value,
    ]


def _gll_fields(record: GLL) -> list[str]:
    return [
        *_coordinate(record.latitude, 2, "NS"),
        *_coordinate(record.longitude, 3, "EW"),
        _time(record.time),
        "A",
        record.mode.value,
    ]


_renderers: dict[type, tuple[SentenceKind, Callable[..., list[str]]]] = {
    GGA: (SentenceKind.GGA, _gga_fields),
    RMC: (SentenceKind.RMC, _rmc_fields),
    VTG: (SentenceKind.VTG, _vtg_fields),
    GLL: (SentenceKind.GLL, _gll_fields),
}


def create_nmea_sentence(record: Sentence) -> pynmea2.TalkerSentence:
    """Creates a pynmea2 talker sentence from a decoded record.

    The talker prefix is derived from the source of the record. Records are
    always rendered with a valid status and with the mode indicator of NMEA
    2.3 and later.

    Raises:
        TypeError: if the record is not one of the known record types
        ValueError: if the source of the record has no talker prefix
    """
    try:
        kind, render_fields = _renderers[type(record)]
    except KeyError:
        raise TypeError(f"Cannot encode {type(record).__name__} records") from None

    return pynmea2.TalkerSentence(
        record.source.talker, kind.name, render_fields(record)
    )


def encode_sentence(record: Sentence) -> bytes:
    """Renders a decoded record as a complete sentence with its checksum and
    line terminator.
    """
    return create_nmea_sentence(record).render(newline=True).encode("ascii")

from typing import Sequence, Union

from .errors import FormatError

__all__ = (
    "calculate_checksum",
    "finalize_and_compare",
    "format_checksum",
    "parse_hex_digit",
    "update_checksum",
)


def update_checksum(running: int, byte: int) -> int:
    """Folds a single byte into a running checksum."""
    return running ^ byte


def calculate_checksum(data: Union[bytes, str, Sequence[int]]) -> int:
    """Calculates the checksum of a sentence body."""
    if isinstance(data, str):
        data = data.encode("ascii")

    result = 0
    for byte in data:
        result ^= byte
    return result


def parse_hex_digit(byte: int) -> int:
    """Returns the value of a single uppercase ASCII hexadecimal digit.

    Raises:
        FormatError: if the byte is not one of ``0-9`` or ``A-F``
    """
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    elif 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    else:
        raise FormatError(f"Invalid hex character: {chr(byte)!r}")


def finalize_and_compare(running: int, digits: Union[bytes, str]) -> bool:
    """Compares a running checksum with its transmitted hexadecimal form.

    Parameters:
        running: the checksum calculated from the sentence body
        digits: the two hexadecimal digits that followed the ``*``

    Returns:
        whether the two checksums match

    Raises:
        FormatError: if the digits are not two valid hexadecimal characters
    """
    if isinstance(digits, str):
        digits = digits.encode("ascii", "replace")

    if len(digits) != 2:
        raise FormatError(f"Checksum must be two hex digits, got {digits!r}")

    expected = (parse_hex_digit(digits[0]) << 4) | parse_hex_digit(digits[1])
    return expected == running


def format_checksum(value: int) -> str:
    """Formats a checksum as it appears in a sentence after the ``*``."""
    return f"{value & 0xFF:02X}"

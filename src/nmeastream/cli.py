"""Command line tool that decodes NMEA sentences from a capture file or from
the standard input.
"""

from __future__ import annotations

import click
import json
import logging

from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, BinaryIO, Iterator, Optional

from .encoder import create_nmea_sentence
from .enums import SentenceKind, Source
from .errors import ParseError
from .filter import SentenceFilter
from .parser import NMEAParser
from .sentences import Outcome

__all__ = ("nmea_decoder",)


def _to_json(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {key: _to_json(item) for key, item in asdict(value).items()}
    elif isinstance(value, Enum):
        return value.name.lower()
    elif isinstance(value, (date, datetime, time)):
        return value.isoformat()
    elif isinstance(value, dict):
        return {key: _to_json(item) for key, item in value.items()}
    else:
        return value


def format_outcome(outcome: Outcome, format: str = "text") -> Optional[str]:
    """Formats a single parser outcome for printing.

    Returns `None` if the outcome has no representation in the given format;
    the `nmea` format only re-renders sentences with usable data.
    """
    if format == "nmea":
        if isinstance(outcome, ParseError) or outcome.data is None:
            return None
        return create_nmea_sentence(outcome.data).render()

    if isinstance(outcome, ParseError):
        if format == "json":
            return json.dumps({"error": type(outcome).__name__, "message": str(outcome)})
        return f"{type(outcome).__name__}: {outcome}"

    if format == "json":
        return json.dumps(
            {
                "kind": outcome.kind.name,
                "source": outcome.source.name.lower(),
                "data": _to_json(outcome.data),
            }
        )

    if outcome.data is None:
        return f"{outcome.kind.name} from {outcome.source.describe()}: no fix"
    else:
        return f"{outcome.kind.name} from {outcome.source.describe()}: {outcome.data}"


def _read_chunks(fp: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = fp.read(chunk_size)
        if not chunk:
            break
        yield chunk


@click.command()
@click.argument("file", type=click.File("rb"), default="-")
@click.option(
    "-s",
    "--source",
    "sources",
    multiple=True,
    type=click.Choice([member.name.lower() for member in Source]),
    help="decode sentences only from the given source; may be repeated",
)
@click.option(
    "-t",
    "--sentence",
    "sentences",
    multiple=True,
    type=click.Choice([member.name.lower() for member in SentenceKind]),
    help="decode only the given sentence type; may be repeated",
)
@click.option(
    "--format",
    default="text",
    type=click.Choice(["text", "json", "nmea"]),
    help=(
        "the output format; 'json' prints one JSON object per line, "
        "'nmea' re-renders the decoded sentences"
    ),
)
@click.option(
    "--errors/--no-errors",
    default=True,
    help="whether to print the sentences that could not be decoded",
)
@click.option(
    "--chunk-size",
    metavar="BYTES",
    default=4096,
    type=click.IntRange(min=1),
    help="number of bytes to read from the input at once",
)
@click.option("-v", "--verbose", is_flag=True, help="log dropped sentences")
def nmea_decoder(
    file: BinaryIO,
    sources: tuple[str, ...] = (),
    sentences: tuple[str, ...] = (),
    format: str = "text",
    errors: bool = True,
    chunk_size: int = 4096,
    verbose: bool = False,
):
    """Decodes NMEA 0183 sentences from FILE (or the standard input) and
    prints one line for each decoded sentence.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    filter = SentenceFilter()
    filter.set_sources(sources or None)
    filter.set_sentences(sentences or None)

    parser = NMEAParser(filter)
    for chunk in _read_chunks(file, chunk_size):
        for outcome in parser.parse_from_bytes(chunk):
            if isinstance(outcome, ParseError) and not errors:
                continue
            line = format_outcome(outcome, format)
            if line is not None:
                click.echo(line)


if __name__ == "__main__":
    nmea_decoder()  # type: ignore

from datetime import date, time
from pytest import approx, mark

from nmeastream import (
    ChecksumError,
    FormatError,
    GGA,
    GPSQuality,
    NMEAParser,
    ParseResult,
    RMC,
    SentenceFilter,
    SentenceKind,
    Source,
    UnsupportedSentenceError,
    UnsupportedSourceError,
    create_nmea_parser,
)
from nmeastream.encoder import encode_sentence
from nmeastream.parser import MAX_SENTENCE_LENGTH, NMEAParserState


GGA_SENTENCE = (
    b"$GPGGA,145659.00,5956.695396,N,03022.454999,E,2,07,0.6,9.0,M,18.0,M,,*62\r\n"
)
GGA_NEXT_SENTENCE = (
    b"$GPGGA,145700.00,5956.695396,N,03022.454999,E,2,07,0.6,9.0,M,18.0,M,,*6F\r\n"
)
GLONASS_GGA_SENTENCE = (
    b"$GLGGA,145659.00,5956.695396,N,03022.454999,E,2,07,0.6,9.0,M,18.0,M,,*7E\r\n"
)
EMPTY_GGA_SENTENCE = b"$GPGGA,,,,,,,,,,,,,,*56\r\n"
RMC_SENTENCE = (
    b"$GPRMC,125504.049,A,5542.2389,N,03741.6063,E,0.06,25.82,200906,,,A*56\r\n"
)
GNSS_RMC_SENTENCE = (
    b"$GNRMC,125504.049,A,5542.2389,N,03741.6063,E,0.06,25.82,200906,,,A*48\r\n"
)
VTG_SENTENCE = b"$GPVTG,089.0,T,,,15.2,N,,,A*12\r\n"
GLL_SENTENCE = b"$GPGLL,4916.45,N,12311.12,W,225444,A*31\r\n"


def parse_bytewise(parser: NMEAParser, data: bytes) -> list:
    result = []
    for byte in data:
        outcome = parser.parse_from_byte(byte)
        if outcome is not None:
            result.append(outcome)
    return result


def test_gga():
    outcomes = parse_bytewise(NMEAParser(), GGA_SENTENCE)

    assert len(outcomes) == 1
    result = outcomes[0]
    assert isinstance(result, ParseResult)
    assert result.kind is SentenceKind.GGA
    assert result.source is Source.GPS

    gga = result.data
    assert isinstance(gga, GGA)
    assert gga.time == time(14, 56, 59)
    assert gga.gps_quality is GPSQuality.DGPS
    assert gga.satellites_in_use == 7
    assert gga.latitude == approx(59.94492, abs=1e-5)
    assert gga.longitude == approx(30.37425, abs=1e-5)
    assert gga.hdop == approx(0.6)
    assert gga.altitude == approx(9.0)
    assert gga.geoidal_separation == approx(18.0)


def test_gga_without_fix():
    outcomes = NMEAParser().feed(EMPTY_GGA_SENTENCE)
    assert outcomes == [ParseResult(kind=SentenceKind.GGA, source=Source.GPS)]
    assert outcomes[0].is_empty


def test_gga_without_fix_and_wrong_checksum():
    # The XOR of this body is 0x56, so a transmitted 00 is a mismatch
    outcomes = NMEAParser().feed(b"$GPGGA,,,,,,,,,,,,,,*00\r\n")
    assert outcomes == [ChecksumError(0x00, 0x56)]


def test_checksum_error_and_recovery():
    parser = NMEAParser()
    corrupted = GGA_SENTENCE.replace(b"*62", b"*63")

    outcomes = parser.feed(corrupted)
    assert len(outcomes) == 1
    assert isinstance(outcomes[0], ChecksumError)
    assert outcomes[0].expected == 0x63
    assert outcomes[0].actual == 0x62
    assert parser.state is NMEAParserState.IDLE

    outcomes = parser.feed(GGA_SENTENCE)
    assert outcomes == NMEAParser().feed(GGA_SENTENCE)
    assert isinstance(outcomes[0].data, GGA)


def test_rmc():
    outcomes = NMEAParser().feed(RMC_SENTENCE)

    assert len(outcomes) == 1
    assert outcomes[0].kind is SentenceKind.RMC

    rmc = outcomes[0].data
    assert isinstance(rmc, RMC)
    assert rmc.timestamp.date() == date(2006, 9, 20)
    assert rmc.timestamp.time() == time(12, 55, 4, 49000)
    assert rmc.speed.knots == approx(0.06)
    assert rmc.course == approx(25.82)


def test_vtg_and_gll():
    outcomes = NMEAParser().feed(VTG_SENTENCE + GLL_SENTENCE)
    assert [outcome.kind for outcome in outcomes] == [
        SentenceKind.VTG,
        SentenceKind.GLL,
    ]
    assert outcomes[0].data.speed.knots == approx(15.2)
    assert outcomes[1].data.longitude == approx(-123.185333, abs=1e-6)


def test_filter_by_source_and_sentence():
    parser = NMEAParser(
        SentenceFilter(sources=Source.GPS, sentences=SentenceKind.GGA)
    )
    stream = (
        GGA_SENTENCE
        + GLONASS_GGA_SENTENCE
        + RMC_SENTENCE
        + GNSS_RMC_SENTENCE
        + GGA_NEXT_SENTENCE
    )

    outcomes = parser.feed(stream)

    assert len(outcomes) == 2
    assert all(outcome.source is Source.GPS for outcome in outcomes)
    assert all(outcome.kind is SentenceKind.GGA for outcome in outcomes)
    assert outcomes[1].data.time == time(14, 57)

    # Filtered sentences produce nothing in byte-by-byte mode either
    parser.reset()
    assert parse_bytewise(parser, GLONASS_GGA_SENTENCE + RMC_SENTENCE) == []


def test_filter_drops_unsupported_sentences_of_excluded_sources():
    parser = NMEAParser(
        SentenceFilter(sources=Source.GPS, sentences=SentenceKind.GGA)
    )
    stream = (
        b"$GLGSV,3,1,11,10,63,137,17,07,61,098,15,05,59,290,20,08,54,157,30*6C\r\n"
        b"$GAGSA,A,3,10,07,05,02,29,04,08,13,,,,,1.72,1.03,1.38*1B\r\n"
        + GGA_SENTENCE
        + b"$GPGSV,3,1,11,10,63,137,17,07,61,098,15,05,59,290,20,08,54,157,30*70\r\n"
    )

    outcomes = parser.feed(stream)

    assert len(outcomes) == 2
    assert isinstance(outcomes[0].data, GGA)
    assert isinstance(outcomes[1], UnsupportedSentenceError)
    assert parse_bytewise(parser, stream[: stream.index(b"$GPGGA")]) == []


def test_filter_can_be_changed_at_runtime():
    parser = NMEAParser()
    parser.filter.set_sources(["glonass"])
    assert parser.feed(GGA_SENTENCE) == []
    assert len(parser.feed(GLONASS_GGA_SENTENCE)) == 1


def test_create_nmea_parser():
    parser = create_nmea_parser(sentences=SentenceKind.RMC)
    outcomes = parser(GGA_SENTENCE + RMC_SENTENCE)
    assert [outcome.kind for outcome in outcomes] == [SentenceKind.RMC]


def test_unsupported_source():
    parser = NMEAParser()
    stream = (
        b"$XYZGGA,145659.00,5956.695396,N,03022.454999,E,2,07,0.6,9.0,M,18.0,M,,*2E\r\n"
        + b"$LCVTG,089.0,T,,,15.2,N,,*67\r\n"
        + GGA_SENTENCE
    )

    outcomes = parser.feed(stream)

    assert len(outcomes) == 3
    assert isinstance(outcomes[0], UnsupportedSourceError)
    assert isinstance(outcomes[1], UnsupportedSourceError)
    assert isinstance(outcomes[2].data, GGA)


def test_unsupported_sentence():
    outcomes = NMEAParser().feed(
        b"$GPZZZ,,,,,,,,,*61\r\n"
        b"$GPGSV,3,1,11,10,63,137,17,07,61,098,15,05,59,290,20,08,54,157,30*70\r\n"
    )
    assert len(outcomes) == 2
    assert all(isinstance(outcome, UnsupportedSentenceError) for outcome in outcomes)


def test_too_long_sentence():
    line = b"$" + b"0123456789" * 8
    outcomes = NMEAParser().feed(line)
    assert len(outcomes) == 1
    assert isinstance(outcomes[0], FormatError)


def test_longest_sentence_fits():
    body = b"GPZZZ," + b"A" * (MAX_SENTENCE_LENGTH - 3 - 6)
    checksum = 0
    for byte in body:
        checksum ^= byte
    sentence = b"$" + body + b"*%02X\r\n" % checksum
    assert len(sentence) == MAX_SENTENCE_LENGTH + 3

    outcomes = NMEAParser().feed(sentence)
    assert len(outcomes) == 1
    assert isinstance(outcomes[0], UnsupportedSentenceError)


@mark.parametrize("length", [80, 100, 500])
def test_overlong_sentence_does_not_corrupt_next_one(length: int):
    parser = NMEAParser()
    outcomes = parser.feed(b"$GPGGA," + b"1" * length + b"*00\r\n" + GGA_SENTENCE)

    assert len(outcomes) == 2
    assert isinstance(outcomes[0], FormatError)
    assert outcomes[1] == NMEAParser().feed(GGA_SENTENCE)[0]


def test_garbage_before_first_sentence_is_ignored():
    stream = b"0,T,,,15.2,N,,,A*12\r\n" + VTG_SENTENCE + VTG_SENTENCE + b"$GPVTG,089.0,T,"
    outcomes = NMEAParser().feed(stream)
    assert len(outcomes) == 2
    assert outcomes[0] == outcomes[1]


def test_restart_while_buffering_is_not_an_error():
    parser = NMEAParser()
    outcomes = parser.feed(b"$GPRMC,125504.049,A,5542" + GGA_SENTENCE)
    assert len(outcomes) == 1
    assert isinstance(outcomes[0].data, GGA)


def test_sentence_split_across_calls():
    parser = NMEAParser()
    assert list(parser.parse_from_bytes(b"$GPRMC,125504.049,A,5542.2389,N")) == []
    assert list(parser.parse_from_bytes(b",03741.6063,E,0.06,25.82,200906,,,")) == []
    assert parser.state is NMEAParserState.BUFFERING

    outcomes = list(parser.parse_from_bytes(b"A*56\r\n"))
    assert outcomes == NMEAParser().feed(RMC_SENTENCE)


def test_parse_from_bytes_is_lazy():
    parser = NMEAParser()
    iterator = parser.parse_from_bytes(GGA_SENTENCE + RMC_SENTENCE)

    first = next(iterator)
    assert first.kind is SentenceKind.GGA
    # The parser stopped right after the first sentence
    assert parser.state is NMEAParserState.IDLE

    second = next(iterator)
    assert second.kind is SentenceKind.RMC
    assert next(iterator, None) is None


def test_lowercase_checksum_is_rejected():
    outcomes = NMEAParser().feed(b"$GPVTG,089.0,T,,,15.2,N,,,A*1a\r\n" + VTG_SENTENCE)
    assert len(outcomes) == 2
    assert isinstance(outcomes[0], FormatError)
    assert outcomes[0] == FormatError("Invalid hex character: 0x61")
    assert outcomes[1].kind is SentenceKind.VTG


def test_non_ascii_sentence():
    outcomes = NMEAParser().feed(b"$GPGGA,\xff,*A9\r\n")
    assert len(outcomes) == 1
    assert isinstance(outcomes[0], FormatError)


def test_reset():
    parser = NMEAParser()
    parser.feed(GGA_SENTENCE[:30])
    assert parser.state is NMEAParserState.BUFFERING

    parser.reset()
    assert parser.state is NMEAParserState.IDLE
    assert parser.feed(GGA_SENTENCE[30:]) == []


CORRUPTED_SENTENCES = [
    # wrong checksum
    GGA_SENTENCE.replace(b"*62", b"*63"),
    # truncated inside the checksum
    GGA_SENTENCE[:-3],
    # truncated before the line terminator
    GGA_SENTENCE[:-2],
    # missing LF
    GGA_SENTENCE[:-1],
    # no checksum at all
    b"$GPVTG,089.0,T,,,15.2,N,,,A\r\n",
    # invalid hex digit
    b"$GPVTG,089.0,T,,,15.2,N,,,A*1G\r\n",
    # junk instead of the line terminator
    b"$GPVTG,089.0,T,,,15.2,N,,,A*12XY\r\n",
    # overlong sentence
    b"$GPGGA," + b"9" * 120 + b"\r\n",
    # unknown source
    b"$LCVTG,089.0,T,,,15.2,N,,*67\r\n",
    # unknown sentence type
    b"$GPZZZ,,,,,,,,,*61\r\n",
    # invalid hemisphere
    b"$GPGGA,145659.00,5956.695396,X,03022.454999,E,2,07,0.6,9.0,M,18.0,M,,*74\r\n",
    # missing field
    b"$GPGGA,145659.00,5956.695396,N,03022.454999,E,2,07,0.6,9.0,M,18.0,M*62\r\n",
    # non-ASCII body
    b"$GPGGA,\xff,*A9\r\n",
]


@mark.parametrize("corrupted", CORRUPTED_SENTENCES)
def test_resynchronization(corrupted: bytes):
    for following in (GGA_SENTENCE, RMC_SENTENCE, GLL_SENTENCE):
        outcomes = NMEAParser().feed(corrupted + following)

        assert len(outcomes) == 2
        assert isinstance(
            outcomes[0],
            (ChecksumError, FormatError, UnsupportedSentenceError, UnsupportedSourceError),
        )
        assert outcomes[1] == NMEAParser().feed(following)[0]


MIXED_STREAM = b"".join(
    [
        b"garbage\r\n",
        GGA_SENTENCE,
        EMPTY_GGA_SENTENCE,
        *CORRUPTED_SENTENCES,
        RMC_SENTENCE,
        b"$GPRMC,125504.049,A",
        VTG_SENTENCE,
        GLL_SENTENCE,
        GLONASS_GGA_SENTENCE,
        GNSS_RMC_SENTENCE,
        b"$GPGGA,145659.00,59",
    ]
)


@mark.parametrize("chunk_size", [1, 2, 7, 64, len(MIXED_STREAM)])
def test_bytewise_and_bulk_parsing_are_equivalent(chunk_size: int):
    expected = parse_bytewise(NMEAParser(), MIXED_STREAM)
    assert len(expected) == 7 + len(CORRUPTED_SENTENCES)

    parser = NMEAParser()
    outcomes = []
    for start in range(0, len(MIXED_STREAM), chunk_size):
        outcomes.extend(parser.parse_from_bytes(MIXED_STREAM[start : start + chunk_size]))

    assert outcomes == expected
    assert NMEAParser().feed(MIXED_STREAM) == expected


def test_independent_parsers_do_not_share_state():
    first, second = NMEAParser(), NMEAParser()
    first.feed(GGA_SENTENCE[:40])
    assert second.state is NMEAParserState.IDLE
    assert second.feed(RMC_SENTENCE)[0].kind is SentenceKind.RMC
    assert first.feed(GGA_SENTENCE[40:])[0].kind is SentenceKind.GGA


def test_stream_of_encoded_records():
    records = [
        GGA(
            source=Source.GPS if second % 3 else Source.GLONASS,
            time=time(12, 0, second),
            latitude=47.5 + second / 1000,
            longitude=19.05 - second / 1000,
            gps_quality=GPSQuality.RTK,
            satellites_in_use=14,
            hdop=0.7,
            altitude=110.25,
        )
        for second in range(60)
    ]
    stream = b"".join(encode_sentence(record) for record in records)

    parser = NMEAParser(SentenceFilter(sources=Source.GPS))
    outcomes = []
    for start in range(0, len(stream), 13):
        outcomes.extend(parser.parse_from_bytes(stream[start : start + 13]))

    expected = [record for record in records if record.source is Source.GPS]
    assert len(outcomes) == len(expected) == 40
    for outcome, record in zip(outcomes, expected):
        assert outcome.data.time == record.time
        assert outcome.data.latitude == approx(record.latitude, abs=1e-6)
        assert outcome.data.longitude == approx(record.longitude, abs=1e-6)
        assert outcome.data.gps_quality is GPSQuality.RTK

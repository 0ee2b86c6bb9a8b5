import io
import struct

import pytest

from codec import (
    encode_block, decode_block, compress_stream, decompress_stream, DEFAULT_BLOCK_SIZE,
)
from bitstream import TruncatedStreamError
from samples import generate_sample


def compress(data, block_size=DEFAULT_BLOCK_SIZE):
    out = io.BytesIO()
    compress_stream(io.BytesIO(data), out, block_size=block_size)
    return out.getvalue()


def decompress(data):
    out = io.BytesIO()
    decompress_stream(io.BytesIO(data), out)
    return out.getvalue()


@pytest.mark.parametrize("kind", ["random", "zeros", "constant", "text", "skewed"])
@pytest.mark.parametrize("block_size", [1, 7, 1000, DEFAULT_BLOCK_SIZE])
def test_roundtrip(kind, block_size):
    data = generate_sample(kind, 3001, seed=7)
    assert decompress(compress(data, block_size)) == data


def test_roundtrip_all_bytes_once():
    data = bytes(range(256))
    assert decompress(compress(data)) == data


def test_empty_input():
    assert compress(b"") == b""
    assert decompress(b"") == b""


def test_encode_empty_block_writes_nothing():
    f = io.BytesIO()
    st = encode_block(b"", f)
    assert f.getvalue() == b""
    assert st.raw_bytes == 0


def test_single_symbol_block():
    data = b"\x41" * 1000
    enc = compress(data)
    bit_length, table_len = struct.unpack_from("<IH", enc)
    assert table_len == 1
    sym, length = enc[6], enc[7]
    assert sym == 0x41 and length >= 1
    assert bit_length == 1000 * length
    assert len(enc) == 8 + (bit_length + 7) // 8
    assert decompress(enc) == data


def test_scenario_exact_bytes():
    enc = compress(b"AAAAABBBCC")
    # A=0 B=10 C=11 -> 00000 101010 1111 + pad
    assert enc == (
        b"\x0f\x00\x00\x00"
        b"\x03\x00" b"A\x01" b"B\x02" b"C\x02"
        b"\x05\x5e"
    )
    assert decompress(enc) == b"AAAAABBBCC"


def test_blocks_are_independent():
    a = generate_sample("text", 500, seed=8)
    b = generate_sample("random", 500, seed=9)
    assert compress(a + b, block_size=500) == compress(a, 500) + compress(b, 500)


def test_decode_block_sequence():
    f = io.BytesIO(compress(b"abcabcabcXYZ", block_size=6))
    assert decode_block(f) == b"abcabc"
    assert decode_block(f) == b"abcXYZ"
    assert decode_block(f) is None


def test_progress_reports_every_block():
    data = generate_sample("skewed", 10000, seed=10)
    seen = []
    enc = io.BytesIO()
    stats = compress_stream(io.BytesIO(data), enc, block_size=3000, progress=seen.append)
    assert [st.index for st in seen] == [0, 1, 2, 3]
    assert [st.raw_bytes for st in seen] == [3000, 3000, 3000, 1000]
    assert seen[-1].consumed == len(data)
    assert sum(st.stored_bytes for st in stats) == len(enc.getvalue())

    seen = []
    out = io.BytesIO()
    dstats = decompress_stream(io.BytesIO(enc.getvalue()), out, progress=seen.append)
    assert len(seen) == 4
    assert seen[-1].consumed == len(enc.getvalue())
    assert [st.bit_length for st in dstats] == [st.bit_length for st in stats]
    assert out.getvalue() == data


def test_truncated_payload_keeps_decoded_prefix():
    data = b"This is a test" * 100
    enc = compress(data, block_size=600)
    out = io.BytesIO()
    with pytest.raises(TruncatedStreamError) as ei:
        decompress_stream(io.BytesIO(enc[:-3]), out)
    got = out.getvalue()
    assert len(got) < len(data)
    assert data.startswith(got)
    assert len(got) >= 1200
    assert got.endswith(ei.value.partial)


def test_truncated_header_after_complete_blocks():
    data = generate_sample("text", 2000, seed=11)
    enc = compress(data, block_size=1000)
    out = io.BytesIO()
    with pytest.raises(TruncatedStreamError):
        decompress_stream(io.BytesIO(enc + b"\x01\x00"), out)
    assert out.getvalue() == data


def test_truncated_table():
    enc = compress(b"hello world")
    with pytest.raises(TruncatedStreamError):
        decompress(enc[:7])


def test_block_ending_inside_code_is_rejected():
    # A=0 B=10, one bit "1" is half of B
    blk = b"\x01\x00\x00\x00" b"\x02\x00" b"A\x01" b"B\x02" b"\x80"
    with pytest.raises(ValueError):
        decompress(blk)


def test_invalid_block_size():
    with pytest.raises(ValueError):
        compress_stream(io.BytesIO(b"x"), io.BytesIO(), block_size=0)


def test_block_stats_carry_entropy():
    stats = compress_stream(io.BytesIO(b"A" * 50 + b"AB" * 25), io.BytesIO(), block_size=50)
    assert stats[0].entropy == pytest.approx(0.0)
    assert stats[1].entropy == pytest.approx(1.0)

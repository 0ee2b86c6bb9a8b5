import io

import numpy as np

from bitpack import BitWriter, BitReader


def test_partial_byte_is_zero_padded():
    bw = BitWriter()
    bw.write_bits("101")
    assert bw.bits_written == 3
    assert bw.flush() == b"\xa0"


def test_write_code_msb_first():
    bw = BitWriter()
    bw.write_code(0b1011, 4)
    bw.write_code(0b0110, 4)
    bw.write_code(0b1, 1)
    assert bw.bits_written == 9
    assert bw.flush() == b"\xb6\x80"


def test_zero_length_code_writes_nothing():
    bw = BitWriter()
    bw.write_code(0, 0)
    assert bw.flush() == b""


def test_write_array_matches_write_bits():
    rng = np.random.default_rng(1)
    bits = rng.integers(0, 2, size=203, dtype=np.uint8)
    s = "".join(str(b) for b in bits.tolist())

    a = BitWriter()
    a.write_array(bits)
    b = BitWriter()
    b.write_bits(s)
    assert a.bits_written == b.bits_written == 203
    assert a.flush() == b.flush()


def test_write_array_after_unaligned_bits():
    bw = BitWriter()
    bw.write_bits("111")
    bw.write_array(np.array([0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1], dtype=np.uint8))
    # 111 00000 | 111111 + pad
    assert bw.flush() == b"\xe0\xfc"


def test_writer_emits_to_stream_on_flush():
    f = io.BytesIO()
    bw = BitWriter(f)
    bw.write_bits("11110000" "1")
    out = bw.flush()
    assert f.getvalue() == b"\xf0\x80"
    assert out == b"\xf0\x80"


def test_writer_large_array_to_stream():
    f = io.BytesIO()
    bw = BitWriter(f)
    bits = np.ones(8 * 70000 + 3, dtype=np.uint8)
    bw.write_array(bits)
    bw.flush()
    data = f.getvalue()
    assert len(data) == 70001
    assert data[:-1] == b"\xff" * 70000
    assert data[-1] == 0xe0


def test_reader_reads_exact_bits():
    br = BitReader(io.BytesIO(b"\xab\xcd\xef"))
    bits = br.read_bits(12)
    assert bits.tolist() == [1, 0, 1, 0, 1, 0, 1, 1, 1, 1, 0, 0]
    assert not br.short_read


def test_reader_consumes_whole_bytes_only():
    f = io.BytesIO(b"\xab\xcd\xef")
    BitReader(f).read_bits(9)
    assert f.read() == b"\xef"


def test_reader_short_read():
    br = BitReader(io.BytesIO(b"\xff"))
    bits = list(br.iter_bits(16))
    assert bits == [1] * 8
    assert br.short_read


def test_reader_zero_bits():
    f = io.BytesIO(b"\x01")
    br = BitReader(f)
    assert br.read_bits(0).size == 0
    assert not br.short_read
    assert f.read() == b"\x01"

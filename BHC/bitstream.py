import struct
from typing import List, Tuple

# Block layout (little-endian):
# bit_length(u32) table_len(u16) table_len * entry  packed_bits(ceil(bit_length/8))
HDR_FMT = "<I"
HDR_SIZE = struct.calcsize(HDR_FMT)

TABLE_LEN_FMT = "<H"
TABLE_LEN_SIZE = struct.calcsize(TABLE_LEN_FMT)

# Huffman table entry:
# symbol(u8) codelen(u8)
TBL_FMT = "<BB"
TBL_SIZE = struct.calcsize(TBL_FMT)

MAX_CODE_LEN = 255
MAX_BIT_LENGTH = 0xFFFFFFFF

class TruncatedStreamError(ValueError):
    """Stream ended inside a block. `partial` holds what was fully decoded."""
    def __init__(self, msg, partial=b""):
        super().__init__(msg)
        self.partial = bytes(partial)

class CodeLengthError(ValueError):
    """A code length does not fit the one-byte length field."""

def write_block_header(f, bit_length: int):
    if not (0 <= bit_length <= MAX_BIT_LENGTH):
        raise ValueError(f"bit length {bit_length} does not fit in u32")
    f.write(struct.pack(HDR_FMT, bit_length))

def read_block_header(f):
    """
    Returns the block bit length, or None at a clean end of stream.
    """
    data = f.read(HDR_SIZE)
    if len(data) == 0:
        return None
    if len(data) != HDR_SIZE:
        raise TruncatedStreamError("Malformed stream: block header truncated")
    (bit_length,) = struct.unpack(HDR_FMT, data)
    return bit_length

def sort_entries(entries):
    return sorted(entries, key=lambda e: (e[1], e[0]))

def write_table(f, entries: List[Tuple[int, int]]):
    entries = sort_entries(entries)
    if len(entries) > 256:
        raise ValueError("table has more than 256 symbols")
    buf = bytearray(struct.pack(TABLE_LEN_FMT, len(entries)))
    for sym, L in entries:
        if not (0 <= sym <= 255):
            raise ValueError("symbol out of range")
        if L > MAX_CODE_LEN:
            raise CodeLengthError(f"code length {L} for symbol {sym} exceeds {MAX_CODE_LEN}")
        if L < 1:
            raise ValueError("code length must be >= 1")
        buf += struct.pack(TBL_FMT, sym, L)
    f.write(buf)
    return len(buf)

def read_table(f) -> List[Tuple[int, int]]:
    data = f.read(TABLE_LEN_SIZE)
    if len(data) != TABLE_LEN_SIZE:
        raise TruncatedStreamError("Malformed stream: table length truncated")
    (table_len,) = struct.unpack(TABLE_LEN_FMT, data)
    if table_len > 256:
        raise ValueError(f"Malformed stream: table length {table_len} > 256")
    data = f.read(table_len * TBL_SIZE)
    if len(data) != table_len * TBL_SIZE:
        raise TruncatedStreamError("Malformed stream: table truncated")
    entries = [(int(s), int(L)) for s, L in struct.iter_unpack(TBL_FMT, data)]
    seen = set()
    for sym, L in entries:
        if L == 0:
            raise ValueError(f"Malformed stream: zero code length for symbol {sym}")
        if sym in seen:
            raise ValueError(f"Malformed stream: duplicate symbol {sym}")
        seen.add(sym)
    return sort_entries(entries)

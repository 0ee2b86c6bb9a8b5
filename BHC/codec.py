from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional

from huff_canonical import (
    count_frequencies, build_tree, assign_codes, code_lengths,
    canonical_codes_from_lengths, encode_bits, build_decode_trie, decode_bits,
)
from bitpack import BitWriter, BitReader
from metrics import entropy
from bitstream import (
    write_block_header, read_block_header, write_table, read_table,
    HDR_SIZE, TABLE_LEN_SIZE, TBL_SIZE, TruncatedStreamError,
)

DEFAULT_BLOCK_SIZE = 1 << 20

@dataclass
class BlockStats:
    index: int
    raw_bytes: int      # uncompressed size of the block
    stored_bytes: int   # size of the block on disk, header included
    bit_length: int
    table_len: int
    consumed: int = 0   # input bytes consumed so far (driver-filled)
    entropy: float = 0.0  # bits per byte of the raw block (encode only)

def encode_block(block: bytes, f) -> BlockStats:
    """
    Encode one block and write it to `f`.
    Returns stats with index/consumed left for the driver to fill.
    """
    if not block:
        return BlockStats(index=-1, raw_bytes=0, stored_bytes=0, bit_length=0, table_len=0)

    freqs = count_frequencies(block)
    tree = build_tree(freqs)
    lengths = code_lengths(assign_codes(tree))
    codes = canonical_codes_from_lengths(lengths)

    bit_length = sum(freqs[s] * L for s, L in lengths.items())
    write_block_header(f, bit_length)
    table_bytes = write_table(f, list(lengths.items()))

    bw = BitWriter(f)
    bw.write_array(encode_bits(block, codes))
    payload = (bw.bits_written + 7) // 8
    bw.flush()

    return BlockStats(
        index=-1,
        raw_bytes=len(block),
        stored_bytes=HDR_SIZE + table_bytes + payload,
        bit_length=bit_length,
        table_len=len(lengths),
        entropy=entropy(freqs),
    )

def read_block(f):
    """
    Decode the block at the current position of `f`.
    Returns (data, bit_length, table_len), or None at a clean end of stream.
    """
    bit_length = read_block_header(f)
    if bit_length is None:
        return None
    entries = read_table(f)
    codes = canonical_codes_from_lengths(dict(entries))
    trie = build_decode_trie(codes)

    br = BitReader(f)
    out, mid_code = decode_bits(trie, br.iter_bits(bit_length))
    if br.short_read:
        raise TruncatedStreamError(
            f"Malformed stream: payload truncated after {len(out)} symbols", partial=out)
    if mid_code:
        raise ValueError("Invalid Huffman code: block ends inside a code")
    return bytes(out), bit_length, len(entries)

def decode_block(f) -> Optional[bytes]:
    res = read_block(f)
    return None if res is None else res[0]

def compress_stream(fin, fout, block_size: int = DEFAULT_BLOCK_SIZE,
                    progress: Optional[Callable[[BlockStats], None]] = None) -> List[BlockStats]:
    if block_size < 1:
        raise ValueError("block_size must be >= 1")
    stats = []
    consumed = 0
    while True:
        block = fin.read(block_size)
        if not block:
            break
        st = encode_block(block, fout)
        consumed += len(block)
        st.index = len(stats)
        st.consumed = consumed
        stats.append(st)
        if progress is not None:
            progress(st)
    return stats

def decompress_stream(fin, fout,
                      progress: Optional[Callable[[BlockStats], None]] = None) -> List[BlockStats]:
    stats = []
    consumed = 0
    while True:
        try:
            res = read_block(fin)
        except TruncatedStreamError as e:
            fout.write(e.partial)
            raise
        if res is None:
            break
        block, bit_length, table_len = res
        fout.write(block)
        stored = HDR_SIZE + TABLE_LEN_SIZE + table_len * TBL_SIZE + (bit_length + 7) // 8
        consumed += stored
        st = BlockStats(
            index=len(stats), raw_bytes=len(block), stored_bytes=stored,
            bit_length=bit_length, table_len=table_len, consumed=consumed,
        )
        stats.append(st)
        if progress is not None:
            progress(st)
    return stats

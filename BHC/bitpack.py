import numpy as np

class BitWriter:
    """
    MSB-first bit accumulator.
    Full bytes are kept in an internal buffer (or written straight to `f`
    when one is given); the caller tracks the exact bit count.
    """
    def __init__(self, f=None):
        self._f = f
        self._buf = bytearray()
        self._cur = 0
        self._nbits = 0  # bits currently in _cur (0..7)
        self.bits_written = 0

    def write_code(self, code: int, length: int):
        """Write 'length' bits of code (MSB-first)."""
        for i in range(length - 1, -1, -1):
            self._push((code >> i) & 1)

    def write_bits(self, bits: str):
        """Write a '0'/'1' string."""
        for ch in bits:
            self._push(1 if ch == "1" else 0)

    def write_array(self, bits: np.ndarray):
        """Write a flat array of 0/1 values."""
        bits = np.asarray(bits, dtype=np.uint8).ravel()
        i = 0
        # top up the partial byte first so the rest is byte-aligned
        while self._nbits and i < bits.size:
            self._push(int(bits[i]))
            i += 1
        rest = bits[i:]
        nfull = (rest.size // 8) * 8
        if nfull:
            self._buf += np.packbits(rest[:nfull]).tobytes()
            self.bits_written += nfull
            self._drain()
        for b in rest[nfull:].tolist():
            self._push(b)

    def flush(self) -> bytes:
        """Pad remaining bits with zeros and emit everything pending."""
        if self._nbits > 0:
            self._buf.append(self._cur << (8 - self._nbits))
            self._cur = 0
            self._nbits = 0
        out = bytes(self._buf)
        self._buf.clear()
        if self._f is not None:
            self._f.write(out)
        return out

    def _push(self, bit: int):
        self._cur = (self._cur << 1) | bit
        self._nbits += 1
        self.bits_written += 1
        if self._nbits == 8:
            self._buf.append(self._cur)
            self._cur = 0
            self._nbits = 0
            self._drain()

    def _drain(self):
        if self._f is not None and len(self._buf) >= 65536:
            self._f.write(bytes(self._buf))
            self._buf.clear()

class BitReader:
    """
    Reads an exact number of bits (MSB-first) from a binary stream.
    `short_read` is set when the stream ended before the count was met.
    """
    def __init__(self, f):
        self._f = f
        self.short_read = False

    def read_bits(self, nbits: int) -> np.ndarray:
        nbytes = (nbits + 7) // 8
        data = self._f.read(nbytes)
        if len(data) < nbytes:
            self.short_read = True
        bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8))
        return bits[:nbits]

    def iter_bits(self, nbits: int):
        yield from self.read_bits(nbits).tolist()

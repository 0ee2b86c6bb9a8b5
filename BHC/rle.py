from bitstream import TruncatedStreamError

# Binary-safe variant:
#   run of >= MIN_RUN_LENGTH identical bytes -> ESCAPE count byte
#   literal ESCAPE                            -> ESCAPE 0x00
#   anything else                             -> literal
ESCAPE_BYTE = 0xFF
MIN_RUN_LENGTH = 4
MAX_RUN_LENGTH = 255

def _runs(seq):
    """Yield (item, run_length) pairs, runs unbounded."""
    i = 0
    n = len(seq)
    while i < n:
        j = i + 1
        while j < n and seq[j] == seq[i]:
            j += 1
        yield seq[i], j - i
        i = j

def rle_text_encode(text: str) -> str:
    """
    "AAAB" -> "3A1B"
    Digits in the input are not escaped, so the text form is only
    reversible for digit-free text.
    """
    return "".join(f"{count}{ch}" for ch, count in _runs(text))

def rle_text_decode(data: str) -> str:
    out = []
    count = ""
    for ch in data:
        if "0" <= ch <= "9":
            count += ch
            continue
        if not count:
            raise ValueError(f"RLE decode: character {ch!r} without a count")
        out.append(ch * int(count))
        count = ""
    if count:
        raise ValueError("RLE decode: trailing count without a character")
    return "".join(out)

def rle_binary_encode(data: bytes) -> bytes:
    out = bytearray()
    for byte, run in _runs(bytes(data)):
        while run > 0:
            n = min(run, MAX_RUN_LENGTH)
            if n >= MIN_RUN_LENGTH:
                out += bytes((ESCAPE_BYTE, n, byte))
            elif byte == ESCAPE_BYTE:
                out += bytes((ESCAPE_BYTE, 0x00)) * n
            else:
                out += bytes((byte,)) * n
            run -= n
    return bytes(out)

def rle_binary_decode(data: bytes, strict: bool = False) -> bytes:
    """
    A dangling escape at the end stops decoding; with strict=True it
    raises TruncatedStreamError instead.
    """
    data = bytes(data)
    out = bytearray()
    i = 0
    n = len(data)
    while i < n:
        b = data[i]
        if b != ESCAPE_BYTE:
            out.append(b)
            i += 1
            continue
        if i + 1 >= n:
            break
        count = data[i + 1]
        if count == 0x00:
            out.append(ESCAPE_BYTE)
            i += 2
            continue
        if i + 2 >= n:
            break
        out += bytes((data[i + 2],)) * count
        i += 3
    else:
        return bytes(out)
    if strict:
        raise TruncatedStreamError("RLE decode: unexpected end of compressed data", partial=out)
    return bytes(out)

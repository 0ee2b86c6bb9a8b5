import argparse
import os
import sys

from codec import compress_stream, decompress_stream, DEFAULT_BLOCK_SIZE
from bitstream import TruncatedStreamError
from rle import rle_text_encode, rle_text_decode, rle_binary_encode, rle_binary_decode
from metrics import compression_ratio, space_saved

CODECS = ("huffman", "rle", "rle-binary")

# Huffman averages under 9 bits per byte, so this keeps bit lengths below 2**32
MAX_BLOCK_SIZE = 1 << 28

def block_size(s):
    v = int(s)
    if v < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    if v > MAX_BLOCK_SIZE:
        raise argparse.ArgumentTypeError(f"must be <= {MAX_BLOCK_SIZE}")
    return v

def build_parser():
    ap = argparse.ArgumentParser(prog="huffzip", description="Block Huffman file compressor")
    ap.add_argument("mode", choices=("compress", "decompress"))
    ap.add_argument("input", help="input file")
    ap.add_argument("output", help="output file")
    ap.add_argument("--codec", choices=CODECS, default="huffman")
    ap.add_argument("--block-size", type=block_size, default=DEFAULT_BLOCK_SIZE,
                    help=f"bytes per Huffman block (default {DEFAULT_BLOCK_SIZE})")
    ap.add_argument("--quiet", action="store_true", help="no progress or summary")
    return ap

def make_progress(tag, total, quiet):
    def report(st):
        if quiet or total <= 0:
            return
        pct = min(100.0, st.consumed * 100.0 / total)
        print(f"\r[{tag}] {pct:.1f}%", end="", flush=True)
    return report

def run_huffman(args, total):
    tag = args.mode
    progress = make_progress(tag, total, args.quiet)
    with open(args.input, "rb") as fin, open(args.output, "wb") as fout:
        if args.mode == "compress":
            stats = compress_stream(fin, fout, block_size=args.block_size, progress=progress)
        else:
            stats = decompress_stream(fin, fout, progress=progress)
    if not args.quiet and total > 0:
        print(f"\r[{tag}] 100.0%")
    return stats

def run_rle(args):
    with open(args.input, "rb") as f:
        data = f.read()
    if args.codec == "rle":
        text = data.decode("latin-1")
        fn = rle_text_encode if args.mode == "compress" else rle_text_decode
        out = fn(text).encode("latin-1")
    elif args.mode == "compress":
        out = rle_binary_encode(data)
    else:
        out = rle_binary_decode(data, strict=True)
    with open(args.output, "wb") as f:
        f.write(out)

def main(argv=None):
    args = build_parser().parse_args(argv)
    tag = args.mode

    try:
        total = os.path.getsize(args.input)
        if args.codec == "huffman":
            stats = run_huffman(args, total)
        else:
            stats = None
            run_rle(args)
        out_size = os.path.getsize(args.output)
    except OSError as e:
        print(f"[{tag}] error: {e}", file=sys.stderr)
        return 1
    except TruncatedStreamError as e:
        print(f"\n[{tag}] error: {e} ({len(e.partial)} bytes of the last block recovered)",
              file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"\n[{tag}] error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"[{tag}] wrote {args.output} codec={args.codec}"
              + (f" blocks={len(stats)}" if stats is not None else ""))
        if args.mode == "compress":
            print(f"[{tag}] original={total}B compressed={out_size}B "
                  f"ratio={compression_ratio(total, out_size):.1f}% "
                  f"saved={space_saved(total, out_size)}B")
            if stats:
                bits = sum(st.entropy * st.raw_bytes for st in stats) / total
                print(f"[{tag}] entropy={bits:.3f} bits/byte")
        else:
            print(f"[{tag}] compressed={total}B decompressed={out_size}B")
    return 0

if __name__ == "__main__":
    sys.exit(main())

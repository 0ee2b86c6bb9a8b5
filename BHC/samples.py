import argparse
import os
import numpy as np

KINDS = ("random", "zeros", "constant", "text", "skewed")

_WORDS = np.array(
    "the quick brown fox jumps over lazy dog block huffman code table "
    "stream canonical length symbol byte bit".split()
)

def generate_sample(kind="random", size=4096, seed=0):
    rng = np.random.default_rng(seed)
    if kind == "random":
        return rng.integers(0, 256, size=size, dtype=np.uint8).tobytes()
    if kind == "zeros":
        return bytes(size)
    if kind == "constant":
        return b"A" * size
    if kind == "text":
        out = bytearray()
        while len(out) < size:
            out += " ".join(rng.choice(_WORDS, size=16)).encode("ascii") + b"\n"
        return bytes(out[:size])
    if kind == "skewed":
        # geometric: a handful of symbols dominate, long tail up to 255
        x = rng.geometric(p=0.3, size=size) - 1
        return np.clip(x, 0, 255).astype(np.uint8).tobytes()
    raise ValueError(f"unknown sample kind: {kind!r} (expected one of {KINDS})")

def save_sample(path="data/sample.bin", kind="random", size=4096, seed=0):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "wb") as f:
        f.write(generate_sample(kind, size, seed))
    return path

def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--output", default="data/sample.bin")
    ap.add_argument("--kind", choices=KINDS, default="random")
    ap.add_argument("--size", type=int, default=1 << 20)
    ap.add_argument("--seed", type=int, default=0)
    args = ap.parse_args(argv)
    p = save_sample(args.output, args.kind, args.size, args.seed)
    print(f"[samples] wrote {p} kind={args.kind} size={args.size}")

if __name__ == "__main__":
    main()

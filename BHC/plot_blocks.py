import argparse
import io
import os
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from codec import compress_stream, DEFAULT_BLOCK_SIZE
from metrics import compression_ratio

def plot_block_stats(stats, path, title=None):
    """
    Two panels: per-block compression ratio and table size.
    """
    idx = np.array([st.index for st in stats])
    ratio = np.array([compression_ratio(st.raw_bytes, st.stored_bytes) for st in stats])
    tbl = np.array([st.table_len for st in stats])

    fig, axes = plt.subplots(1, 2, figsize=(10, 3))
    axes[0].bar(idx, ratio, color="tab:blue")
    axes[0].axhline(100.0, color="gray", lw=0.8, ls="--")
    axes[0].set_xlabel("block")
    axes[0].set_ylabel("stored / raw (%)")
    axes[1].bar(idx, tbl, color="tab:orange")
    axes[1].set_xlabel("block")
    axes[1].set_ylabel("table entries")
    if title:
        fig.suptitle(title, fontsize=9)

    fig.tight_layout()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path

def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--input", required=True)
    ap.add_argument("--output", default="results/fig_blocks.png")
    ap.add_argument("--block-size", type=int, default=DEFAULT_BLOCK_SIZE)
    args = ap.parse_args(argv)

    with open(args.input, "rb") as fin:
        stats = compress_stream(fin, io.BytesIO(), block_size=args.block_size)
    plot_block_stats(stats, args.output, title=os.path.basename(args.input))
    print(f"[plot_blocks] wrote {args.output} blocks={len(stats)}")

if __name__ == "__main__":
    main()

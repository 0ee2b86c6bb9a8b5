from __future__ import annotations
import heapq
from dataclasses import dataclass, field
from typing import Dict, Tuple, List

import numpy as np

# branch convention shared by encoder and decoder
LEFT_BIT = "1"
RIGHT_BIT = "0"

def count_frequencies(block: bytes) -> Dict[int, int]:
    """Sparse byte histogram: only symbols present in the block."""
    arr = np.frombuffer(bytes(block), dtype=np.uint8)
    counts = np.bincount(arr, minlength=256)
    nz = np.flatnonzero(counts)
    return {int(s): int(counts[s]) for s in nz}

@dataclass
class HuffmanTree:
    """
    Arena of nodes addressed by index.
    Leaves carry sym >= 0; internal nodes have sym == -1.
    Missing children are -1.
    """
    weight: List[int] = field(default_factory=list)
    sym: List[int] = field(default_factory=list)
    left: List[int] = field(default_factory=list)
    right: List[int] = field(default_factory=list)
    root: int = -1

    def add(self, weight: int, sym: int = -1, left: int = -1, right: int = -1) -> int:
        self.weight.append(weight)
        self.sym.append(sym)
        self.left.append(left)
        self.right.append(right)
        return len(self.weight) - 1

    def is_leaf(self, i: int) -> bool:
        return self.sym[i] >= 0

    def __len__(self):
        return len(self.weight)

def build_tree(freqs: Dict[int, int]) -> HuffmanTree:
    if not freqs:
        raise ValueError("cannot build a Huffman tree from an empty frequency table")
    tree = HuffmanTree()
    # (weight, seq, node): seq keeps equal-weight pops in insertion order
    pq = []
    for sym in sorted(freqs):
        i = tree.add(freqs[sym], sym=sym)
        pq.append((freqs[sym], i, i))
    heapq.heapify(pq)
    if len(pq) == 1:
        # Edge case: only one symbol -> give it length 1
        w, _, only = pq[0]
        tree.root = tree.add(w, left=only)
        return tree
    seq = len(tree)
    while len(pq) > 1:
        wa, _, a = heapq.heappop(pq)
        wb, _, b = heapq.heappop(pq)
        i = tree.add(wa + wb, left=a, right=b)
        heapq.heappush(pq, (wa + wb, seq, i))
        seq += 1
    tree.root = pq[0][2]
    return tree

def assign_codes(tree: HuffmanTree) -> Dict[int, str]:
    """Root-to-leaf paths, walked with an explicit stack."""
    codes: Dict[int, str] = {}
    stack = [(tree.root, "")]
    while stack:
        node, prefix = stack.pop()
        if tree.is_leaf(node):
            if not prefix:
                raise ValueError("leaf at tree root would get an empty code")
            codes[tree.sym[node]] = prefix
            continue
        if tree.right[node] >= 0:
            stack.append((tree.right[node], prefix + RIGHT_BIT))
        if tree.left[node] >= 0:
            stack.append((tree.left[node], prefix + LEFT_BIT))
    return codes

def code_lengths(codes: Dict[int, str]) -> Dict[int, int]:
    return {sym: len(code) for sym, code in codes.items()}

def build_code_lengths(block: bytes) -> Dict[int, int]:
    return code_lengths(assign_codes(build_tree(count_frequencies(block))))

def canonical_order(lengths: Dict[int, int]) -> List[Tuple[int, int]]:
    return sorted(lengths.items(), key=lambda kv: (kv[1], kv[0]))

def canonical_codes_from_lengths(lengths: Dict[int, int]) -> Dict[int, Tuple[int, int]]:
    """
    Return mapping: sym -> (code_int, code_len), canonical Huffman.
    Canonical ordering: sort by (code_len, sym)
    """
    code = 0
    prev_len = 0
    out: Dict[int, Tuple[int, int]] = {}
    for sym, L in canonical_order(lengths):
        if L < 1:
            raise ValueError(f"invalid code length {L} for symbol {sym}")
        code <<= (L - prev_len)
        out[sym] = (code, L)
        code += 1
        prev_len = L
    return out

def to_bitstrings(codes: Dict[int, Tuple[int, int]]) -> Dict[int, str]:
    return {sym: format(code, f"0{L}b") for sym, (code, L) in codes.items()}

def code_arrays(codes: Dict[int, Tuple[int, int]]):
    """256-entry lookup arrays (code value, code length) for vectorized packing."""
    vals = np.zeros(256, dtype=np.uint64)
    lens = np.zeros(256, dtype=np.int64)
    for sym, (code, L) in codes.items():
        vals[sym] = code
        lens[sym] = L
    return vals, lens

def encode_bits(block: bytes, codes: Dict[int, Tuple[int, int]]) -> np.ndarray:
    """
    Concatenated code bits for every byte of `block` as a flat 0/1 array.
    """
    arr = np.frombuffer(bytes(block), dtype=np.uint8)
    vals, lens = code_arrays(codes)
    L = lens[arr]
    V = vals[arr]
    total = int(L.sum())
    out = np.zeros(total, dtype=np.uint8)
    if total == 0:
        return out
    starts = np.cumsum(L) - L
    for k in range(int(L.max())):
        m = L > k
        shift = (L[m] - 1 - k).astype(np.uint64)
        out[starts[m] + k] = ((V[m] >> shift) & np.uint64(1)).astype(np.uint8)
    return out

@dataclass
class DecodeTrie:
    """
    Decoding trie in arena form: kids[2*n + bit] is the child of node n.
    """
    kids: List[int] = field(default_factory=lambda: [-1, -1])
    sym: List[int] = field(default_factory=lambda: [-1])

def build_decode_trie(codes: Dict[int, Tuple[int, int]]) -> DecodeTrie:
    """
    Build a binary trie for decoding bits -> symbol.
    """
    trie = DecodeTrie()
    for sym, (code, L) in codes.items():
        cur = 0
        for i in range(L - 1, -1, -1):
            slot = 2 * cur + ((code >> i) & 1)
            nxt = trie.kids[slot]
            if nxt < 0:
                nxt = len(trie.sym)
                trie.kids[slot] = nxt
                trie.kids.extend((-1, -1))
                trie.sym.append(-1)
            elif trie.sym[nxt] >= 0:
                raise ValueError("Code table is not prefix-free")
            cur = nxt
        if trie.sym[cur] >= 0 or trie.kids[2 * cur] >= 0 or trie.kids[2 * cur + 1] >= 0:
            raise ValueError("Code table is not prefix-free")
        trie.sym[cur] = sym
    return trie

def decode_bits(trie: DecodeTrie, bits) -> Tuple[bytearray, bool]:
    """
    Walk `bits` through the trie.
    Returns (decoded symbols, ended_mid_code).
    """
    kids = trie.kids
    syms = trie.sym
    out = bytearray()
    cur = 0
    for b in bits:
        cur = kids[2 * cur + b]
        if cur < 0:
            raise ValueError("Invalid Huffman code (corrupt stream)")
        s = syms[cur]
        if s >= 0:
            out.append(s)
            cur = 0
    return out, cur != 0

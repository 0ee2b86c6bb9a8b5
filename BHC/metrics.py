import numpy as np

def compression_ratio(raw_bytes: int, stored_bytes: int) -> float:
    """Stored size as a percentage of the raw size (0.0 for empty input)."""
    if raw_bytes == 0:
        return 0.0
    return float(stored_bytes * 100.0 / raw_bytes)

def space_saved(raw_bytes: int, stored_bytes: int) -> int:
    return raw_bytes - stored_bytes

def entropy(freqs) -> float:
    """Shannon entropy in bits per byte of a frequency table."""
    counts = np.array(list(freqs.values()), dtype=np.float64)
    total = counts.sum()
    if total == 0:
        return 0.0
    p = counts / total
    return float(-(p * np.log2(p)).sum())

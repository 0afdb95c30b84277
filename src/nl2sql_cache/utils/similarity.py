"""Vector similarity helpers."""

from collections.abc import Sequence

import numpy as np


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors, clipped to [-1, 1].

    Returns 0.0 when either vector has zero norm or when the vectors differ
    in dimension. A vector compared with itself scores exactly 1.0.
    """
    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)
    if a.shape != b.shape:
        return 0.0

    sq_a = np.dot(a, a)
    sq_b = np.dot(b, b)
    if sq_a == 0 or sq_b == 0:
        return 0.0

    # sqrt(x * x) rounds back to x, so identical inputs divide to exactly 1.
    score = np.dot(a, b) / np.sqrt(sq_a * sq_b)
    return float(np.clip(score, -1.0, 1.0))

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

DEFAULT_TOP_K = 3
# Scores equal up to this many decimals keep enumeration order
_SCORE_DECIMALS = 12


@dataclass
class Diagnostic:
    """A direct judgment that disagrees with the judgment implied through a third item."""
    pair: Tuple[int, int]
    witness: int
    score: float  # |ln(direct) - ln(indirect)|
    labels: Tuple[str, str, str]

    def to_dict(self):
        return {
            "pairIndices": list(self.pair),
            "witnessIndex": self.witness,
            "score": self.score,
            "labels": list(self.labels),
        }


def _usable(x: float) -> bool:
    return math.isfinite(x) and x > 0


def diagnose(labels: Sequence[str], matrix, top_k: int = DEFAULT_TOP_K) -> List[Diagnostic]:
    """
    Ranks the pairs whose direct judgment disagrees most with an indirect one.

    For each pair (i, j), i < j, every other item k gives the transitive estimate
    A[i, k] * A[k, j]. The k with the largest log-ratio distance to A[i, j] is the
    witness for that pair. Pairs are returned by decreasing distance, at most top_k.
    """
    A = np.asarray(matrix, dtype=float)
    n = A.shape[0]
    if len(labels) != n:
        raise ValueError(f"Got {len(labels)} labels for a matrix of order {n}")
    if top_k < 0:
        raise ValueError("top_k must be non-negative")

    found = []
    for i in range(n):
        for j in range(i + 1, n):
            direct = A[i, j]
            if not _usable(direct):
                continue
            best_score, best_k = None, None
            for k in range(n):
                if k == i or k == j:
                    continue
                via = A[i, k] * A[k, j]
                if not _usable(via):
                    continue
                d = abs(math.log(direct) - math.log(via))
                if best_score is None or d > best_score:
                    best_score, best_k = d, k
            if best_k is not None:
                found.append(Diagnostic((i, j), best_k, best_score, (labels[i], labels[j], labels[best_k])))

    found.sort(key=lambda d: round(d.score, _SCORE_DECIMALS), reverse=True)
    return found[:top_k]

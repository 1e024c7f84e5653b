from typing import Any, List, NamedTuple, Sequence, Tuple

import numpy as np


class AggregateResult(NamedTuple):
    scores: np.ndarray
    ranking: List[Tuple[Any, float]]


def rank(names: Sequence, scores) -> List[Tuple[Any, float]]:
    """Pairs names with scores, best first. Equal scores keep input order."""
    return sorted(zip(names, (float(s) for s in scores)), key=lambda item: item[1], reverse=True)


def aggregate(criteria_weights, alternative_weights, alternative_names: Sequence = None) -> AggregateResult:
    """
    Weighted-sum synthesis of a two-level hierarchy.

    Args:
        criteria_weights: Weight of each criterion (length = number of criteria).
        alternative_weights: One weight vector per criterion, each of length = number of alternatives.
        alternative_names: Names used in the ranking; defaults to the alternative indices.

    Returns:
        AggregateResult with score[i] = sum_j criteria_weights[j] * alternative_weights[j][i]
        and the ranking sorted by score, highest first.
    """
    wc = np.asarray(criteria_weights, dtype=float)
    if len(alternative_weights) != len(wc):
        raise ValueError(
            f"Got {len(alternative_weights)} alternative weight vectors for {len(wc)} criteria"
        )
    if len(wc) == 0:
        raise ValueError("At least one criterion is required")

    lengths = {len(w) for w in alternative_weights}
    if len(lengths) != 1:
        raise ValueError("All alternative weight vectors must have the same length")
    wa = np.asarray(alternative_weights, dtype=float)  # criteria x alternatives
    m = wa.shape[1]

    if alternative_names is None:
        alternative_names = list(range(m))
    if len(alternative_names) != m:
        raise ValueError(f"Got {len(alternative_names)} alternative names for {m} alternatives")

    scores = wc @ wa
    return AggregateResult(scores, rank(alternative_names, scores))

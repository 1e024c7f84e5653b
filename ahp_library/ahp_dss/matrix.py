import math
import numbers
from collections import namedtuple

import numpy as np

SCALE_MIN = 1
SCALE_MAX = 9

Judgment = namedtuple("Judgment", ["magnitude", "prefer_right"])


def build_neutral(n: int) -> np.ndarray:
    """
    Builds the neutral comparison matrix of order n.

    Every cell is 1, i.e. every pair is judged "equally preferred". This is the
    reset state for a label list, not the mathematical identity matrix.
    """
    if n < 1:
        raise ValueError("Matrix order must be at least 1")
    return np.ones((n, n), dtype=float)


def set_pairwise(matrix, i: int, j: int, value: float) -> np.ndarray:
    """
    Returns a copy of the matrix with the judgment for the pair (i, j) replaced.

    B[i, j] = value, B[j, i] = 1 / value and the whole diagonal is forced back to 1.
    The input matrix is left untouched.
    """
    B = np.array(matrix, dtype=float)
    if B.ndim != 2 or B.shape[0] != B.shape[1]:
        raise ValueError(f"Comparison matrix must be square, got shape {B.shape}")
    n = B.shape[0]
    if not (0 <= i < n and 0 <= j < n):
        raise IndexError(f"Pair ({i}, {j}) is out of bounds for a matrix of order {n}")
    if i == j:
        raise ValueError("Cannot set a judgment on the diagonal")
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Judgment value must be positive and finite, got {value}")

    B[i, j] = value
    B[j, i] = 1.0 / value
    np.fill_diagonal(B, 1.0)
    return B


# Name used by the UI collaborator
apply_judgment = set_pairwise


def judgment_value(magnitude: int, prefer_right: bool = False) -> float:
    """Converts a 1-9 slider judgment into the matrix cell value for (left, right)."""
    if (isinstance(magnitude, bool) or not isinstance(magnitude, numbers.Real)
            or not math.isfinite(magnitude) or int(magnitude) != magnitude):
        raise ValueError(f"Judgment magnitude must be an integer, got {magnitude!r}")
    if not SCALE_MIN <= magnitude <= SCALE_MAX:
        raise ValueError(f"Judgment magnitude must be between {SCALE_MIN} and {SCALE_MAX}, got {magnitude}")
    return 1.0 / magnitude if prefer_right else float(magnitude)


def judgment_from_value(value: float) -> Judgment:
    """Maps a stored cell value back onto the slider (nearest magnitude, preferred side)."""
    prefer_right = value < 1
    v = 1.0 / value if prefer_right else value
    magnitude = min(SCALE_MAX, max(SCALE_MIN, int(round(v))))
    return Judgment(magnitude, prefer_right)


def is_valid_matrix(matrix, n: int = None) -> bool:
    """
    Checks that a (possibly deserialized) matrix is a pairwise comparison matrix of order n:
    square, positive, finite, unit diagonal and reciprocal (A[i, j] * A[j, i] == 1).
    """
    try:
        A = np.array(matrix, dtype=float)
    except (TypeError, ValueError):
        return False
    if A.ndim != 2 or A.shape[0] != A.shape[1] or A.shape[0] == 0:
        return False
    if n is not None and A.shape[0] != n:
        return False
    if not (np.all(np.isfinite(A)) and np.all(A > 0)):
        return False
    return bool(np.allclose(np.diag(A), 1.0) and np.allclose(A * A.T, 1.0))

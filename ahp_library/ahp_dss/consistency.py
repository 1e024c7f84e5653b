from collections import namedtuple

# Saaty's Random Index, keyed by matrix order
RANDOM_INDEX = {
    1: 0.00, 2: 0.00, 3: 0.58, 4: 0.90, 5: 1.12,
    6: 1.24, 7: 1.32, 8: 1.41, 9: 1.45, 10: 1.49
}
# Approximation for orders above 10, not part of the published table
RI_FALLBACK = 1.49

GOOD_CR = 0.10
BORDERLINE_CR = 0.20

CRMessage = namedtuple("CRMessage", ["level", "title", "text"])


def random_index(n: int) -> float:
    return RANDOM_INDEX.get(n, RI_FALLBACK)


def consistency(n: int, lambda_max: float):
    """
    Computes the Consistency Index and Consistency Ratio.

    Returns:
        (ci, cr). A single-item matrix has ci = 0; orders with RI = 0 (n <= 2) have cr = 0.
    """
    ci = (lambda_max - n) / (n - 1) if n > 1 else 0.0
    ri = random_index(n)
    cr = 0.0 if ri == 0 else ci / ri
    return ci, cr


def classify_cr(cr: float) -> str:
    """Advisory level: 'good', 'borderline' or 'low' (ranking may be unstable)."""
    if cr <= GOOD_CR:
        return "good"
    if cr <= BORDERLINE_CR:
        return "borderline"
    return "low"


def cr_message(cr: float) -> CRMessage:
    level = classify_cr(cr)
    titles = {
        "good": "Good consistency",
        "borderline": "Borderline consistency",
        "low": "Low consistency, ranking may be unstable",
    }
    return CRMessage(level, titles[level], f"CR {cr:.3f}.")

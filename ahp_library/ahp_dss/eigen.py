import logging

import numpy as np

logger = logging.getLogger(__name__)

MAX_ITER = 1500
TOLERANCE = 1e-11


def power_iteration(matrix, max_iter: int = MAX_ITER, tol: float = TOLERANCE):
    """
    Approximates the principal eigenvector and dominant eigenvalue of a positive
    reciprocal matrix by power iteration.

    Args:
        matrix: Pairwise comparison matrix (n x n), strictly positive entries.
        max_iter (int): Hard cap on the number of iterations.
        tol (float): The loop stops once the largest change of any weight is below this.

    Returns:
        (weights, lambda_max): weights is an np.ndarray summing to 1.
    """
    A = np.asarray(matrix, dtype=float)
    n = A.shape[0]
    w = np.full(n, 1.0 / n)

    converged = False
    iterations = 0
    for iterations in range(1, max_iter + 1):
        Aw = A @ w
        w_new = Aw / np.sum(Aw)
        diff = np.max(np.abs(w_new - w))
        w = w_new
        if diff < tol:
            converged = True
            break

    if converged:
        logger.debug("Power iteration converged after %d iterations (n=%d)", iterations, n)
    else:
        logger.warning("Power iteration did not converge within %d iterations (n=%d)", max_iter, n)

    # Rayleigh-style average of the component ratios
    Aw2 = A @ w
    lambda_max = float(np.sum(Aw2 / w) / n)

    return w, lambda_max

from dataclasses import dataclass

import numpy as np

from .aggregator import aggregate
from .consistency import classify_cr, consistency
from .eigen import MAX_ITER, TOLERANCE, power_iteration


@dataclass
class SolveResult:
    """Priority weights and consistency figures derived from one comparison matrix."""
    weights: np.ndarray
    lambda_max: float
    ci: float
    cr: float

    @property
    def level(self) -> str:
        return classify_cr(self.cr)

    def to_dict(self):
        return {
            "weights": [float(w) for w in self.weights],
            "lambdaMax": self.lambda_max,
            "ci": self.ci,
            "cr": self.cr,
        }


def solve(matrix, max_iter: int = MAX_ITER, tol: float = TOLERANCE) -> SolveResult:
    """Runs the eigenvector estimation and the consistency check on a single matrix."""
    A = np.asarray(matrix, dtype=float)
    weights, lambda_max = power_iteration(A, max_iter=max_iter, tol=tol)
    ci, cr = consistency(A.shape[0], lambda_max)
    return SolveResult(weights, lambda_max, ci, cr)


class AHPSolver:
    """
    Solves a two-level AHP hierarchy: goal -> criteria -> alternatives.

    Attributes:
        criteria_matrix (np.ndarray): Pairwise comparisons of the criteria.
        alternative_matrices (list): One pairwise comparison matrix of the alternatives per criterion.
        criteria_names (list, optional): Names of the criteria.
        alternative_names (list, optional): Names of the alternatives.
    """
    def __init__(self, criteria_matrix, alternative_matrices: list, criteria_names: list = None, alternative_names: list = None):
        self.criteria_matrix = np.array(criteria_matrix, dtype=float)
        self.alternative_matrices = [np.array(A, dtype=float) for A in alternative_matrices]

        if self.criteria_matrix.ndim != 2 or self.criteria_matrix.shape[0] != self.criteria_matrix.shape[1]:
            raise ValueError("Criteria matrix must be square")
        self.num_criteria = self.criteria_matrix.shape[0]

        if len(self.alternative_matrices) != self.num_criteria:
            raise ValueError("Number of alternative matrices must match number of criteria")
        if not self.alternative_matrices:
            raise ValueError("At least one criterion is required")
        self.num_alternatives = self.alternative_matrices[0].shape[0]
        for A in self.alternative_matrices:
            if A.shape != (self.num_alternatives, self.num_alternatives):
                raise ValueError("All alternative matrices must be square and of the same order")

        self.criteria_names = criteria_names or [f"Crit{j+1}" for j in range(self.num_criteria)]
        self.alternative_names = alternative_names or [f"Alt{i+1}" for i in range(self.num_alternatives)]

        if len(self.criteria_names) != self.num_criteria:
            raise ValueError("Number of criteria names must match number of criteria")
        if len(self.alternative_names) != self.num_alternatives:
            raise ValueError("Number of alternative names must match number of alternatives")

        self._criteria_result = None
        self._alternative_results = None
        self._scores = None
        self._ranking = None

    def solve(self):
        """Solves every matrix of the hierarchy and aggregates the results."""
        self._criteria_result = solve(self.criteria_matrix)
        self._alternative_results = [solve(A) for A in self.alternative_matrices]
        result = aggregate(
            self._criteria_result.weights,
            [r.weights for r in self._alternative_results],
            self.alternative_names,
        )
        self._scores = result.scores
        self._ranking = result.ranking

    def get_criteria_result(self) -> SolveResult:
        if self._criteria_result is None:
            self.solve()
        return self._criteria_result

    def get_alternative_results(self) -> list:
        if self._alternative_results is None:
            self.solve()
        return self._alternative_results

    def get_scores(self) -> np.ndarray:
        if self._scores is None:
            self.solve()
        return self._scores

    def get_ranking(self) -> list:
        """Returns (alternative name, score) pairs, best first."""
        if self._ranking is None:
            self.solve()
        return self._ranking

    def get_intermediate_results(self):
        """Returns a dictionary with the per-matrix results and the aggregated scores."""
        if self._ranking is None:
            self.solve()
        return {
            "criteria_weights": self._criteria_result.weights,
            "criteria_lambda_max": self._criteria_result.lambda_max,
            "criteria_ci": self._criteria_result.ci,
            "criteria_cr": self._criteria_result.cr,
            "alternative_weights": {
                name: r.weights for name, r in zip(self.criteria_names, self._alternative_results)
            },
            "alternative_cr": {
                name: r.cr for name, r in zip(self.criteria_names, self._alternative_results)
            },
            "scores": self._scores,
            "ranking": self._ranking,
        }

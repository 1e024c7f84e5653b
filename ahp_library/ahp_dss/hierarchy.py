"""
Problem state for the decision workflow.

The state is a plain JSON-serializable dict laid out as it is persisted:

    {problem: {name, goal}, criteria: [str], alternatives: [str],
     criteriaMatrix: [[float]], altMatrices: [[[float]]], activeCritIdx: int}

Every function returns a new state and leaves its argument untouched.
"""
import copy
import logging

from .matrix import build_neutral, set_pairwise

logger = logging.getLogger(__name__)

MIN_ITEMS = 2


def _neutral(n):
    return build_neutral(n).tolist()


def init_matrices(state):
    """Rebuilds every matrix of both levels as neutral matrices."""
    st = copy.deepcopy(state)
    st["criteriaMatrix"] = _neutral(len(st["criteria"]))
    st["altMatrices"] = [_neutral(len(st["alternatives"])) for _ in st["criteria"]]
    return st


def default_state():
    st = {
        "problem": {"name": "Logistics", "goal": "Select the best warehouse location"},
        "criteria": ["Transportation cost", "Delivery lead time", "Service reliability"],
        "alternatives": ["Location A", "Location B", "Location C"],
        "criteriaMatrix": [],
        "altMatrices": [],
        "activeCritIdx": 0,
    }
    return init_matrices(st)


def _check_labels(names, kind):
    names = [str(x) for x in names]
    if len(names) < MIN_ITEMS:
        raise ValueError(f"At least {MIN_ITEMS} {kind} are required, got {len(names)}")
    return names


def set_problem(state, name=None, goal=None):
    st = copy.deepcopy(state)
    if name is not None:
        st["problem"]["name"] = name
    if goal is not None:
        st["problem"]["goal"] = goal
    return st


def set_criteria(state, names):
    """Replaces the criteria. All judgments of both levels are discarded."""
    st = copy.deepcopy(state)
    st["criteria"] = _check_labels(names, "criteria")
    st["activeCritIdx"] = 0
    logger.info("Criteria replaced (%d), rebuilding all matrices", len(st["criteria"]))
    return init_matrices(st)


def set_alternatives(state, names):
    """Replaces the alternatives. All alternative-level judgments are discarded."""
    st = copy.deepcopy(state)
    st["alternatives"] = _check_labels(names, "alternatives")
    st["altMatrices"] = [_neutral(len(st["alternatives"])) for _ in st["criteria"]]
    logger.info("Alternatives replaced (%d), rebuilding alternative matrices", len(st["alternatives"]))
    return st


def add_criterion(state, name=None):
    names = list(state["criteria"])
    names.append(name if name is not None else f"C{len(names) + 1}")
    return set_criteria(state, names)


def add_alternative(state, name=None):
    names = list(state["alternatives"])
    names.append(name if name is not None else f"A{len(names) + 1}")
    return set_alternatives(state, names)


def remove_criterion(state, idx):
    names = list(state["criteria"])
    if not 0 <= idx < len(names):
        raise IndexError(f"Criterion index {idx} is out of range")
    if len(names) <= MIN_ITEMS:
        raise ValueError(f"Cannot remove a criterion: at least {MIN_ITEMS} are required")
    del names[idx]
    return set_criteria(state, names)


def remove_alternative(state, idx):
    names = list(state["alternatives"])
    if not 0 <= idx < len(names):
        raise IndexError(f"Alternative index {idx} is out of range")
    if len(names) <= MIN_ITEMS:
        raise ValueError(f"Cannot remove an alternative: at least {MIN_ITEMS} are required")
    del names[idx]
    return set_alternatives(state, names)


def apply_criteria_judgment(state, i, j, value):
    st = copy.deepcopy(state)
    st["criteriaMatrix"] = set_pairwise(st["criteriaMatrix"], i, j, value).tolist()
    return st


def apply_alternative_judgment(state, crit_idx, i, j, value):
    if not 0 <= crit_idx < len(state["altMatrices"]):
        raise IndexError(f"Criterion index {crit_idx} is out of range")
    st = copy.deepcopy(state)
    st["altMatrices"][crit_idx] = set_pairwise(st["altMatrices"][crit_idx], i, j, value).tolist()
    return st


def reset_criteria_matrix(state):
    st = copy.deepcopy(state)
    st["criteriaMatrix"] = _neutral(len(st["criteria"]))
    return st


def reset_alternative_matrix(state, crit_idx):
    if not 0 <= crit_idx < len(state["altMatrices"]):
        raise IndexError(f"Criterion index {crit_idx} is out of range")
    st = copy.deepcopy(state)
    st["altMatrices"][crit_idx] = _neutral(len(st["alternatives"]))
    return st


def set_active_criterion(state, idx):
    if not 0 <= idx < len(state["criteria"]):
        raise IndexError(f"Criterion index {idx} is out of range")
    st = copy.deepcopy(state)
    st["activeCritIdx"] = idx
    return st
